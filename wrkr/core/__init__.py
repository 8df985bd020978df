"""Ambient stack: configuration, logging, constants, errors and catalogs."""
