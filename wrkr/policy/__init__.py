"""Policy rule catalog, evaluation and compliance profiles."""
