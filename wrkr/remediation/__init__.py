"""Remediation templates, planning and artifact rendering."""
