"""
Tests for the remediation template catalog
"""
import pytest

from wrkr.core.errors import CatalogError
from wrkr.remediation.templates import load_templates, parse_templates


class TestEmbeddedTemplates:

    def test_catalog_covers_rules_and_fixed_templates(self):
        templates = load_templates()

        for i in range(1, 16):
            assert f"WRKR-{i:03d}" in templates
        for template_id in ("DEPENDENCY-PIN", "MCP-PIN-LOCK", "CI-GATE-ADD", "MANIFEST-GENERATE"):
            assert template_id in templates
        assert len(templates) == 19

    def test_hints_are_sorted(self):
        for template in load_templates().values():
            assert template.hints == sorted(set(template.hints))


class TestParseTemplates:

    def test_hints_are_trimmed_and_deduplicated(self):
        templates = parse_templates(
            {
                "templates": [
                    {
                        "id": "X-1",
                        "category": "c",
                        "title": "t",
                        "commit_prefix": "fix:",
                        "hints": [" b ", "a", "b", ""],
                    }
                ]
            },
            "test",
        )
        assert templates["X-1"].hints == ["a", "b"]

    def test_empty_catalog_fails(self):
        with pytest.raises(CatalogError):
            parse_templates({"templates": []}, "test")

    def test_missing_required_field_fails(self):
        with pytest.raises(CatalogError):
            parse_templates({"templates": [{"id": "X-1", "category": "c", "title": "t"}]}, "test")

    def test_duplicate_id_fails(self):
        entry = {"id": "X-1", "category": "c", "title": "t", "commit_prefix": "fix:"}
        with pytest.raises(CatalogError):
            parse_templates({"templates": [entry, dict(entry)]}, "test")
