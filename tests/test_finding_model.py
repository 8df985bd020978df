"""
Tests for observation record normalization and canonical ordering
"""
from wrkr.schemas.finding import Finding, normalize_finding, sort_findings


class TestFindingNormalization:
    """Normalization of raw detector output"""

    def test_severity_normalizes_to_known_levels(self):
        assert Finding(severity=" HIGH ").severity == "high"
        assert Finding(severity="bogus").severity == "info"
        assert Finding(severity=None).severity == "info"

    def test_blank_org_defaults_to_local(self):
        assert Finding(org="  ").org == "local"
        assert Finding().org == "local"

    def test_strings_are_trimmed_and_blank_optionals_omitted(self):
        finding = Finding(finding_type=" tool_config ", rule_id="  ", location=" a.yml ", check_result=" PASS ")

        assert finding.finding_type == "tool_config"
        assert finding.location == "a.yml"
        assert finding.check_result == "pass"
        assert "rule_id" not in finding.to_dict()

    def test_permissions_are_deduplicated_and_sorted(self):
        finding = Finding(permissions=[" proc.exec", "db.write", "proc.exec", ""])
        assert finding.permissions == ["db.write", "proc.exec"]

    def test_single_permission_string_is_accepted(self):
        assert Finding(permissions="proc.exec").permissions == ["proc.exec"]

    def test_empty_permissions_are_omitted(self):
        finding = Finding(permissions=["", "  "])
        assert finding.permissions is None
        assert "permissions" not in finding.to_dict()

    def test_evidence_mapping_renders_scalars(self):
        finding = Finding(evidence={"trust_score": 0.8, "headless": True, "tools": ["a", "b"], " ": "dropped"})

        assert [(e.key, e.value) for e in finding.evidence] == [
            ("headless", "true"),
            ("tools", "a,b"),
            ("trust_score", "0.8"),
        ]

    def test_evidence_list_is_deduplicated_and_sorted(self):
        finding = Finding(
            evidence=[
                {"key": "transport", "value": "stdio"},
                {"key": "approval_gate", "value": "false"},
                {"key": "transport", "value": "stdio "},
                {"key": "", "value": "x"},
            ]
        )

        assert [(e.key, e.value) for e in finding.evidence] == [
            ("approval_gate", "false"),
            ("transport", "stdio"),
        ]

    def test_normalization_is_idempotent(self):
        raw = {
            "finding_type": " mcp_server ",
            "severity": "MEDIUM",
            "tool_type": "mcp",
            "location": ".mcp.json",
            "org": "",
            "permissions": ["proc.exec", "proc.exec"],
            "evidence": {"transport": "HTTP"},
            "parse_error": {"kind": " bad ", "format": "json"},
        }
        once = normalize_finding(raw)
        twice = normalize_finding(once)

        assert once == twice
        assert once.to_json() == twice.to_json()


class TestEvidenceAccessors:
    """Case-insensitive evidence lookups"""

    def test_value_lookup_is_case_insensitive_and_lowered(self):
        finding = Finding(evidence=[{"key": "Transport", "value": "HTTP"}])
        assert finding.evidence_value("transport") == "http"
        assert finding.evidence_value("missing") == ""

    def test_numeric_lookup_defaults_to_zero(self):
        finding = Finding(evidence={"trust_score": "4.5", "coverage": "n/a"})
        assert finding.evidence_float("trust_score") == 4.5
        assert finding.evidence_float("coverage") == 0.0
        assert finding.evidence_float("absent") == 0.0

    def test_boolean_lookup(self):
        finding = Finding(evidence={"headless": "TRUE", "approval_gate": "yes", "other": "1"})
        assert finding.evidence_bool("headless") is True
        assert finding.evidence_bool("approval_gate") is False
        assert finding.evidence_bool("other") is True


class TestCanonicalOrder:
    """Total order used by every output surface"""

    def test_severity_order(self):
        findings = [
            Finding(finding_type="tool_config", severity=severity, location="a")
            for severity in ("low", "critical", "medium", "high")
        ]
        ordered = sort_findings(findings)
        assert [f.severity for f in ordered] == ["critical", "high", "medium", "low"]

    def test_ties_break_on_type_then_location(self):
        findings = [
            Finding(finding_type="tool_config", location="b"),
            Finding(finding_type="mcp_server", location="z"),
            Finding(finding_type="tool_config", location="a"),
        ]
        ordered = sort_findings(findings)
        assert [(f.finding_type, f.location) for f in ordered] == [
            ("mcp_server", "z"),
            ("tool_config", "a"),
            ("tool_config", "b"),
        ]

    def test_order_is_independent_of_input_order(self):
        findings = [
            Finding(finding_type="secret_presence", severity="high", location="x", repo="r1"),
            Finding(finding_type="secret_presence", severity="high", location="x", repo="r0"),
            Finding(finding_type="parse_error", severity="medium", location="y"),
        ]
        forward = [f.to_dict() for f in sort_findings(findings)]
        backward = [f.to_dict() for f in sort_findings(reversed(findings))]
        assert forward == backward

    def test_records_differing_only_in_evidence_have_fixed_order(self):
        findings = [
            Finding(finding_type="tool_config", location=".claude/settings.json", evidence={"model": "sonnet"}),
            Finding(finding_type="tool_config", location=".claude/settings.json", evidence={"model": "opus"}),
        ]
        forward = [f.to_dict() for f in sort_findings(findings)]
        backward = [f.to_dict() for f in sort_findings(reversed(findings))]
        assert forward == backward
