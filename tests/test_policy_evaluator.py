"""
Tests for policy rule evaluation
"""
from wrkr.policy.evaluator import UNKNOWN_KIND_DETAIL, evaluate
from wrkr.schemas.finding import Finding
from wrkr.schemas.policy import Rule


def _rule(rule_id, kind, severity="high"):
    return Rule(id=rule_id, title=f"{kind} rule", severity=severity, kind=kind, remediation="fix it")


def _by_type(records, finding_type):
    return [r for r in records if r.finding_type == finding_type]


def _detail(record):
    return next(e.value for e in record.evidence if e.key == "detail")


class TestRuleEvaluation:

    def test_missing_tool_config_fails_with_violation(self):
        records = evaluate("acme/app", "acme", [], [_rule("WRKR-001", "require_tool_config")])

        checks = _by_type(records, "policy_check")
        violations = _by_type(records, "policy_violation")
        assert len(checks) == 1
        assert checks[0].check_result == "fail"
        assert _detail(checks[0]) == "tool_config=0"
        assert len(violations) == 1
        assert violations[0].rule_id == "WRKR-001"

    def test_present_tool_config_passes(self):
        findings = [Finding(finding_type="tool_config", tool_type="claude", location=".claude/settings.json")]
        records = evaluate("acme/app", "acme", findings, [_rule("WRKR-001", "require_tool_config")])

        assert len(records) == 1
        assert records[0].check_result == "pass"
        assert _detail(records[0]) == "tool_config=1"

    def test_finding_type_count_is_case_insensitive(self):
        findings = [Finding(finding_type="SECRET_PRESENCE", location="x")]
        records = evaluate(None, None, findings, [_rule("WRKR-002", "block_secret_presence")])
        assert _detail(records[0]) == "secret_presence=1"

    def test_unknown_kind_fails_loudly(self):
        records = evaluate("r", "o", [], [_rule("ACME-1", "made_up_kind")])

        check = _by_type(records, "policy_check")[0]
        assert check.check_result == "fail"
        assert _detail(check) == UNKNOWN_KIND_DETAIL
        assert len(_by_type(records, "policy_violation")) == 1

    def test_headless_requires_gate(self):
        findings = [
            Finding(finding_type="ci_autonomy", autonomy="headless_auto", location="a.yml"),
            Finding(finding_type="ci_autonomy", autonomy="headless_gated", location="b.yml"),
        ]
        records = evaluate("r", "o", findings, [_rule("WRKR-004", "headless_requires_gate")])
        assert _detail(records[0]) == "headless_auto=1"
        assert records[0].check_result == "fail"

    def test_skill_exec_plus_credentials(self):
        findings = [
            Finding(finding_type="skill_metrics", permissions=["proc.exec"], location=".agents/skills"),
            Finding(finding_type="secret_presence", location=".env"),
        ]
        records = evaluate("r", "o", findings, [_rule("WRKR-013", "skill_exec_plus_credentials")])
        assert _detail(records[0]) == "has_exec=true,has_credentials=true"
        assert records[0].check_result == "fail"

    def test_skill_exec_without_credentials_passes(self):
        findings = [Finding(finding_type="skill_metrics", permissions=["proc.exec"], location=".agents/skills")]
        records = evaluate("r", "o", findings, [_rule("WRKR-013", "skill_exec_plus_credentials")])
        assert _detail(records[0]) == "has_exec=true,has_credentials=false"
        assert records[0].check_result == "pass"

    def test_sprawl_ratio_uses_maximum(self):
        findings = [
            Finding(
                finding_type="skill_metrics",
                location="a",
                evidence={"skill_privilege_concentration.exec_ratio": "0.80"},
            ),
            Finding(
                finding_type="skill_metrics",
                location="b",
                evidence={"skill_privilege_concentration.exec_ratio": "0.20"},
            ),
        ]
        records = evaluate("r", "o", findings, [_rule("WRKR-015", "skill_sprawl_exec_ratio", "medium")])
        assert _detail(records[0]) == "exec_ratio=0.80"
        assert records[0].check_result == "fail"

    def test_fixed_pass_rules_always_emit_a_check(self):
        records = evaluate("r", "o", [], [_rule("WRKR-010", "policy_rule_pack_loaded")])
        assert len(records) == 1
        assert records[0].check_result == "pass"
        assert _detail(records[0]) == "rule pack loaded"


class TestPolicyRecords:

    def test_record_shape(self):
        records = evaluate("acme/app", "", [], [_rule("WRKR-001", "require_tool_config")])
        check = _by_type(records, "policy_check")[0]
        violation = _by_type(records, "policy_violation")[0]

        assert check.tool_type == "policy"
        assert check.detector == "policy"
        assert check.location == "WRKR-001"
        assert check.org == "local"
        assert check.remediation == "fix it"
        assert {e.key for e in check.evidence} == {"title", "version", "detail"}
        assert {e.key for e in violation.evidence} == {"title", "detail"}
        assert violation.check_result == "fail"

    def test_full_catalog_emits_one_check_per_rule(self, catalogs):
        records = evaluate("acme/app", "acme", [], catalogs.rules)

        assert len(_by_type(records, "policy_check")) == 15
        failed = sorted(r.rule_id for r in _by_type(records, "policy_violation"))
        assert failed == ["WRKR-001", "WRKR-005", "WRKR-006", "WRKR-012"]

    def test_output_is_independent_of_input_order(self, catalogs, inventory_findings):
        forward = evaluate("acme/app", "acme", inventory_findings, catalogs.rules)
        backward = evaluate("acme/app", "acme", list(reversed(inventory_findings)), list(reversed(catalogs.rules)))
        assert [r.to_dict() for r in forward] == [r.to_dict() for r in backward]
