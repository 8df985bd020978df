"""
End-to-end pipeline tests: policy per repository, scoring, planning
"""
from wrkr.pipeline import evaluate_policy, group_by_repo, policy_records, run_pipeline
from wrkr.schemas.finding import Finding


class TestPolicyGrouping:

    def test_empty_batch_evaluates_once_for_local(self, catalogs):
        records = policy_records([], catalogs)

        assert len([r for r in records if r.finding_type == "policy_check"]) == 15
        assert {r.org for r in records} == {"local"}
        assert all(r.repo is None for r in records)

    def test_each_repo_is_evaluated(self, catalogs):
        findings = [
            Finding(finding_type="tool_config", location="a", repo="acme/app", org="acme"),
            Finding(finding_type="tool_config", location="a", repo="acme/api", org="acme"),
        ]
        assert sorted(group_by_repo(findings)) == [("acme", "acme/api"), ("acme", "acme/app")]

        records = policy_records(findings, catalogs)
        checks = [r for r in records if r.finding_type == "policy_check"]
        assert len(checks) == 30
        assert {r.repo for r in checks} == {"acme/app", "acme/api"}

    def test_observations_are_kept(self, catalogs, inventory_findings):
        combined = evaluate_policy(inventory_findings, catalogs)

        assert len(combined) == len(inventory_findings) + 15
        assert not [r for r in combined if r.finding_type == "policy_violation"]


class TestRunPipeline:

    def test_violations_rank_first_in_plan(self, catalogs):
        result = run_pipeline([], catalogs, 3, generated_at="2026-01-01T00:00:00Z")

        remediations = result.plan.remediations
        assert [r.template_id for r in remediations] == ["WRKR-001", "WRKR-005", "WRKR-006"]
        assert {r.finding.finding_type for r in remediations} == {"policy_violation"}
        assert result.risk_report.generated_at == "2026-01-01T00:00:00Z"

    def test_pipeline_is_deterministic(self, catalogs, ci_finding, inventory_findings):
        findings = [ci_finding, *inventory_findings]
        forward = run_pipeline(findings, catalogs, 3)
        backward = run_pipeline(list(reversed(findings)), catalogs, 3)

        assert forward.plan.to_json() == backward.plan.to_json()
        assert forward.risk_report.to_json() == backward.risk_report.to_json()

    def test_top_limits_plan_and_report(self, catalogs, ci_finding):
        result = run_pipeline([ci_finding], catalogs, 2)

        assert result.plan.requested_top == 2
        assert len(result.plan.remediations) == 2
        assert len(result.risk_report.top_findings) == 2
