"""
Tests for the wrkr command line
"""
import json

import pytest

from wrkr.cli import main
from wrkr.core.config import settings


@pytest.fixture(autouse=True)
def quiet_logs(monkeypatch):
    """Keep log records out of captured stderr"""
    monkeypatch.setattr(settings, "LOG_LEVEL", "CRITICAL")


class TestScoreCommand:

    def test_json_report(self, write_snapshot, capsys):
        path = write_snapshot(
            [{"finding_type": "ci_autonomy", "severity": "high", "tool_type": "github_actions", "location": ".github/workflows/a.yml", "repo": "acme/app"}]
        )
        exit_code = main(["--json", "score", "--input", str(path)])

        assert exit_code == 0
        report = json.loads(capsys.readouterr().out)
        assert report["ranked_findings"][0]["risk_score"] == 7.4
        assert "generated_at" in report

    def test_with_policy_adds_records(self, write_snapshot, capsys):
        path = write_snapshot([])
        assert main(["--json", "score", "--input", str(path), "--with-policy", "--top", "0"]) == 0

        report = json.loads(capsys.readouterr().out)
        assert any(s["finding"]["finding_type"] == "policy_violation" for s in report["ranked_findings"])

    def test_human_summary(self, write_snapshot, capsys):
        path = write_snapshot([])
        assert main(["score", "--input", str(path)]) == 0
        assert capsys.readouterr().out.startswith("ranked 0 findings")


class TestEvaluateCommand:

    def test_evaluate_as_repo(self, write_snapshot, capsys):
        path = write_snapshot([{"finding_type": "tool_config", "location": ".claude/settings.json"}])
        assert main(["--json", "evaluate", "--input", str(path), "--repo", "acme/app", "--org", "acme"]) == 0

        records = json.loads(capsys.readouterr().out)["findings"]
        assert {r["repo"] for r in records} == {"acme/app"}


class TestProfileCommand:

    def test_failing_profile_exits_3(self, write_snapshot, capsys):
        path = write_snapshot([])
        assert main(["--json", "profile", "--input", str(path), "--name", "strict"]) == 3
        assert json.loads(capsys.readouterr().out)["status"] == "fail"

    def test_passing_profile(self, write_snapshot, inventory_findings, capsys):
        path = write_snapshot([f.to_dict() for f in inventory_findings])
        assert main(["--json", "profile", "--input", str(path), "--name", "strict"]) == 0
        assert json.loads(capsys.readouterr().out)["compliance_percent"] == 100.0

    def test_unknown_profile_is_runtime_failure(self, write_snapshot, capsys):
        path = write_snapshot([])
        assert main(["--json", "profile", "--input", str(path), "--name", "lenient"]) == 1
        assert json.loads(capsys.readouterr().err)["error"]["code"] == "runtime_failure"


class TestFixCommand:

    def test_plan_and_artifacts(self, write_snapshot, tmp_path, capsys):
        path = write_snapshot([])
        out_dir = tmp_path / "out"
        assert main(["--json", "fix", "--input", str(path), "--top", "2", "--write-artifacts", str(out_dir)]) == 0

        plan = json.loads(capsys.readouterr().out)
        plan_dir = out_dir / ".wrkr" / "remediations" / plan["fingerprint"]
        assert (plan_dir / "plan.json").is_file()
        assert len(list(plan_dir.glob("*.patch"))) == 2


class TestErrors:

    def test_missing_input_exits_6(self, tmp_path, capsys):
        exit_code = main(["--json", "score", "--input", str(tmp_path / "absent.json")])

        assert exit_code == 6
        error = json.loads(capsys.readouterr().err)["error"]
        assert error == {"code": "invalid_input", "message": error["message"], "exit_code": 6}

    def test_bad_arguments_exit_6(self, capsys):
        assert main(["score", "--top", "many"]) == 6
        assert "invalid_input" in capsys.readouterr().err
