"""
Tests for rule catalog loading and override merging
"""
import pytest

from wrkr.core.errors import CatalogError
from wrkr.policy.loader import load_builtin_rules, load_override_documents, load_rules


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


class TestBuiltinRules:

    def test_builtin_pack_has_fifteen_sorted_rules(self):
        rules = load_rules()
        assert [r.id for r in rules] == [f"WRKR-{i:03d}" for i in range(1, 16)]

    def test_builtin_kinds(self):
        kinds = {r.id: r.kind for r in load_builtin_rules()}
        assert kinds["WRKR-001"] == "require_tool_config"
        assert kinds["WRKR-013"] == "skill_exec_plus_credentials"
        assert kinds["WRKR-015"] == "skill_sprawl_exec_ratio"

    def test_every_rule_has_version(self):
        assert all(r.version >= 1 for r in load_rules())


class TestOverrides:
    """Embedded pack, then --policy file, then <repo_root>/wrkr-policy.yaml"""

    def test_policy_file_replaces_rule_by_id(self, tmp_path):
        policy = _write(
            tmp_path / "custom.yaml",
            "rules:\n"
            "  - id: WRKR-001\n"
            "    title: Custom tool config\n"
            "    severity: CRITICAL\n"
            "    kind: require_tool_config\n"
            "    version: 0\n"
            "  - id: ACME-100\n"
            "    title: Extra\n"
            "    kind: no_parse_errors\n",
        )
        rules = {r.id: r for r in load_rules(load_override_documents(policy_path=str(policy)))}

        assert rules["WRKR-001"].title == "Custom tool config"
        assert rules["WRKR-001"].severity == "critical"
        assert rules["WRKR-001"].version == 1
        assert "ACME-100" in rules
        assert len(rules) == 16

    def test_repo_local_file_wins_over_policy_file(self, tmp_path):
        policy = _write(
            tmp_path / "custom.yaml",
            "rules:\n  - {id: WRKR-002, title: From policy, kind: block_secret_presence}\n",
        )
        repo_root = tmp_path / "repo"
        repo_root.mkdir()
        _write(
            repo_root / "wrkr-policy.yaml",
            "rules:\n  - {id: WRKR-002, title: From repo, kind: block_secret_presence}\n",
        )
        overrides = load_override_documents(policy_path=str(policy), repo_root=str(repo_root))
        rules = {r.id: r for r in load_rules(overrides)}

        assert rules["WRKR-002"].title == "From repo"

    def test_missing_repo_local_file_is_ignored(self, tmp_path):
        assert load_override_documents(repo_root=str(tmp_path)) == []

    def test_override_without_rules_is_allowed(self, tmp_path):
        policy = _write(tmp_path / "profiles-only.yaml", "profiles:\n  strict:\n    min_compliance: 90\n")
        assert len(load_rules(load_override_documents(policy_path=str(policy)))) == 15

    def test_rule_missing_kind_fails(self, tmp_path):
        policy = _write(tmp_path / "bad.yaml", "rules:\n  - {id: WRKR-900, title: No kind}\n")
        with pytest.raises(CatalogError):
            load_rules(load_override_documents(policy_path=str(policy)))

    def test_unreadable_policy_path_fails(self, tmp_path):
        with pytest.raises(CatalogError):
            load_override_documents(policy_path=str(tmp_path / "missing.yaml"))

    def test_invalid_yaml_fails(self, tmp_path):
        policy = _write(tmp_path / "broken.yaml", "rules: [unclosed\n")
        with pytest.raises(CatalogError):
            load_override_documents(policy_path=str(policy))
