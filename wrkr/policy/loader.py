# wrkr/policy/loader.py
"""
Policy rule catalog loading.

The embedded baseline pack is merged with optional override files: first the
caller-supplied policy path, then ``<repo_root>/wrkr-policy.yaml`` when it
exists. Later sources replace earlier rules by id.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from wrkr.core.errors import CatalogError
from wrkr.core.jsonvalue import as_list, as_map, scalar_string
from wrkr.schemas.policy import Rule

logger = logging.getLogger(__name__)

BUILTIN_RULES_PATH = Path(__file__).parent / "rules" / "builtin.yaml"
LOCAL_POLICY_FILE = "wrkr-policy.yaml"

# (source label, parsed document)
OverrideDocument = Tuple[str, Dict[str, Any]]


def read_yaml_document(path: Path, source: str) -> Dict[str, Any]:
    """Read a YAML mapping document; an empty file is an empty mapping."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"read {source} {path}: {e}") from e
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CatalogError(f"parse {source} {path}: {e}") from e
    if document is None:
        return {}
    mapping = as_map(document)
    if mapping is None:
        raise CatalogError(f"parse {source} {path}: top level must be a mapping")
    return mapping


def override_paths(policy_path: Optional[str], repo_root: Optional[str]) -> List[Path]:
    paths = []
    if policy_path and policy_path.strip():
        paths.append(Path(policy_path))
    if repo_root and repo_root.strip():
        local_path = Path(repo_root) / LOCAL_POLICY_FILE
        if local_path.is_file():
            paths.append(local_path)
    return paths


def load_override_documents(
    policy_path: Optional[str] = None, repo_root: Optional[str] = None
) -> List[OverrideDocument]:
    documents = []
    for path in override_paths(policy_path, repo_root):
        documents.append((str(path), read_yaml_document(path, "policy overrides")))
        logger.info("Loaded policy overrides", extra={"source": str(path)})
    return documents


def _required(entry: Dict[str, Any], key: str) -> str:
    return (scalar_string(entry.get(key)) or "").strip()


def parse_rule_pack(document: Dict[str, Any], source: str) -> List[Rule]:
    raw_rules = document.get("rules")
    if raw_rules is None:
        return []
    entries = as_list(raw_rules)
    if entries is None:
        raise CatalogError(f"policy rules in {source}: 'rules' must be a list")

    rules = []
    for entry in entries:
        fields = as_map(entry)
        if fields is None:
            raise CatalogError(f"policy rules in {source}: rule entries must be mappings")
        if not (_required(fields, "id") and _required(fields, "title") and _required(fields, "kind")):
            raise CatalogError(f"policy rule missing required fields in {source}")
        try:
            rules.append(
                Rule.model_validate(
                    {
                        "id": _required(fields, "id"),
                        "title": _required(fields, "title"),
                        "kind": _required(fields, "kind"),
                        "severity": scalar_string(fields.get("severity")),
                        "remediation": scalar_string(fields.get("remediation")) or "",
                        "version": fields.get("version"),
                    }
                )
            )
        except ValidationError as e:
            raise CatalogError(f"policy rule invalid in {source}: {e}") from e
    return rules


def load_builtin_rules() -> List[Rule]:
    document = read_yaml_document(BUILTIN_RULES_PATH, "embedded builtin rule pack")
    return parse_rule_pack(document, "embedded builtin rule pack")


def load_rules(overrides: Optional[List[OverrideDocument]] = None) -> List[Rule]:
    """Merge the embedded pack with override documents; result is sorted by id."""
    rules_by_id = {rule.id: rule for rule in load_builtin_rules()}
    for source, document in overrides or []:
        for rule in parse_rule_pack(document, source):
            rules_by_id[rule.id] = rule
    return [rules_by_id[rule_id] for rule_id in sorted(rules_by_id)]
