# wrkr/schemas/finding.py
"""
Canonical observation record ("finding") shared by every pipeline stage.

Detectors, the policy evaluator and the snapshot loader all emit this shape.
Validation normalizes the record, and normalizing an already-normalized record
yields the same record.
"""
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ConfigDict, field_validator

from wrkr.core.constants import DEFAULT_ORG, SEVERITY_RANK, SeverityLevel
from wrkr.core.jsonvalue import as_list, as_map, as_string_list, scalar_string
from wrkr.schemas.base import WrkrModel


_TRUE_VALUES = {"1", "t", "true"}


def normalize_severity(value: Any) -> str:
    text = (scalar_string(value) or "").strip().lower()
    if text in SEVERITY_RANK:
        return text
    return SeverityLevel.INFO.value


def severity_rank(value: Any) -> int:
    return SEVERITY_RANK[normalize_severity(value)]


def _text(value: Any) -> str:
    return (scalar_string(value) or "").strip()


def _optional_text(value: Any) -> Optional[str]:
    return _text(value) or None


class Evidence(WrkrModel):
    key: str
    value: str = ""

    @field_validator("key", "value", mode="before")
    @classmethod
    def trim_scalar(cls, v):
        return _text(v)


class ParseError(WrkrModel):
    kind: str = ""
    format: str = ""
    path: str = ""
    detector: str = ""
    message: str = ""

    @field_validator("kind", "format", "path", "detector", "message", mode="before")
    @classmethod
    def trim_scalar(cls, v):
        return _text(v)


def _evidence_pairs(value: Any) -> List[Tuple[str, str]]:
    mapping = as_map(value)
    if mapping is not None:
        pairs = []
        for key, raw in mapping.items():
            items = as_string_list(raw) if as_list(raw) is not None else None
            text = ",".join(items) if items is not None else scalar_string(raw)
            pairs.append((key, text or ""))
        return pairs

    pairs = []
    for item in as_list(value) or []:
        if isinstance(item, Evidence):
            pairs.append((item.key, item.value))
            continue
        entry = as_map(item)
        if entry is None:
            continue
        pairs.append((scalar_string(entry.get("key")) or "", scalar_string(entry.get("value")) or ""))
    return pairs


def normalize_evidence(value: Any) -> Optional[List[Dict[str, str]]]:
    """Trim, drop blank keys, dedupe by key+value and sort by key then value."""
    seen = set()
    for key, text in _evidence_pairs(value):
        key = key.strip()
        if not key:
            continue
        seen.add((key, text.strip()))
    if not seen:
        return None
    return [{"key": key, "value": text} for key, text in sorted(seen)]


def normalize_permissions(value: Any) -> Optional[List[str]]:
    items = {item.strip() for item in (as_string_list(value) or []) if item.strip()}
    if not items:
        return None
    return sorted(items)


class Finding(WrkrModel):
    """
    One detector fact about one location in one repository.

    Fields:
    - finding_type: tag such as "mcp_server", "ci_autonomy", "policy_violation"
    - rule_id / check_result: set on policy check and violation records
    - severity: critical|high|medium|low|info (anything else becomes info)
    - location: repo-relative path, or the rule id for policy records
    - org: owning organization ("local" when unknown)
    - permissions: sorted, deduplicated permission tags
    - evidence: sorted, deduplicated key/value facts
    - parse_error: structured payload for "parse_error" records
    """
    model_config = ConfigDict(extra="ignore")

    finding_type: str = ""
    rule_id: Optional[str] = None
    check_result: Optional[str] = None
    severity: str = SeverityLevel.INFO.value
    remediation: Optional[str] = None
    tool_type: str = ""
    location: str = ""
    repo: Optional[str] = None
    org: str = DEFAULT_ORG
    detector: Optional[str] = None
    permissions: Optional[List[str]] = None
    autonomy: Optional[str] = None
    evidence: Optional[List[Evidence]] = None
    parse_error: Optional[ParseError] = None

    @field_validator("finding_type", "tool_type", "location", mode="before")
    @classmethod
    def trim_required(cls, v):
        return _text(v)

    @field_validator("rule_id", "remediation", "repo", "detector", "autonomy", mode="before")
    @classmethod
    def trim_optional(cls, v):
        return _optional_text(v)

    @field_validator("check_result", mode="before")
    @classmethod
    def normalize_check_result(cls, v):
        text = _optional_text(v)
        return text.lower() if text else None

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity_field(cls, v):
        return normalize_severity(v)

    @field_validator("org", mode="before")
    @classmethod
    def default_org(cls, v):
        return _text(v) or DEFAULT_ORG

    @field_validator("permissions", mode="before")
    @classmethod
    def normalize_permissions_field(cls, v):
        return normalize_permissions(v)

    @field_validator("evidence", mode="before")
    @classmethod
    def normalize_evidence_field(cls, v):
        return normalize_evidence(v)

    # --- evidence / permission accessors ---

    def evidence_value(self, key: str) -> str:
        """Lower-cased value of the first evidence entry named ``key`` ("" if absent)."""
        needle = key.strip().lower()
        for item in self.evidence or []:
            if item.key.lower() == needle:
                return item.value.strip().lower()
        return ""

    def evidence_float(self, key: str) -> float:
        try:
            parsed = float(self.evidence_value(key))
        except ValueError:
            return 0.0
        if not math.isfinite(parsed):
            return 0.0
        return parsed

    def evidence_bool(self, key: str) -> bool:
        return self.evidence_value(key) in _TRUE_VALUES

    def has_permission(self, tag: str) -> bool:
        needle = tag.strip().lower()
        return any(p.lower() == needle for p in self.permissions or [])

    def canonical_key(self) -> str:
        """``type|rule|toolType|location|repo|org`` identity of the record."""
        parts = [
            self.finding_type,
            self.rule_id or "",
            self.tool_type,
            self.location,
            self.repo or "",
            self.org,
        ]
        return "|".join(parts)


def normalize_finding(item: Any) -> Finding:
    if isinstance(item, Finding):
        return Finding.model_validate(item.model_dump())
    return Finding.model_validate(item)


def finding_sort_key(item: Finding) -> Tuple:
    return (
        severity_rank(item.severity),
        item.finding_type,
        item.rule_id or "",
        item.tool_type,
        item.location,
        item.repo or "",
        item.org,
        item.detector or "",
        ",".join(item.permissions or []),
        item.model_dump_json(),
    )


def sort_findings(findings: Iterable[Any]) -> List[Finding]:
    """Normalize every record and return them in canonical presentation order."""
    return sorted((normalize_finding(f) for f in findings), key=finding_sort_key)
