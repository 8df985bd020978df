# wrkr/schemas/policy.py
from typing import Dict, List

from pydantic import field_validator

from wrkr.schemas.base import WrkrModel


class Rule(WrkrModel):
    """Policy rule: ``kind`` selects the evaluation predicate."""
    id: str
    title: str
    severity: str = "info"
    remediation: str = ""
    kind: str
    version: int = 1

    @field_validator("id", "title", "kind", "remediation", mode="before")
    @classmethod
    def trim(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("severity", mode="before")
    @classmethod
    def lower_severity(cls, v):
        if v is None:
            return "info"
        return str(v).strip().lower() or "info"

    @field_validator("version", mode="before")
    @classmethod
    def default_version(cls, v):
        return v or 1


class Profile(WrkrModel):
    name: str
    description: str = ""
    min_compliance: float = 0.0
    rule_thresholds: Dict[str, int] = {}


class ProfileResult(WrkrModel):
    """Outcome of evaluating policy records against a compliance profile."""
    profile: str
    compliance_percent: float
    compliance_delta: float = 0.0
    min_compliance: float
    status: str
    failing_rules: List[str] = []
    rationale: List[str] = []
