# wrkr/schemas/plan.py
from typing import List, Optional

from wrkr.schemas.base import WrkrModel
from wrkr.schemas.finding import Finding


class Remediation(WrkrModel):
    """One deterministic fix intent: template, patch preview and commit message."""
    id: str
    template_id: str
    category: str
    rule_id: Optional[str] = None
    title: str
    rationale: str
    commit_message: str
    patch_preview: str
    finding: Finding


class Skipped(WrkrModel):
    """A ranked candidate the planner inspected and refused to auto-fix."""
    canonical_key: str
    finding_type: str
    rule_id: Optional[str] = None
    location: Optional[str] = None
    reason_code: str
    message: str


class Plan(WrkrModel):
    requested_top: int
    fingerprint: str
    remediations: List[Remediation] = []
    skipped: List[Skipped] = []


class PlanArtifact(WrkrModel):
    path: str
    content: str
    commit_message: str
