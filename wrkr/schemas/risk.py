# wrkr/schemas/risk.py
from typing import List, Optional

from wrkr.core.constants import AutonomyLevel, DataClass, EndpointClass
from wrkr.schemas.base import WrkrModel
from wrkr.schemas.finding import Finding


class ScoredFinding(WrkrModel):
    canonical_key: str
    risk_score: float
    blast_radius: float
    privilege_level: float
    trust_deficit: float
    endpoint_class: str = EndpointClass.WORKSPACE.value
    data_class: str = DataClass.CODE.value
    autonomy_level: str = AutonomyLevel.INTERACTIVE.value
    reasons: List[str] = []
    finding: Finding


class RepoAggregate(WrkrModel):
    org: str
    repo: str
    combined_risk_score: float
    highest_autonomy: str = AutonomyLevel.INTERACTIVE.value


class RiskReport(WrkrModel):
    generated_at: Optional[str] = None
    top_findings: List[ScoredFinding] = []
    ranked_findings: List[ScoredFinding] = []
    repo_risk: List[RepoAggregate] = []
