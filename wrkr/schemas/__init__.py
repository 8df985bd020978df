"""Pydantic models for observation records, policy, risk and remediation output."""
from wrkr.schemas.finding import Evidence, Finding, ParseError
from wrkr.schemas.plan import Plan, PlanArtifact, Remediation, Skipped
from wrkr.schemas.policy import Profile, ProfileResult, Rule
from wrkr.schemas.risk import RepoAggregate, RiskReport, ScoredFinding

__all__ = [
    "Evidence",
    "Finding",
    "ParseError",
    "Plan",
    "PlanArtifact",
    "Profile",
    "ProfileResult",
    "Remediation",
    "RepoAggregate",
    "RiskReport",
    "Rule",
    "ScoredFinding",
    "Skipped",
]
