# wrkr/pipeline.py
"""
End-to-end decision pass: policy per repository, batch scoring, planning.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from wrkr.core.catalog import Catalogs
from wrkr.core.constants import DEFAULT_ORG
from wrkr.policy.evaluator import evaluate
from wrkr.remediation.planner import build_plan
from wrkr.risk.scoring import score_findings
from wrkr.schemas.finding import Finding, normalize_finding, sort_findings
from wrkr.schemas.plan import Plan
from wrkr.schemas.risk import RiskReport

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    findings: List[Finding]
    risk_report: RiskReport
    plan: Plan


def group_by_repo(findings: Iterable[Finding]) -> Dict[Tuple[str, str], List[Finding]]:
    groups: Dict[Tuple[str, str], List[Finding]] = {}
    for finding in findings:
        groups.setdefault((finding.org, finding.repo or ""), []).append(finding)
    if not groups:
        groups[(DEFAULT_ORG, "")] = []
    return groups


def policy_records(findings: Iterable[Finding], catalogs: Catalogs) -> List[Finding]:
    """Check and violation records for every (org, repo) group of the batch."""
    records = []
    for (org, repo), group in sorted(group_by_repo(findings).items()):
        records.extend(evaluate(repo or None, org, group, catalogs.rules))
    return sort_findings(records)


def evaluate_policy(findings: Iterable[Finding], catalogs: Catalogs) -> List[Finding]:
    """Observations plus their policy records, canonically sorted."""
    observed = [normalize_finding(f) for f in findings]
    return sort_findings(observed + policy_records(observed, catalogs))


def run_pipeline(
    findings: Iterable[Finding],
    catalogs: Catalogs,
    top: int,
    generated_at: Optional[str] = None,
) -> PipelineResult:
    combined = evaluate_policy(findings, catalogs)
    report = score_findings(combined, top, generated_at=generated_at)
    plan = build_plan(report.ranked_findings, top, catalogs.templates)
    logger.info(
        "Pipeline completed",
        extra={"findings": len(combined), "fingerprint": plan.fingerprint},
    )
    return PipelineResult(findings=combined, risk_report=report, plan=plan)
