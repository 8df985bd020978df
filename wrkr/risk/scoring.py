# wrkr/risk/scoring.py
"""
Risk scoring, correlation, ranking and repository aggregation.

Score = blast radius + privilege level + trust deficit, amplified by the
autonomy multiplier and by finding-type adjustments, clamped to [0, 10] and
rounded to two decimals. Every contributing term is recorded as a reason.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from wrkr.core.constants import (
    EVIDENCE_COVERAGE,
    EVIDENCE_EXEC_WRITE_RATIO,
    EVIDENCE_POLICY_POSTURE,
    EVIDENCE_SPRAWL_EXEC,
    EVIDENCE_SPRAWL_TOTAL,
    EVIDENCE_SPRAWL_WRITE,
    EVIDENCE_TOOL_SEQUENCE,
    EVIDENCE_TRUST_SCORE,
    GATEWAY_POLICY_TOOL,
    MAX_RISK_SCORE,
    PERMISSION_DB_WRITE,
    PERMISSION_EXEC,
    PERMISSION_HEADLESS_EXEC,
    PERMISSION_SECRET_READ,
    PERMISSION_WRITE,
    SEVERITY_BASE,
    SKILL_CONFLICT_RULE_ID,
    SKILL_CONFLICT_SCORE_FLOOR,
    DataClass,
    EndpointClass,
    FindingType,
)
from wrkr.core.rounding import round2_fixed
from wrkr.risk.autonomy import autonomy_multiplier, autonomy_rank
from wrkr.risk.classify import autonomy_level, data_class, endpoint_class
from wrkr.schemas.finding import Finding, normalize_severity, severity_rank, sort_findings
from wrkr.schemas.risk import RepoAggregate, RiskReport, ScoredFinding

logger = logging.getLogger(__name__)

# Checked in order; the first tag contained in a permission wins
PERMISSION_WEIGHTS: List[Tuple[str, float]] = [
    (PERMISSION_EXEC, 2.4),
    (PERMISSION_WRITE, 1.8),
    (PERMISSION_DB_WRITE, 2.1),
    (PERMISSION_SECRET_READ, 2.0),
    (PERMISSION_HEADLESS_EXEC, 1.3),
]
OTHER_PERMISSION_WEIGHT = 0.4

COVERAGE_ADJUSTMENT: Dict[str, float] = {
    "unprotected": 1.8,
    "unknown": 1.0,
    "protected": -0.4,
}

TRUST_DEFICIT_FLOOR = 0.2
POLICY_VIOLATION_WEIGHT = 0.6
SKILL_EXEC_BONUS = 1.5
SKILL_SPRAWL_BONUS = 1.2
REPO_MEAN_WEIGHT = 0.25


def severity_base(severity: str) -> float:
    return SEVERITY_BASE[normalize_severity(severity)]


def canonical_key(finding: Finding) -> str:
    """Correlation key: skill-conflict signals of one org/repo collapse into one entry."""
    is_conflict_rule = (
        finding.finding_type in (FindingType.POLICY_VIOLATION.value, FindingType.POLICY_CHECK.value)
        and finding.rule_id == SKILL_CONFLICT_RULE_ID
    )
    if is_conflict_rule or finding.finding_type == FindingType.SKILL_POLICY_CONFLICT.value:
        return f"{FindingType.SKILL_POLICY_CONFLICT.value}:{finding.org}:{finding.repo or ''}"
    return finding.canonical_key()


def blast_radius(finding: Finding, endpoint: str) -> float:
    radius = severity_base(finding.severity)
    if endpoint == EndpointClass.CI_PIPELINE.value:
        radius += 1.8
    if endpoint == EndpointClass.NETWORK_SERVICE.value:
        radius += 1.2
    if finding.finding_type == FindingType.COMPILED_ACTION.value:
        radius += 0.8
    return radius


def privilege_level(finding: Finding) -> float:
    level = 1.0
    for permission in finding.permissions or []:
        normalized = permission.lower()
        for tag, weight in PERMISSION_WEIGHTS:
            if tag in normalized:
                level += weight
                break
        else:
            level += OTHER_PERMISSION_WEIGHT
    if finding.finding_type == FindingType.SECRET_PRESENCE.value:
        level += 2.0
    return level


def trust_deficit(finding: Finding, data: str) -> float:
    deficit = 0.8
    if finding.finding_type == FindingType.PARSE_ERROR.value:
        deficit += 1.2
    if finding.finding_type == FindingType.POLICY_VIOLATION.value:
        deficit += 1.8
    if finding.finding_type == FindingType.SKILL_POLICY_CONFLICT.value:
        deficit += 2.4
    if finding.finding_type == FindingType.MCP_SERVER.value:
        trust = finding.evidence_float(EVIDENCE_TRUST_SCORE)
        if trust > 0:
            deficit += (10 - trust) / 3
    deficit += COVERAGE_ADJUSTMENT.get(finding.evidence_value(EVIDENCE_COVERAGE), 0.0)
    if finding.evidence_value(EVIDENCE_POLICY_POSTURE) == "allow":
        deficit += 0.6
    if data == DataClass.CREDENTIALS.value:
        deficit += 1.4
    if GATEWAY_POLICY_TOOL in finding.tool_type.lower():
        deficit -= 0.6
    return max(deficit, TRUST_DEFICIT_FLOOR)


def compiled_action_factor(finding: Finding) -> float:
    sequence = finding.evidence_value(EVIDENCE_TOOL_SEQUENCE)
    if "gait.eval.script" in sequence or "mcp" in sequence:
        return 1.35
    if "claude" in sequence or "codex" in sequence:
        return 1.2
    return 1.1


def score_finding(finding: Finding) -> ScoredFinding:
    endpoint = endpoint_class(finding)
    data = data_class(finding)
    autonomy = autonomy_level(finding)

    blast = blast_radius(finding, endpoint)
    privilege = privilege_level(finding)
    deficit = trust_deficit(finding, data)
    score = blast + privilege + deficit

    reasons = [
        f"blast_radius={blast:.2f}",
        f"privilege_level={privilege:.2f}",
        f"trust_deficit={deficit:.2f}",
    ]

    multiplier = autonomy_multiplier(autonomy)
    if multiplier > 1:
        score *= multiplier
        reasons.append(f"autonomy_multiplier={multiplier:.2f}")

    finding_type = finding.finding_type
    if finding_type == FindingType.COMPILED_ACTION.value:
        factor = compiled_action_factor(finding)
        score *= factor
        reasons.append(f"compiled_action_amplification={factor:.2f}")

    if finding_type == FindingType.POLICY_VIOLATION.value:
        contribution = severity_base(finding.severity) * POLICY_VIOLATION_WEIGHT
        score += contribution
        reasons.append(f"policy_violation_contribution={contribution:.2f}")

    if finding_type == FindingType.SKILL_POLICY_CONFLICT.value:
        score = max(score, SKILL_CONFLICT_SCORE_FLOOR)
        reasons.append(f"skill_policy_conflict_floor={SKILL_CONFLICT_SCORE_FLOOR:.2f}")

    if finding_type == FindingType.SKILL_METRICS.value:
        if finding.has_permission(PERMISSION_EXEC):
            score += SKILL_EXEC_BONUS
            reasons.append(f"skill_ceiling_exec_present={SKILL_EXEC_BONUS:.2f}")
        ratio = finding.evidence_float(EVIDENCE_EXEC_WRITE_RATIO)
        score += ratio * 2
        reasons.append(f"skill_concentration={ratio:.2f}")

        exec_count = finding.evidence_float(EVIDENCE_SPRAWL_EXEC)
        write_count = finding.evidence_float(EVIDENCE_SPRAWL_WRITE)
        total = finding.evidence_float(EVIDENCE_SPRAWL_TOTAL)
        if total > 0 and (exec_count + write_count) / total > 0.5:
            score += SKILL_SPRAWL_BONUS
            reasons.append(f"skill_sprawl_exec_write_over_50_percent={SKILL_SPRAWL_BONUS:.2f}")

    score = min(max(score, 0.0), MAX_RISK_SCORE)

    return ScoredFinding(
        canonical_key=canonical_key(finding),
        risk_score=round2_fixed(score),
        blast_radius=round2_fixed(blast),
        privilege_level=round2_fixed(privilege),
        trust_deficit=round2_fixed(deficit),
        endpoint_class=endpoint,
        data_class=data,
        autonomy_level=autonomy,
        reasons=reasons,
        finding=finding,
    )


def correlate(items: Iterable[ScoredFinding]) -> List[ScoredFinding]:
    """
    Collapse entries sharing a canonical key.

    The first entry is kept unless a later one scores strictly higher; the
    surviving entry carries the sorted union of both reason lists.
    """
    by_key: Dict[str, ScoredFinding] = {}
    for item in items:
        existing = by_key.get(item.canonical_key)
        if existing is None:
            by_key[item.canonical_key] = item
            continue
        winner = item if item.risk_score > existing.risk_score else existing
        merged = sorted(set(existing.reasons) | set(item.reasons))
        by_key[item.canonical_key] = winner.model_copy(update={"reasons": merged})
    return list(by_key.values())


def ranking_key(item: ScoredFinding) -> Tuple:
    f = item.finding
    return (
        -item.risk_score,
        -autonomy_rank(item.autonomy_level),
        severity_rank(f.severity),
        f.finding_type,
        f.rule_id or "",
        f.tool_type,
        f.location,
        f.repo or "",
        f.org,
    )


def sort_ranked(items: Iterable[ScoredFinding]) -> List[ScoredFinding]:
    return sorted(items, key=ranking_key)


def aggregate_repos(items: Iterable[ScoredFinding]) -> List[RepoAggregate]:
    """Per org/repo: max + 0.25 * mean, scaled by the highest autonomy multiplier."""
    stats: Dict[Tuple[str, str], Dict] = {}
    for item in items:
        repo = (item.finding.repo or "").strip()
        if not repo:
            continue
        key = (item.finding.org, repo)
        current = stats.setdefault(key, {"scores": [], "autonomy": ""})
        current["scores"].append(item.risk_score)
        if autonomy_rank(item.autonomy_level) > autonomy_rank(current["autonomy"]):
            current["autonomy"] = item.autonomy_level

    aggregates = []
    for (org, repo), current in stats.items():
        scores = current["scores"]
        combined = max(scores) + REPO_MEAN_WEIGHT * (sum(scores) / len(scores))
        combined = min(combined * autonomy_multiplier(current["autonomy"]), MAX_RISK_SCORE)
        aggregates.append(
            RepoAggregate(
                org=org,
                repo=repo,
                combined_risk_score=round2_fixed(combined),
                highest_autonomy=current["autonomy"],
            )
        )
    return sorted(aggregates, key=lambda a: (-a.combined_risk_score, a.org, a.repo))


def score_findings(
    findings: Iterable[Finding],
    top_n: int,
    generated_at: Optional[str] = None,
) -> RiskReport:
    """
    Score a batch of observations from any number of repositories.

    Args:
        findings: Observation records, policy check/violation records included
        top_n: Size of ``top_findings``; 0 or less (or more than available) means all
        generated_at: Timestamp to stamp on the report, supplied by the caller

    Returns:
        RiskReport with the top slice, the full ranking and repo aggregates
    """
    ordered = sort_findings(findings)
    ranked = sort_ranked(correlate(score_finding(f) for f in ordered))

    if top_n <= 0 or top_n > len(ranked):
        top_n = len(ranked)

    report = RiskReport(
        generated_at=generated_at,
        top_findings=ranked[:top_n],
        ranked_findings=ranked,
        repo_risk=aggregate_repos(ranked),
    )
    logger.info(
        "Risk scored",
        extra={"findings": len(ordered), "ranked": len(ranked), "repos": len(report.repo_risk)},
    )
    return report
