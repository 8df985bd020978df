# wrkr/remediation/planner.py
"""
Remediation planning over the ranked risk output.

Candidates are taken in ranking order. Each one either becomes a remediation
(template selected, patch preview rendered) or a skip record with a stable
reason code. Planning stops once ``top`` remediations are accepted.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from wrkr.core.constants import FindingType, SkipReason
from wrkr.core.hashing import content_fingerprint, sha256_hex, short_id
from wrkr.remediation.templates import Template
from wrkr.schemas.finding import Finding
from wrkr.schemas.plan import Plan, Remediation, Skipped
from wrkr.schemas.risk import ScoredFinding

logger = logging.getLogger(__name__)

SKIP_MESSAGES: Dict[str, str] = {
    SkipReason.MISSING_LOCATION.value: "finding location is required to generate a deterministic patch preview",
    SkipReason.AMBIGUOUS_PATCH_TARGET.value: "finding location is ambiguous for deterministic patching",
    SkipReason.MISSING_RULE_TEMPLATE.value: "no remediation template for selected rule/template",
    SkipReason.UNSUPPORTED_FINDING_TYPE.value: "finding type is not currently auto-fixable",
}

TEMPLATE_BY_FINDING_TYPE: Dict[str, str] = {
    FindingType.SKILL_POLICY_CONFLICT.value: "WRKR-014",
    FindingType.SKILL_METRICS.value: "WRKR-015",
    FindingType.AI_DEPENDENCY.value: "DEPENDENCY-PIN",
    FindingType.MCP_SERVER.value: "MCP-PIN-LOCK",
    FindingType.CI_AUTONOMY.value: "CI-GATE-ADD",
    FindingType.COMPILED_ACTION.value: "CI-GATE-ADD",
    FindingType.TOOL_CONFIG.value: "MANIFEST-GENERATE",
}

POLICY_TYPES = (FindingType.POLICY_CHECK.value, FindingType.POLICY_VIOLATION.value)
AMBIGUOUS_MARKERS = ("*", ",", "\n")


def is_ambiguous_location(location: str) -> bool:
    return any(marker in location for marker in AMBIGUOUS_MARKERS)


def choose_template_id(finding: Finding) -> Tuple[Optional[str], Optional[str]]:
    """Return (template_id, None) or (None, skip_reason)."""
    location = finding.location.strip()
    if not location:
        return None, SkipReason.MISSING_LOCATION.value
    if is_ambiguous_location(location):
        return None, SkipReason.AMBIGUOUS_PATCH_TARGET.value

    rule_id = (finding.rule_id or "").strip().upper()
    if finding.finding_type in POLICY_TYPES and rule_id:
        return rule_id, None

    template_id = TEMPLATE_BY_FINDING_TYPE.get(finding.finding_type)
    if template_id is None:
        return None, SkipReason.UNSUPPORTED_FINDING_TYPE.value
    return template_id, None


def remediation_id(finding: Finding, template_id: str) -> str:
    return sha256_hex(f"{finding.canonical_key()}|{template_id}")


def rationale(candidate: ScoredFinding) -> str:
    reasons = sorted(candidate.reasons)
    if not reasons:
        return f"risk_score={candidate.risk_score:.2f}"
    return f"risk_score={candidate.risk_score:.2f}; reasons={', '.join(reasons)}"


def commit_message(template: Template, finding: Finding) -> str:
    location = finding.location.strip()
    tail = location.rsplit("/", 1)[-1] or location
    rule_id = (finding.rule_id or "").strip().upper()
    if rule_id:
        return f"{template.commit_prefix} {tail} ({rule_id})"
    return f"{template.commit_prefix} {tail}"


def patch_preview(template: Template, finding: Finding) -> str:
    """Unified-diff style header naming the template; never real file content."""
    location = finding.location.strip()
    if location.startswith("./"):
        location = location[2:]
    lines = [
        f"--- a/{location}",
        f"+++ b/{location}",
        "@@ wrkr-fix @@",
        f"+# wrkr template: {template.id}",
        f"+# category: {template.category}",
    ]
    lines.extend(f"+# hint: {hint}" for hint in template.hints)
    rule_id = (finding.rule_id or "").strip()
    if rule_id:
        lines.append(f"+# rule: {rule_id.upper()}")
    return "\n".join(lines) + "\n"


def skipped_record(finding: Finding, reason_code: str) -> Skipped:
    return Skipped(
        canonical_key=finding.canonical_key(),
        finding_type=finding.finding_type,
        rule_id=finding.rule_id,
        location=finding.location or None,
        reason_code=reason_code,
        message=SKIP_MESSAGES[reason_code],
    )


def plan_fingerprint(remediations: List[Remediation], skipped: List[Skipped]) -> str:
    parts = [f"fix:{item.id}" for item in remediations]
    parts.extend(f"skip:{item.canonical_key}:{item.reason_code}" for item in skipped)
    return content_fingerprint(parts)


def build_plan(ranked: Iterable[ScoredFinding], top: int, templates: Dict[str, Template]) -> Plan:
    """
    Build a deterministic remediation plan from ranked risk entries.

    Args:
        ranked: Scored entries in ranking order (taken as given)
        top: Maximum number of remediations; 0 or less means all candidates
        templates: Template catalog keyed by template id

    Returns:
        Plan with remediations, skip records and a content fingerprint
    """
    candidates = list(ranked)
    if top <= 0:
        top = len(candidates)

    remediations: List[Remediation] = []
    skipped: List[Skipped] = []
    for candidate in candidates:
        if len(remediations) >= top:
            break
        finding = candidate.finding

        template_id, reason = choose_template_id(finding)
        if reason is not None:
            skipped.append(skipped_record(finding, reason))
            continue
        template = templates.get(template_id)
        if template is None:
            skipped.append(skipped_record(finding, SkipReason.MISSING_RULE_TEMPLATE.value))
            continue

        remediations.append(
            Remediation(
                id=remediation_id(finding, template.id),
                template_id=template.id,
                category=template.category,
                rule_id=finding.rule_id,
                title=template.title,
                rationale=rationale(candidate),
                commit_message=commit_message(template, finding),
                patch_preview=patch_preview(template, finding),
                finding=finding,
            )
        )

    plan = Plan(
        requested_top=top,
        fingerprint=plan_fingerprint(remediations, skipped),
        remediations=remediations,
        skipped=skipped,
    )
    logger.info(
        "Remediation plan built",
        extra={
            "fingerprint": short_id(plan.fingerprint),
            "remediations": len(remediations),
            "skipped": len(skipped),
        },
    )
    return plan
