# wrkr/policy/evaluator.py
"""
Policy evaluation: one check record per rule, one violation per failed rule.

Each rule ``kind`` maps to a predicate over the repository's observation set.
Predicates are pure counts, so the result only depends on the set of records.
"""
import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from wrkr.core.constants import (
    DEFAULT_ORG,
    EVIDENCE_EXEC_RATIO,
    PERMISSION_EXEC,
    AutonomyLevel,
    CheckResult,
    FindingType,
)
from wrkr.schemas.finding import Finding, normalize_finding, normalize_severity, sort_findings
from wrkr.schemas.policy import Rule

logger = logging.getLogger(__name__)

POLICY_TOOL_TYPE = "policy"
POLICY_DETECTOR = "policy"
UNKNOWN_KIND_DETAIL = "unknown policy kind"

# (passed, detail)
RuleOutcome = Tuple[bool, str]


class PolicyKind(str, Enum):
    REQUIRE_TOOL_CONFIG = "require_tool_config"
    BLOCK_SECRET_PRESENCE = "block_secret_presence"
    NO_PARSE_ERRORS = "no_parse_errors"
    HEADLESS_REQUIRES_GATE = "headless_requires_gate"
    REQUIRE_MCP_INVENTORY = "require_mcp_inventory"
    REQUIRE_DEPENDENCY_INVENTORY = "require_dependency_inventory"
    REQUIRE_SKILL_METRICS = "require_skill_metrics"
    COMPILED_ACTIONS_REVIEWED = "compiled_actions_reviewed"
    CREDENTIAL_REFS_REVIEWED = "credential_refs_reviewed"
    STABLE_CI_REASON_CODES = "stable_ci_reason_codes"
    POLICY_RULE_PACK_LOADED = "policy_rule_pack_loaded"
    SCHEMA_CONTRACT_MAINTAINED = "schema_contract_maintained"
    SKILL_EXEC_PLUS_CREDENTIALS = "skill_exec_plus_credentials"
    SKILL_POLICY_CONFLICTS = "skill_policy_conflicts"
    SKILL_SPRAWL_EXEC_RATIO = "skill_sprawl_exec_ratio"


def count_type(findings: Iterable[Finding], finding_type: FindingType) -> int:
    target = finding_type.value
    return sum(1 for f in findings if f.finding_type.lower() == target)


def _require(finding_type: FindingType) -> Callable[[List[Finding]], RuleOutcome]:
    def predicate(findings: List[Finding]) -> RuleOutcome:
        count = count_type(findings, finding_type)
        return count > 0, f"{finding_type.value}={count}"
    return predicate


def _forbid(finding_type: FindingType) -> Callable[[List[Finding]], RuleOutcome]:
    def predicate(findings: List[Finding]) -> RuleOutcome:
        count = count_type(findings, finding_type)
        return count == 0, f"{finding_type.value}={count}"
    return predicate


def _always_pass(detail: str) -> Callable[[List[Finding]], RuleOutcome]:
    def predicate(findings: List[Finding]) -> RuleOutcome:
        return True, detail
    return predicate


def headless_requires_gate(findings: List[Finding]) -> RuleOutcome:
    bad = sum(
        1
        for f in findings
        if f.finding_type == FindingType.CI_AUTONOMY.value
        and f.autonomy == AutonomyLevel.HEADLESS_AUTO.value
    )
    return bad == 0, f"{AutonomyLevel.HEADLESS_AUTO.value}={bad}"


def skill_exec_plus_credentials(findings: List[Finding]) -> RuleOutcome:
    has_exec = any(
        f.finding_type == FindingType.SKILL_METRICS.value and PERMISSION_EXEC in (f.permissions or [])
        for f in findings
    )
    has_credentials = any(f.finding_type == FindingType.SECRET_PRESENCE.value for f in findings)
    detail = f"has_exec={str(has_exec).lower()},has_credentials={str(has_credentials).lower()}"
    return not (has_exec and has_credentials), detail


def skill_sprawl_exec_ratio(findings: List[Finding]) -> RuleOutcome:
    """Fails when the highest exec concentration across skill metrics exceeds one half."""
    ratio = 0.0
    for f in findings:
        if f.finding_type != FindingType.SKILL_METRICS.value:
            continue
        ratio = max(ratio, f.evidence_float(EVIDENCE_EXEC_RATIO))
    return ratio <= 0.5, f"exec_ratio={ratio:.2f}"


PREDICATES: Dict[str, Callable[[List[Finding]], RuleOutcome]] = {
    PolicyKind.REQUIRE_TOOL_CONFIG.value: _require(FindingType.TOOL_CONFIG),
    PolicyKind.BLOCK_SECRET_PRESENCE.value: _forbid(FindingType.SECRET_PRESENCE),
    PolicyKind.NO_PARSE_ERRORS.value: _forbid(FindingType.PARSE_ERROR),
    PolicyKind.HEADLESS_REQUIRES_GATE.value: headless_requires_gate,
    PolicyKind.REQUIRE_MCP_INVENTORY.value: _require(FindingType.MCP_SERVER),
    PolicyKind.REQUIRE_DEPENDENCY_INVENTORY.value: _require(FindingType.AI_DEPENDENCY),
    PolicyKind.REQUIRE_SKILL_METRICS.value: _require(FindingType.SKILL_METRICS),
    PolicyKind.COMPILED_ACTIONS_REVIEWED.value: _always_pass("compiled_action coverage evaluated"),
    PolicyKind.CREDENTIAL_REFS_REVIEWED.value: _always_pass("credential reference coverage evaluated"),
    PolicyKind.STABLE_CI_REASON_CODES.value: _always_pass("ci reason code contract maintained"),
    PolicyKind.POLICY_RULE_PACK_LOADED.value: _always_pass("rule pack loaded"),
    PolicyKind.SCHEMA_CONTRACT_MAINTAINED.value: _always_pass("schema contract maintained"),
    PolicyKind.SKILL_EXEC_PLUS_CREDENTIALS.value: skill_exec_plus_credentials,
    PolicyKind.SKILL_POLICY_CONFLICTS.value: _forbid(FindingType.SKILL_POLICY_CONFLICT),
    PolicyKind.SKILL_SPRAWL_EXEC_RATIO.value: skill_sprawl_exec_ratio,
}


def apply_rule(rule: Rule, findings: List[Finding]) -> RuleOutcome:
    predicate = PREDICATES.get(rule.kind)
    if predicate is None:
        return False, UNKNOWN_KIND_DETAIL
    return predicate(findings)


def _policy_record(
    finding_type: FindingType,
    rule: Rule,
    passed: bool,
    evidence: List[Dict[str, str]],
    repo: Optional[str],
    org: str,
) -> Finding:
    return Finding(
        finding_type=finding_type.value,
        rule_id=rule.id,
        check_result=CheckResult.PASS.value if passed else CheckResult.FAIL.value,
        severity=normalize_severity(rule.severity),
        remediation=rule.remediation,
        tool_type=POLICY_TOOL_TYPE,
        location=rule.id,
        repo=repo,
        org=org,
        detector=POLICY_DETECTOR,
        evidence=evidence,
    )


def evaluate(
    repo: Optional[str],
    org: Optional[str],
    findings: Iterable[Finding],
    rules: Iterable[Rule],
) -> List[Finding]:
    """
    Evaluate every rule against one repository's observations.

    Args:
        repo: Repository the observations belong to (may be blank)
        org: Owning organization; blank falls back to "local"
        findings: The repository's full observation set
        rules: Merged rule catalog

    Returns:
        Check and violation records in canonical order
    """
    observed = [normalize_finding(f) for f in findings]
    owner = (org or "").strip() or DEFAULT_ORG

    records = []
    failed = 0
    for rule in sorted(rules, key=lambda r: r.id):
        passed, detail = apply_rule(rule, observed)
        records.append(
            _policy_record(
                FindingType.POLICY_CHECK,
                rule,
                passed,
                [
                    {"key": "title", "value": rule.title},
                    {"key": "version", "value": str(rule.version)},
                    {"key": "detail", "value": detail},
                ],
                repo,
                owner,
            )
        )
        if not passed:
            failed += 1
            records.append(
                _policy_record(
                    FindingType.POLICY_VIOLATION,
                    rule,
                    passed,
                    [
                        {"key": "title", "value": rule.title},
                        {"key": "detail", "value": detail},
                    ],
                    repo,
                    owner,
                )
            )

    logger.info(
        "Policy evaluated",
        extra={"repo": repo or "", "org": owner, "rules": len(records) - failed, "violations": failed},
    )
    return sort_findings(records)
