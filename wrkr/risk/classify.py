# wrkr/risk/classify.py
"""Per-record classification: endpoint class, data class and autonomy level."""
from wrkr.core.constants import (
    EVIDENCE_APPROVAL_GATE,
    EVIDENCE_HEADLESS,
    EVIDENCE_TRANSPORT,
    NETWORK_TRANSPORTS,
    PERMISSION_DB_READ,
    PERMISSION_DB_WRITE,
    AutonomyLevel,
    DataClass,
    EndpointClass,
    FindingType,
)
from wrkr.risk.autonomy import classify_autonomy
from wrkr.schemas.finding import Finding

CI_LOCATION_MARKERS = (".github/workflows", "jenkinsfile")
COMPILED_ACTION_MARKERS = ("agent-plans", "workflows/")
REPO_CONFIG_MARKERS = (".claude/", ".cursor/", ".codex/", "agents.md")
PII_MARKERS = ("customer", "profile", "user")
DELIVERY_MARKERS = (".github/workflows", "deploy")


def _contains_any(text: str, markers) -> bool:
    return any(marker in text for marker in markers)


def endpoint_class(finding: Finding) -> str:
    location = finding.location.lower()
    tool_type = finding.tool_type.lower()

    if finding.finding_type == FindingType.CI_AUTONOMY.value or _contains_any(location, CI_LOCATION_MARKERS):
        return EndpointClass.CI_PIPELINE.value
    if finding.finding_type == FindingType.COMPILED_ACTION.value or _contains_any(location, COMPILED_ACTION_MARKERS):
        return EndpointClass.COMPILED_ACTION.value
    if finding.finding_type == FindingType.MCP_SERVER.value or tool_type == "mcp":
        if finding.evidence_value(EVIDENCE_TRANSPORT) in NETWORK_TRANSPORTS:
            return EndpointClass.NETWORK_SERVICE.value
        return EndpointClass.LOCAL_SERVICE.value
    if _contains_any(location, REPO_CONFIG_MARKERS):
        return EndpointClass.REPO_CONFIG.value
    return EndpointClass.WORKSPACE.value


def data_class(finding: Finding) -> str:
    if finding.finding_type == FindingType.SECRET_PRESENCE.value:
        return DataClass.CREDENTIALS.value
    # First permission carrying a data hint decides
    for permission in finding.permissions or []:
        normalized = permission.lower()
        if PERMISSION_DB_WRITE in normalized or PERMISSION_DB_READ in normalized:
            return DataClass.DATABASE.value
        if "secret" in normalized or "token" in normalized:
            return DataClass.CREDENTIALS.value

    location = finding.location.lower()
    if _contains_any(location, PII_MARKERS):
        return DataClass.PII.value
    if _contains_any(location, DELIVERY_MARKERS):
        return DataClass.DELIVERY.value
    return DataClass.CODE.value


def autonomy_level(finding: Finding) -> str:
    if finding.autonomy:
        return finding.autonomy
    if finding.finding_type == FindingType.CI_AUTONOMY.value:
        return classify_autonomy(
            tool=finding.tool_type,
            headless=finding.evidence_bool(EVIDENCE_HEADLESS),
            has_approval_gate=finding.evidence_bool(EVIDENCE_APPROVAL_GATE),
        )
    if "copilot" in finding.tool_type.lower():
        return AutonomyLevel.COPILOT.value
    return AutonomyLevel.INTERACTIVE.value
