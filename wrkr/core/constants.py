# wrkr/core/constants.py
from enum import Enum
from typing import Dict


class SeverityLevel(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class CheckResult(str, Enum):
    PASS = "pass"
    FAIL = "fail"


class FindingType(str, Enum):
    TOOL_CONFIG = "tool_config"
    MCP_SERVER = "mcp_server"
    AI_DEPENDENCY = "ai_dependency"
    SECRET_PRESENCE = "secret_presence"
    PARSE_ERROR = "parse_error"
    CI_AUTONOMY = "ci_autonomy"
    COMPILED_ACTION = "compiled_action"
    SKILL_METRICS = "skill_metrics"
    SKILL_POLICY_CONFLICT = "skill_policy_conflict"
    POLICY_CHECK = "policy_check"
    POLICY_VIOLATION = "policy_violation"


class AutonomyLevel(str, Enum):
    INTERACTIVE = "interactive"
    COPILOT = "copilot"
    HEADLESS_GATED = "headless_gated"
    HEADLESS_AUTO = "headless_auto"


class EndpointClass(str, Enum):
    CI_PIPELINE = "ci_pipeline"
    COMPILED_ACTION = "compiled_action"
    NETWORK_SERVICE = "network_service"
    LOCAL_SERVICE = "local_service"
    REPO_CONFIG = "repo_config"
    WORKSPACE = "workspace"


class DataClass(str, Enum):
    CREDENTIALS = "credentials"
    DATABASE = "database"
    PII = "pii"
    DELIVERY = "delivery"
    CODE = "code"


class SkipReason(str, Enum):
    MISSING_LOCATION = "missing_location"
    AMBIGUOUS_PATCH_TARGET = "ambiguous_patch_target"
    MISSING_RULE_TEMPLATE = "missing_rule_template"
    UNSUPPORTED_FINDING_TYPE = "unsupported_finding_type"


DEFAULT_ORG = "local"

# Rule whose check/violation records correlate with skill_policy_conflict observations
SKILL_CONFLICT_RULE_ID = "WRKR-014"

# Permission tags
PERMISSION_EXEC = "proc.exec"
PERMISSION_WRITE = "filesystem.write"
PERMISSION_DB_WRITE = "db.write"
PERMISSION_DB_READ = "db.read"
PERMISSION_SECRET_READ = "secret.read"
PERMISSION_HEADLESS_EXEC = "headless.execute"

# Evidence keys
EVIDENCE_TRANSPORT = "transport"
EVIDENCE_HEADLESS = "headless"
EVIDENCE_APPROVAL_GATE = "approval_gate"
EVIDENCE_TRUST_SCORE = "trust_score"
EVIDENCE_COVERAGE = "coverage"
EVIDENCE_POLICY_POSTURE = "policy_posture"
EVIDENCE_TOOL_SEQUENCE = "tool_sequence"
EVIDENCE_EXEC_RATIO = "skill_privilege_concentration.exec_ratio"
EVIDENCE_EXEC_WRITE_RATIO = "skill_privilege_concentration.exec_write_ratio"
EVIDENCE_SPRAWL_EXEC = "skill_sprawl.exec"
EVIDENCE_SPRAWL_WRITE = "skill_sprawl.write"
EVIDENCE_SPRAWL_TOTAL = "skill_sprawl.total"

NETWORK_TRANSPORTS = ("http", "sse", "streamable_http", "streamable-http")

# Tool type marker of the gateway policy coverage evaluator
GATEWAY_POLICY_TOOL = "gait_policy"


SEVERITY_RANK: Dict[str, int] = {
    SeverityLevel.CRITICAL.value: 0,
    SeverityLevel.HIGH.value: 1,
    SeverityLevel.MEDIUM.value: 2,
    SeverityLevel.LOW.value: 3,
    SeverityLevel.INFO.value: 4,
}

# Blast radius starting point per severity
SEVERITY_BASE: Dict[str, float] = {
    SeverityLevel.CRITICAL.value: 4.8,
    SeverityLevel.HIGH.value: 3.8,
    SeverityLevel.MEDIUM.value: 2.8,
    SeverityLevel.LOW.value: 1.8,
    SeverityLevel.INFO.value: 1.0,
}

AUTONOMY_RANK: Dict[str, int] = {
    AutonomyLevel.HEADLESS_AUTO.value: 4,
    AutonomyLevel.HEADLESS_GATED.value: 3,
    AutonomyLevel.COPILOT.value: 2,
    AutonomyLevel.INTERACTIVE.value: 1,
}

AUTONOMY_MULTIPLIER: Dict[str, float] = {
    AutonomyLevel.HEADLESS_AUTO.value: 1.7,
    AutonomyLevel.HEADLESS_GATED.value: 1.35,
    AutonomyLevel.COPILOT.value: 1.1,
    AutonomyLevel.INTERACTIVE.value: 1.0,
}

MAX_RISK_SCORE = 10.0
SKILL_CONFLICT_SCORE_FLOOR = 8.5
