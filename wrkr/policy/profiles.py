# wrkr/policy/profiles.py
"""
Compliance profiles: how many policy failures a repository may carry.

Profiles ship as embedded YAML (``profiles/<name>.yaml``). Override files may
carry a ``profiles:`` mapping whose entries adjust a profile's minimum
compliance and per-rule failure thresholds.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from wrkr.core.constants import CheckResult, FindingType
from wrkr.core.errors import CatalogError
from wrkr.core.jsonvalue import as_map
from wrkr.core.rounding import round2
from wrkr.policy.loader import OverrideDocument, read_yaml_document
from wrkr.schemas.finding import Finding
from wrkr.schemas.policy import Profile, ProfileResult

logger = logging.getLogger(__name__)

PROFILES_DIR = Path(__file__).parent / "profiles"
DEFAULT_PROFILE_NAME = "standard"


def _clamp_compliance(value: float) -> float:
    return min(max(value, 0.0), 100.0)


def _thresholds(raw: Any, source: str) -> Dict[str, int]:
    if raw is None:
        return {}
    mapping = as_map(raw)
    if mapping is None:
        raise CatalogError(f"profile {source}: rule_thresholds must be a mapping")
    try:
        return {key.strip().upper(): int(value) for key, value in sorted(mapping.items())}
    except (TypeError, ValueError) as e:
        raise CatalogError(f"profile {source}: thresholds must be integers") from e


def _min_compliance(raw: Any, source: str) -> float:
    if raw is None:
        return 0.0
    try:
        return float(raw)
    except (TypeError, ValueError) as e:
        raise CatalogError(f"profile {source}: min_compliance must be a number") from e


def parse_profile(name: str, document: Dict[str, Any], source: str) -> Profile:
    return Profile(
        name=name,
        description=str(document.get("description") or "").strip(),
        min_compliance=_clamp_compliance(_min_compliance(document.get("min_compliance"), source)),
        rule_thresholds=dict(sorted(_thresholds(document.get("rule_thresholds"), source).items())),
    )


def load_builtin_profiles() -> Dict[str, Profile]:
    profiles = {}
    for path in sorted(PROFILES_DIR.glob("*.yaml")):
        name = path.stem.lower()
        profiles[name] = parse_profile(name, read_yaml_document(path, "profile"), path.name)
    if not profiles:
        raise CatalogError("no embedded compliance profiles found")
    return profiles


def apply_overrides(profile: Profile, overrides: Iterable[OverrideDocument]) -> Profile:
    min_compliance = profile.min_compliance
    thresholds = dict(profile.rule_thresholds)
    for source, document in overrides:
        entries = as_map(document.get("profiles")) or {}
        for raw_name, raw_profile in entries.items():
            if raw_name.strip().lower() != profile.name:
                continue
            fields = as_map(raw_profile) or {}
            override_min = _min_compliance(fields.get("min_compliance"), source)
            if override_min > 0:
                min_compliance = override_min
            thresholds.update(_thresholds(fields.get("rule_thresholds"), source))
    return profile.model_copy(
        update={
            "min_compliance": _clamp_compliance(min_compliance),
            "rule_thresholds": dict(sorted(thresholds.items())),
        }
    )


def load_profiles(overrides: Optional[List[OverrideDocument]] = None) -> Dict[str, Profile]:
    """Embedded profiles with override documents applied, keyed by lower-case name."""
    return {
        name: apply_overrides(profile, overrides or [])
        for name, profile in load_builtin_profiles().items()
    }


def select_profile(profiles: Dict[str, Profile], name: Optional[str]) -> Profile:
    key = (name or "").strip().lower() or DEFAULT_PROFILE_NAME
    if key not in profiles:
        raise CatalogError(f"unknown compliance profile: {key}")
    return profiles[key]


def collect_rule_failures(findings: Iterable[Finding]):
    """Return ({rule_id: fail_count}, distinct rule ids seen)."""
    fails: Dict[str, int] = {}
    seen = set()
    for f in findings:
        rule_id = (f.rule_id or "").strip().upper()
        if not rule_id:
            continue
        seen.add(rule_id)
        if f.finding_type == FindingType.POLICY_CHECK.value and f.check_result == CheckResult.PASS.value:
            continue
        if f.finding_type in (FindingType.POLICY_CHECK.value, FindingType.POLICY_VIOLATION.value):
            fails[rule_id] = 1
    return fails, len(seen)


def evaluate_profile(
    profile: Profile,
    findings: Iterable[Finding],
    previous: Optional[ProfileResult] = None,
) -> ProfileResult:
    """
    Score policy records against a profile.

    A rule is failing when its fail count exceeds its threshold (0 when the
    profile does not list the rule). Compliance is the share of passing rules
    out of max(rules seen, rules with thresholds).
    """
    fails, total = collect_rule_failures(findings)
    total = max(total, len(profile.rule_thresholds))

    failing = set()
    rationale = []
    for rule_id in sorted(set(fails) | set(profile.rule_thresholds)):
        count = fails.get(rule_id, 0)
        threshold = profile.rule_thresholds.get(rule_id, 0)
        if count > threshold:
            failing.add(rule_id)
            rationale.append(f"{rule_id} fail_count={count} threshold={threshold}")

    passed = max(total - len(failing), 0)
    compliance = round2(passed / total * 100) if total else 0.0
    delta = round2(compliance - previous.compliance_percent) if previous is not None else 0.0
    status = "fail" if compliance < profile.min_compliance or failing else "pass"

    logger.info(
        "Profile evaluated",
        extra={"profile": profile.name, "compliance": compliance, "status": status},
    )
    return ProfileResult(
        profile=profile.name,
        compliance_percent=compliance,
        compliance_delta=delta,
        min_compliance=profile.min_compliance,
        status=status,
        failing_rules=sorted(failing),
        rationale=sorted(rationale),
    )
