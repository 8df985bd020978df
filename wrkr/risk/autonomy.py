# wrkr/risk/autonomy.py
"""
Four-tier autonomy model for automation surfaces.

    interactive < copilot < headless_gated < headless_auto
"""
from typing import Optional

from wrkr.core.constants import AUTONOMY_MULTIPLIER, AUTONOMY_RANK, AutonomyLevel


def classify_autonomy(tool: str = "", headless: bool = False, has_approval_gate: bool = False) -> str:
    """Derive the autonomy level of a CI execution from its signals."""
    if "copilot" in tool.strip().lower():
        return AutonomyLevel.COPILOT.value
    if not headless:
        return AutonomyLevel.INTERACTIVE.value
    if has_approval_gate:
        return AutonomyLevel.HEADLESS_GATED.value
    return AutonomyLevel.HEADLESS_AUTO.value


def autonomy_rank(level: Optional[str]) -> int:
    # Unknown levels rank below interactive
    return AUTONOMY_RANK.get(level or "", 0)


def autonomy_multiplier(level: Optional[str]) -> float:
    return AUTONOMY_MULTIPLIER.get(level or "", 1.0)
