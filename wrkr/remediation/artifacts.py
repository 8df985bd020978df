# wrkr/remediation/artifacts.py
"""
Render a plan into repository files.

``build_artifacts`` is pure; ``write_artifacts`` is the only place the plan
touches a file system.
"""
import logging
from pathlib import Path
from typing import List, Union

from wrkr.core.hashing import short_id
from wrkr.schemas.base import dump_json
from wrkr.schemas.plan import Plan, PlanArtifact, Remediation

logger = logging.getLogger(__name__)

ARTIFACTS_ROOT = ".wrkr/remediations"


def patch_file_name(index: int, item: Remediation) -> str:
    return f"{index:02d}-{item.template_id.strip().lower()}-{short_id(item.id)}.patch"


def patch_content(item: Remediation) -> str:
    lines = [
        "# Wrkr Remediation Patch Preview",
        "",
        f"- Remediation ID: `{item.id.strip()}`",
        f"- Template: `{item.template_id.strip()}`",
        f"- Category: `{item.category.strip()}`",
        f"- Target: `{item.finding.location.strip()}`",
        f"- Rule ID: `{(item.rule_id or '').strip()}`",
        "",
        "## Rationale",
        "",
        item.rationale.strip(),
        "",
        "## Patch Preview",
        "",
        "```diff",
        item.patch_preview.strip(),
        "```",
        "",
    ]
    return "\n".join(lines)


def build_artifacts(plan: Plan) -> List[PlanArtifact]:
    """plan.json first, then one numbered patch preview per remediation."""
    root = f"{ARTIFACTS_ROOT}/{plan.fingerprint.strip()}"
    artifacts = [
        PlanArtifact(
            path=f"{root}/plan.json",
            content=plan.to_json(),
            commit_message=f"chore(remediation): update plan {short_id(plan.fingerprint)}",
        )
    ]
    for index, item in enumerate(plan.remediations, start=1):
        artifacts.append(
            PlanArtifact(
                path=f"{root}/{patch_file_name(index, item)}",
                content=patch_content(item),
                commit_message=item.commit_message,
            )
        )
    return artifacts


def write_artifacts(artifacts: List[PlanArtifact], root: Union[str, Path]) -> List[Path]:
    """Write artifacts below ``root``; returns the written paths."""
    written = []
    base = Path(root)
    for artifact in artifacts:
        target = base / artifact.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(artifact.content, encoding="utf-8")
        written.append(target)
    logger.info("Remediation artifacts written", extra={"count": len(written), "root": str(base)})
    return written
