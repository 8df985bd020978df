"""
Remediation Planning API

Endpoints:
- GET /api/v1/remediation/templates
- POST /api/v1/remediation/plan
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from wrkr.api.dependencies import get_catalogs
from wrkr.core.catalog import Catalogs
from wrkr.core.config import settings
from wrkr.pipeline import run_pipeline
from wrkr.remediation.planner import build_plan
from wrkr.risk.scoring import score_findings
from wrkr.schemas.requests import PlanRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/templates")
async def list_templates(catalogs: Catalogs = Depends(get_catalogs)) -> Dict[str, Any]:
    return {"templates": [template.to_dict() for template in catalogs.templates.values()]}


@router.post("/plan")
async def plan(
    payload: PlanRequest,
    catalogs: Catalogs = Depends(get_catalogs),
) -> Dict[str, Any]:
    """
    Build the deterministic remediation plan for a batch of observations.

    With `include_policy` (default) the batch is first evaluated against the
    rule catalog per repository, so violations are planned alongside detector
    findings. The same input always yields the same `fingerprint`.
    """
    top = settings.DEFAULT_TOP if payload.top is None else payload.top
    try:
        if payload.include_policy:
            result = run_pipeline(payload.findings, catalogs, top).plan
        else:
            report = score_findings(payload.findings, top)
            result = build_plan(report.ranked_findings, top, catalogs.templates)
    except Exception as e:
        logger.error(f"Remediation planning failed: {e}")
        raise HTTPException(status_code=500, detail="Remediation planning failed")
    return result.to_dict()
