"""
Risk API

Endpoints:
- POST /api/v1/risk/score
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from wrkr.core.config import settings
from wrkr.risk.scoring import score_findings
from wrkr.schemas.requests import ScoreRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/score")
async def score(payload: ScoreRequest) -> Dict[str, Any]:
    """
    Score, correlate and rank a batch of observations.

    `top` defaults to the configured plan size; 0 returns every ranked entry
    in `top_findings`. `generated_at` is echoed back unchanged.
    """
    top = settings.DEFAULT_TOP if payload.top is None else payload.top
    try:
        report = score_findings(payload.findings, top, generated_at=payload.generated_at)
    except Exception as e:
        logger.error(f"Risk scoring failed: {e}")
        raise HTTPException(status_code=500, detail="Risk scoring failed")
    return report.to_dict()
