"""
Policy API

Endpoints:
- GET /api/v1/policy/rules
- POST /api/v1/policy/evaluate
- POST /api/v1/policy/profile
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from wrkr.api.dependencies import get_catalogs
from wrkr.core.catalog import Catalogs
from wrkr.core.errors import CatalogError
from wrkr.pipeline import policy_records
from wrkr.policy.evaluator import evaluate
from wrkr.policy.profiles import evaluate_profile
from wrkr.schemas.requests import EvaluateRequest, ProfileRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/rules")
async def list_rules(catalogs: Catalogs = Depends(get_catalogs)) -> Dict[str, Any]:
    """Merged rule catalog, sorted by id."""
    return {"rules": [rule.to_dict() for rule in catalogs.rules]}


@router.post("/evaluate")
async def evaluate_rules(
    payload: EvaluateRequest,
    catalogs: Catalogs = Depends(get_catalogs),
) -> Dict[str, Any]:
    """
    Evaluate every rule against one repository's observations.

    Returns one `policy_check` per rule and a `policy_violation` per failed rule,
    in canonical order.
    """
    try:
        records = evaluate(payload.repo, payload.org, payload.findings, catalogs.rules)
    except Exception as e:
        logger.error(f"Policy evaluation failed: {e}")
        raise HTTPException(status_code=500, detail="Policy evaluation failed")
    return {"findings": [record.to_dict() for record in records]}


@router.post("/profile")
async def evaluate_compliance_profile(
    payload: ProfileRequest,
    catalogs: Catalogs = Depends(get_catalogs),
) -> Dict[str, Any]:
    """Evaluate the batch's policy records against a compliance profile (default: standard)."""
    try:
        profile = catalogs.profile(payload.profile)
    except CatalogError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    result = evaluate_profile(profile, policy_records(payload.findings, catalogs))
    return result.to_dict()
