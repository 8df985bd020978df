from fastapi import APIRouter

from wrkr.api.v1 import policy, remediation, risk

api_router = APIRouter()

api_router.include_router(policy.router, prefix="/policy", tags=["policy"])
api_router.include_router(risk.router, prefix="/risk", tags=["risk"])
api_router.include_router(remediation.router, prefix="/remediation", tags=["remediation"])
