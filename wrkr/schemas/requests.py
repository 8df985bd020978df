# wrkr/schemas/requests.py
"""HTTP request bodies."""
from typing import List, Optional

from pydantic import BaseModel

from wrkr.schemas.finding import Finding


class EvaluateRequest(BaseModel):
    repo: Optional[str] = None
    org: Optional[str] = None
    findings: List[Finding] = []


class ProfileRequest(BaseModel):
    profile: Optional[str] = None
    findings: List[Finding] = []


class ScoreRequest(BaseModel):
    findings: List[Finding] = []
    top: Optional[int] = None
    generated_at: Optional[str] = None


class PlanRequest(BaseModel):
    findings: List[Finding] = []
    top: Optional[int] = None
    include_policy: bool = True
