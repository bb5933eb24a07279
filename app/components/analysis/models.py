from pydantic import BaseModel
from typing import Optional


class AnalysisRequest(BaseModel):
    """Request for requirement analysis."""
    raw_requirement: str
    industry: Optional[str] = None
