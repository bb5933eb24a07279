from pydantic import BaseModel
from typing import Optional
from shared.schemas.analysis import AnalysisResult


class BreakdownRequest(BaseModel):
    """Request for function breakdown."""
    analysis: Optional[AnalysisResult] = None
    industry: Optional[str] = None
