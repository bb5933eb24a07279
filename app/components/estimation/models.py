from pydantic import BaseModel, Field
from typing import List, Optional
from shared.schemas.analysis import AnalysisResult
from shared.schemas.function_module import FunctionModule


class EstimationRequest(BaseModel):
    """Request for effort estimation."""
    functions: List[FunctionModule] = Field(default_factory=list)
    analysis: Optional[AnalysisResult] = None
    industry: Optional[str] = None
