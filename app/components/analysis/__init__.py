from .service import AnalysisService
from .models import AnalysisRequest
from .agent import analysis_agent

__all__ = ["AnalysisService", "AnalysisRequest", "analysis_agent"]
