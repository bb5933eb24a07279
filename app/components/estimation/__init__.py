from .service import EstimationService
from .models import EstimationRequest
from .agent import estimation_agent

__all__ = ["EstimationService", "EstimationRequest", "estimation_agent"]
