from .service import BreakdownService
from .models import BreakdownRequest
from .agent import breakdown_agent

__all__ = ["BreakdownService", "BreakdownRequest", "breakdown_agent"]
