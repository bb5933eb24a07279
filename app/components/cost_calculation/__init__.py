from .service import CostCalculationService
from .models import CostCalculationRequest
from .agent import cost_calculation_agent

__all__ = ["CostCalculationService", "CostCalculationRequest", "cost_calculation_agent"]
