from typing import Any, Dict
from app.components.base.exceptions import error_reason
from app.components.base.logging import get_logger
from app.services.estimation_math import format_currency
from .models import CostCalculationRequest
from .service import CostCalculationService

logger = get_logger(__name__)


async def cost_calculation_agent(state: Dict[str, Any], service: CostCalculationService) -> Dict[str, Any]:
    """LangGraph node for cost calculation. Final stage on success."""
    try:
        request = CostCalculationRequest(estimation=state.get("estimation"))
        cost = await service.process(request)

        return {
            "cost": cost.model_dump(),
            "current_step": "complete",
            "is_complete": True,
            "error": None,
            "messages": [
                {
                    "role": "cost_calculation",
                    "content": f"Total cost {format_currency(cost.total_cost, service.parameters.currency)} "
                               f"including {cost.buffer_percentage:g}% risk buffer",
                }
            ],
        }

    except Exception as e:
        logger.warning("Cost calculation failed", error=error_reason(e))
        return {
            "error": f"calculation failed: {error_reason(e)}",
            "current_step": "calculate",
        }
