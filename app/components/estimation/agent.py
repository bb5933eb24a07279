from typing import Any, Dict
from app.components.base.exceptions import error_reason
from app.components.base.logging import get_logger
from .models import EstimationRequest
from .service import EstimationService

logger = get_logger(__name__)


async def estimation_agent(state: Dict[str, Any], service: EstimationService) -> Dict[str, Any]:
    """LangGraph node for effort estimation."""
    try:
        request = EstimationRequest(
            functions=state.get("functions") or [],
            analysis=state.get("analysis"),
            industry=state.get("industry"),
        )
        estimation = await service.process(request)

        team_size = sum(m.count for m in estimation.team_composition)
        return {
            "estimation": estimation.model_dump(),
            "current_step": "calculate",
            "error": None,
            "messages": [
                {
                    "role": "estimation",
                    "content": f"Estimated {estimation.total_hours:g} total hours for a team of {team_size:g}",
                }
            ],
        }

    except Exception as e:
        logger.warning("Effort estimation failed", error=error_reason(e))
        return {
            "error": f"estimation failed: {error_reason(e)}",
            "current_step": "estimate",
        }
