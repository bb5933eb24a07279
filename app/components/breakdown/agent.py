from typing import Any, Dict
from app.components.base.exceptions import error_reason
from app.components.base.logging import get_logger
from .models import BreakdownRequest
from .service import BreakdownService

logger = get_logger(__name__)


async def breakdown_agent(state: Dict[str, Any], service: BreakdownService) -> Dict[str, Any]:
    """LangGraph node for function breakdown."""
    try:
        request = BreakdownRequest(
            analysis=state.get("analysis"),
            industry=state.get("industry"),
        )
        breakdown = await service.process(request)

        return {
            "functions": [m.model_dump() for m in breakdown.modules],
            "current_step": "estimate",
            "error": None,
            "messages": [
                {
                    "role": "breakdown",
                    "content": f"Broke the project down into {len(breakdown.modules)} functions",
                }
            ],
        }

    except Exception as e:
        logger.warning("Function breakdown failed", error=error_reason(e))
        return {
            "error": f"breakdown failed: {error_reason(e)}",
            "current_step": "breakdown",
        }
