from typing import Any, Dict
from app.components.base.exceptions import error_reason
from app.components.base.logging import get_logger
from .models import AnalysisRequest
from .service import AnalysisService

logger = get_logger(__name__)


async def analysis_agent(state: Dict[str, Any], service: AnalysisService) -> Dict[str, Any]:
    """LangGraph node for requirement analysis.

    Returns PARTIAL state update - only changed fields. Failures are
    reported through ``error`` and leave ``current_step`` on analyze.
    """
    try:
        request = AnalysisRequest(
            raw_requirement=state.get("raw_requirement") or "",
            industry=state.get("industry"),
        )
        analysis = await service.process(request)

        return {
            "analysis": analysis.model_dump(),
            "current_step": "breakdown",
            "error": None,
            "messages": [
                {
                    "role": "analysis",
                    "content": f"Identified {analysis.project_type} with {len(analysis.key_features)} key features",
                }
            ],
        }

    except Exception as e:
        logger.warning("Requirement analysis failed", error=error_reason(e))
        return {
            "error": f"analysis failed: {error_reason(e)}",
            "current_step": "analyze",
        }
