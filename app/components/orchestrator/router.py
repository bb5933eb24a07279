from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from app.components.base.exceptions import ComponentError
from .service import AgentRunRequest, AgentRunResponse, OrchestratorService

router = APIRouter(prefix="/agent", tags=["Estimation Agent"])

_service: OrchestratorService | None = None


def get_service() -> OrchestratorService:
    global _service
    if _service is None:
        _service = OrchestratorService()
    return _service


def _error_response(error: ComponentError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


@router.post("/run", response_model=AgentRunResponse, response_model_by_alias=True)
async def run_agent(
    request: AgentRunRequest,
    service: OrchestratorService = Depends(get_service),
):
    """Run the full estimation workflow for a stored requirement."""
    try:
        return await service.process(request)
    except ComponentError as e:
        return _error_response(e)


@router.post("/stream")
async def run_agent_stream(
    request: AgentRunRequest,
    service: OrchestratorService = Depends(get_service),
):
    """Run the estimation workflow with Server-Sent Events progress.

    Events:
    - progress: a stage finished ({step, isComplete, error})
    - complete: all stages finished ({success, data})
    - error: the run stopped ({error})
    """
    try:
        run = await service.prepare(request)
    except ComponentError as e:
        return _error_response(e)

    return StreamingResponse(
        service.process_streaming(run),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )
