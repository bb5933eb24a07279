import asyncio
import json
import time
import anyio
from typing import Any, AsyncGenerator, List, Literal, Optional
from pydantic import Field
from app.components.base.component import BaseComponent
from app.components.base.config import get_settings
from app.components.base.exceptions import (
    EmptyInputError,
    MissingParameterError,
    WorkflowFailedError,
    error_reason,
)
from app.components.base.logging import get_logger
from app.components.projects.service import ProjectService
from app.components.templates.service import TemplateService
from app.utils.structured_generation import OllamaStructuredGenerator
from shared.schemas.analysis import AnalysisResult
from shared.schemas.base import CamelModel
from shared.schemas.cost import CostEstimate
from shared.schemas.estimation import EffortEstimation
from shared.schemas.function_module import FunctionModule
from .state import WorkflowResult, WorkflowSnapshot
from .workflow import EstimationWorkflow

logger = get_logger(__name__)


class AgentRunRequest(CamelModel):
    """Request body for both the batch and the streaming endpoint.

    Fields are optional so a missing id is reported as a 400 by the service
    rather than rejected by request validation.
    """
    project_id: Optional[str] = None
    requirement_id: Optional[str] = None


class AgentRunResponse(CamelModel):
    success: bool
    data: WorkflowResult


class ProgressEventData(CamelModel):
    step: str
    is_complete: bool = False
    error: Optional[str] = None


class CompleteEventData(CamelModel):
    analysis: Optional[AnalysisResult] = None
    functions: List[FunctionModule] = Field(default_factory=list)
    estimation: Optional[EffortEstimation] = None
    cost: Optional[CostEstimate] = None


StreamEventType = Literal["progress", "complete", "error"]

# Sentinel put on the snapshot queue once the workflow stream is exhausted
_STREAM_END = object()


class PreparedRun(CamelModel):
    """Validated inputs for one workflow invocation."""
    project_id: str
    requirement_id: str
    raw_requirement: str
    industry: Optional[str] = None


class OrchestratorService(BaseComponent[AgentRunRequest, AgentRunResponse]):
    """Run the estimation workflow for a stored requirement and persist the result.

    Project status goes ``analyzing`` while the workflow runs, then
    ``completed`` on success or back to ``draft`` on any failure.
    """

    def __init__(
        self,
        workflow: Optional[EstimationWorkflow] = None,
        projects: Optional[ProjectService] = None,
        timeout_seconds: Optional[float] = None,
    ):
        settings = get_settings()
        self.workflow = workflow or EstimationWorkflow(
            OllamaStructuredGenerator(),
            TemplateService(),
            settings.cost_parameters(),
        )
        self.projects = projects or ProjectService()
        self.timeout_seconds = timeout_seconds or settings.workflow_timeout_seconds

    @property
    def component_name(self) -> str:
        return "orchestrator"

    async def prepare(self, request: AgentRunRequest) -> PreparedRun:
        """Validate ids and load the requirement.

        Raises:
            MissingParameterError: projectId or requirementId is missing
            ProjectNotFoundError / RequirementNotFoundError: unknown ids
            EmptyInputError: the stored requirement text is blank
        """
        if not request.project_id or not request.requirement_id:
            raise MissingParameterError(
                "projectId and requirementId are required", component=self.component_name
            )

        project = await self.projects.get_project(request.project_id)
        requirement = await self.projects.get_requirement(request.project_id, request.requirement_id)
        if not requirement.raw_content or not requirement.raw_content.strip():
            raise EmptyInputError("requirement text is empty", component=self.component_name)

        return PreparedRun(
            project_id=project.project_id,
            requirement_id=requirement.requirement_id,
            raw_requirement=requirement.raw_content,
            industry=project.industry,
        )

    async def process(self, request: AgentRunRequest) -> AgentRunResponse:
        """Run the whole workflow and return its result."""
        run = await self.prepare(request)
        await self.projects.update_status(run.project_id, "analyzing")

        started = time.perf_counter()
        try:
            result = await asyncio.wait_for(
                self.workflow.run(
                    run.project_id, run.requirement_id, run.raw_requirement, run.industry
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            await self._rollback(run.project_id)
            raise WorkflowFailedError(
                f"workflow timed out after {self.timeout_seconds:g}s", component=self.component_name
            )
        except BaseException:
            await self._rollback(run.project_id)
            raise

        if not result.success:
            await self._rollback(run.project_id)
            raise WorkflowFailedError(result.error or "workflow failed", component=self.component_name)

        try:
            await self._persist(run, result)
        except Exception as e:
            logger.exception("Saving estimation failed", project_id=run.project_id)
            await self._rollback(run.project_id)
            raise WorkflowFailedError(error_reason(e), component=self.component_name)

        logger.info(
            "Estimation run completed",
            project_id=run.project_id,
            duration_ms=int((time.perf_counter() - started) * 1000),
        )
        return AgentRunResponse(success=True, data=result)

    async def process_streaming(self, run: PreparedRun) -> AsyncGenerator[str, None]:
        """Stream workflow progress as SSE events.

        ``run`` comes from ``prepare()`` so validation errors surface as HTTP
        errors before the stream opens. Emits ``progress`` after each stage,
        then exactly one ``complete`` or ``error`` event.
        """
        await self.projects.update_status(run.project_id, "analyzing")
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout_seconds
        # One slot: the workflow runs at most one stage ahead of the client
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        producer = asyncio.create_task(self._pump_snapshots(run, queue))
        last: Optional[WorkflowSnapshot] = None
        finished = False

        try:
            while True:
                item = await asyncio.wait_for(queue.get(), timeout=max(deadline - loop.time(), 0))
                if item is _STREAM_END:
                    break
                if isinstance(item, Exception):
                    raise item
                snapshot: WorkflowSnapshot = item
                last = snapshot

                yield self._format_sse_event("progress", ProgressEventData(
                    step=snapshot.step,
                    is_complete=snapshot.state.is_complete,
                    error=snapshot.state.error,
                ))

                if snapshot.state.error:
                    await self._rollback(run.project_id)
                    finished = True
                    yield self._format_sse_event("error", {"error": snapshot.state.error})
                    return

            if last is None or not last.state.is_complete:
                await self._rollback(run.project_id)
                finished = True
                yield self._format_sse_event("error", {"error": "workflow ended before completion"})
                return

            state = last.state
            await self._persist(run, WorkflowResult(
                success=True,
                analysis=state.analysis,
                functions=state.functions,
                estimation=state.estimation,
                cost=state.cost,
            ))
            finished = True
            yield self._format_sse_event("complete", {
                "success": True,
                "data": CompleteEventData(
                    analysis=state.analysis,
                    functions=state.functions,
                    estimation=state.estimation,
                    cost=state.cost,
                ).model_dump(by_alias=True),
            })

        except asyncio.TimeoutError:
            await self._rollback(run.project_id)
            finished = True
            yield self._format_sse_event(
                "error", {"error": f"workflow timed out after {self.timeout_seconds:g}s"}
            )
        except Exception as e:
            logger.exception("Streaming estimation failed", project_id=run.project_id)
            await self._rollback(run.project_id)
            finished = True
            yield self._format_sse_event("error", {"error": error_reason(e)})
        finally:
            # Starlette cancels the body iterator when the client disconnects
            with anyio.CancelScope(shield=True):
                producer.cancel()
                await asyncio.gather(producer, return_exceptions=True)
                if not finished:
                    logger.info("Streaming estimation cancelled", project_id=run.project_id)
                    await self._rollback(run.project_id)

    async def _pump_snapshots(self, run: PreparedRun, queue: asyncio.Queue) -> None:
        """Feed workflow snapshots into ``queue`` from a single task."""
        snapshots = self.workflow.stream(
            run.project_id, run.requirement_id, run.raw_requirement, run.industry
        )
        try:
            async for snapshot in snapshots:
                await queue.put(snapshot)
        except Exception as e:
            await queue.put(e)
            return
        finally:
            await snapshots.aclose()
        await queue.put(_STREAM_END)

    def _format_sse_event(self, event_type: StreamEventType, data: Any) -> str:
        """Format event as SSE string."""
        if isinstance(data, CamelModel):
            payload = data.model_dump_json(by_alias=True)
        else:
            payload = json.dumps(data, ensure_ascii=False, default=str)
        return f"event: {event_type}\ndata: {payload}\n\n"

    async def _persist(self, run: PreparedRun, result: WorkflowResult) -> None:
        if result.analysis is not None:
            await self.projects.save_requirement_analysis(
                run.project_id, run.requirement_id, result.analysis
            )
        await self.projects.replace_functions(run.project_id, result.functions)
        if result.cost is not None:
            await self.projects.replace_cost(run.project_id, result.cost)
        await self.projects.update_status(run.project_id, "completed")

    async def _rollback(self, project_id: str) -> None:
        try:
            await self.projects.update_status(project_id, "draft")
        except Exception as e:
            logger.error("Status rollback failed", project_id=project_id, error=error_reason(e))
