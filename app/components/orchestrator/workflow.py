import time
from typing import Any, AsyncIterator, Dict, Optional
from langgraph.graph import StateGraph, END
from app.components.base.config import CostParameters
from app.components.base.exceptions import error_reason
from app.components.base.logging import get_logger
from app.components.templates.service import TemplateSource
from app.utils.structured_generation import StructuredGenerator
from ..analysis.agent import analysis_agent
from ..analysis.service import AnalysisService
from ..breakdown.agent import breakdown_agent
from ..breakdown.service import BreakdownService
from ..estimation.agent import estimation_agent
from ..estimation.service import EstimationService
from ..cost_calculation.agent import cost_calculation_agent
from ..cost_calculation.service import CostCalculationService
from .state import (
    EstimationState,
    WorkflowResult,
    WorkflowSnapshot,
    build_snapshot,
    create_initial_state,
    extract_workflow_result,
    merge_state,
)

logger = get_logger(__name__)

# Next node for each value of current_step after a successful stage
STAGE_ROUTES = {
    "breakdown": "breakdown",
    "estimate": "estimate",
    "calculate": "calculate",
    "complete": END,
}

STAGE_NODES = ["analyze", "breakdown", "estimate", "calculate"]


async def failed_node(state: EstimationState) -> dict:
    """Terminal node for a run that stopped on an error."""
    logger.warning(
        "Workflow terminated",
        project_id=state.get("project_id"),
        step=state.get("current_step"),
        error=state.get("error"),
    )
    return {
        "messages": [
            {
                "role": "error_handler",
                "content": f"Error: {state.get('error', 'Unknown error')}",
            }
        ],
    }


def route_after_stage(state: EstimationState) -> str:
    """Stop on error, otherwise follow current_step to the next stage."""
    if state.get("error"):
        return "failed"
    return STAGE_ROUTES.get(state.get("current_step"), END)


def create_estimation_workflow(
    analysis: AnalysisService,
    breakdown: BreakdownService,
    estimation: EstimationService,
    cost_calculation: CostCalculationService,
):
    """Create the LangGraph workflow for cost estimation.

    Workflow:
    analyze -> breakdown -> estimate -> calculate -> END

    Every stage has an exit edge to ``failed`` (then END) taken as soon as
    the stage reports an error.
    """

    async def analyze_node(state: EstimationState) -> dict:
        return await analysis_agent(state, analysis)

    async def breakdown_node(state: EstimationState) -> dict:
        return await breakdown_agent(state, breakdown)

    async def estimate_node(state: EstimationState) -> dict:
        return await estimation_agent(state, estimation)

    async def calculate_node(state: EstimationState) -> dict:
        return await cost_calculation_agent(state, cost_calculation)

    workflow = StateGraph(EstimationState)

    # Add nodes
    workflow.add_node("analyze", analyze_node)
    workflow.add_node("breakdown", breakdown_node)
    workflow.add_node("estimate", estimate_node)
    workflow.add_node("calculate", calculate_node)
    workflow.add_node("failed", failed_node)

    # Set entry point
    workflow.set_entry_point("analyze")

    # Wire edges
    workflow.add_conditional_edges(
        "analyze",
        route_after_stage,
        {"breakdown": "breakdown", "failed": "failed", END: END},
    )
    workflow.add_conditional_edges(
        "breakdown",
        route_after_stage,
        {"estimate": "estimate", "failed": "failed", END: END},
    )
    workflow.add_conditional_edges(
        "estimate",
        route_after_stage,
        {"calculate": "calculate", "failed": "failed", END: END},
    )
    workflow.add_conditional_edges(
        "calculate",
        route_after_stage,
        {"failed": "failed", END: END},
    )
    workflow.add_edge("failed", END)

    return workflow.compile()


class EstimationWorkflow:
    """Run the estimation pipeline to completion or as a stream of snapshots.

    Each call builds its own initial state; the compiled graph holds no
    per-run data, so one instance can serve concurrent runs.
    """

    def __init__(
        self,
        generator: StructuredGenerator,
        templates: Optional[TemplateSource] = None,
        cost_parameters: Optional[CostParameters] = None,
    ):
        self.analysis = AnalysisService(generator, templates)
        self.breakdown = BreakdownService(generator, templates)
        self.estimation = EstimationService(generator, templates)
        self.cost_calculation = CostCalculationService(cost_parameters)
        self.graph = create_estimation_workflow(
            self.analysis, self.breakdown, self.estimation, self.cost_calculation
        )

    async def run(
        self,
        project_id: str,
        requirement_id: str,
        raw_requirement: str,
        industry: Optional[str] = None,
    ) -> WorkflowResult:
        """Run every stage and return the extracted terminal result."""
        logger.info(
            "Starting estimation workflow",
            project_id=project_id,
            requirement_id=requirement_id,
            requirement_length=len(raw_requirement or ""),
        )
        started = time.perf_counter()
        initial_state = create_initial_state(project_id, requirement_id, raw_requirement, industry)

        try:
            final_state = await self.graph.ainvoke(initial_state)
        except Exception as e:
            logger.exception("Estimation workflow crashed", project_id=project_id)
            return WorkflowResult.failed(error_reason(e))

        result = extract_workflow_result(final_state)
        logger.info(
            "Estimation workflow finished",
            project_id=project_id,
            duration_ms=int((time.perf_counter() - started) * 1000),
            success=result.success,
            functions=len(result.functions),
            has_cost=result.cost is not None,
        )
        return result

    async def stream(
        self,
        project_id: str,
        requirement_id: str,
        raw_requirement: str,
        industry: Optional[str] = None,
    ) -> AsyncIterator[WorkflowSnapshot]:
        """Yield one snapshot after each stage has been merged.

        The graph only advances when the caller asks for the next snapshot.
        The sequence ends after the first snapshot that carries an error.
        """
        logger.info("Starting streaming estimation workflow", project_id=project_id)
        state: Dict[str, Any] = create_initial_state(
            project_id, requirement_id, raw_requirement, industry
        )

        updates = self.graph.astream(state, stream_mode="updates")
        try:
            async for chunk in updates:
                for node_name, node_output in chunk.items():
                    if node_name not in STAGE_NODES:
                        continue
                    state = merge_state(state, node_output or {})
                    snapshot = build_snapshot(state)
                    yield snapshot
                    if snapshot.state.error:
                        return
        finally:
            await updates.aclose()
