import copy
import operator
from typing import Annotated, Any, Callable, Dict, List, Literal, Mapping, Optional, TypedDict
from pydantic import Field
from shared.schemas.analysis import AnalysisResult
from shared.schemas.base import CamelModel
from shared.schemas.cost import CostEstimate
from shared.schemas.estimation import EffortEstimation
from shared.schemas.function_module import FunctionModule

WorkflowStep = Literal["analyze", "breakdown", "estimate", "calculate", "complete"]

# Forward order of the pipeline; current_step only ever moves right
WORKFLOW_STEPS: List[str] = ["analyze", "breakdown", "estimate", "calculate", "complete"]


class EstimationState(TypedDict, total=False):
    """Workflow state for the estimation pipeline.

    Using total=False allows nodes to return PARTIAL updates.
    Stage outputs are stored as plain dicts (model_dump of the shared schemas).
    """

    # SET AT CREATION - never reassigned
    project_id: str
    requirement_id: str
    raw_requirement: str
    industry: Optional[str]

    # STAGE OUTPUTS
    analysis: Optional[Dict[str, Any]]
    functions: List[Dict[str, Any]]
    estimation: Optional[Dict[str, Any]]
    cost: Optional[Dict[str, Any]]

    # CONTROL FIELDS
    current_step: WorkflowStep
    error: Optional[str]
    is_complete: bool

    # Accumulated progress notes (uses operator.add reducer)
    messages: Annotated[List[Dict[str, str]], operator.add]


# Fields that do not use last-write-wins
STATE_REDUCERS: Dict[str, Callable[[Any, Any], Any]] = {
    "messages": operator.add,
}


def merge_state(state: Mapping[str, Any], update: Mapping[str, Any]) -> Dict[str, Any]:
    """Apply a partial update to a state snapshot, returning a new dict.

    Reducer fields combine old and new values; everything else is replaced.
    """
    merged = dict(state)
    for key, value in update.items():
        reducer = STATE_REDUCERS.get(key)
        if reducer is not None and key in merged:
            merged[key] = reducer(merged[key], value)
        else:
            merged[key] = value
    return merged


def create_initial_state(
    project_id: str,
    requirement_id: str,
    raw_requirement: str,
    industry: Optional[str] = None,
) -> EstimationState:
    return {
        "project_id": project_id,
        "requirement_id": requirement_id,
        "raw_requirement": raw_requirement,
        "industry": industry,
        "analysis": None,
        "functions": [],
        "estimation": None,
        "cost": None,
        "current_step": "analyze",
        "error": None,
        "is_complete": False,
        "messages": [],
    }


class WorkflowResult(CamelModel):
    """Terminal result of one workflow run."""
    success: bool
    analysis: Optional[AnalysisResult] = None
    functions: List[FunctionModule] = Field(default_factory=list)
    estimation: Optional[EffortEstimation] = None
    cost: Optional[CostEstimate] = None
    error: Optional[str] = None
    messages: List[Dict[str, str]] = Field(default_factory=list)

    @classmethod
    def failed(cls, error: str) -> "WorkflowResult":
        return cls(success=False, error=error)


class SnapshotState(CamelModel):
    """Stage outputs and control fields visible in a snapshot."""
    current_step: WorkflowStep
    analysis: Optional[AnalysisResult] = None
    functions: List[FunctionModule] = Field(default_factory=list)
    estimation: Optional[EffortEstimation] = None
    cost: Optional[CostEstimate] = None
    error: Optional[str] = None
    is_complete: bool = False


class WorkflowSnapshot(CamelModel):
    """Copy of the workflow state emitted after a stage has been merged."""
    step: WorkflowStep
    state: SnapshotState


def extract_workflow_result(state: Mapping[str, Any]) -> WorkflowResult:
    error = state.get("error")
    return WorkflowResult(
        success=bool(state.get("is_complete")) and error is None,
        analysis=state.get("analysis"),
        functions=state.get("functions") or [],
        estimation=state.get("estimation"),
        cost=state.get("cost"),
        error=error,
        messages=list(state.get("messages") or []),
    )


def build_snapshot(state: Mapping[str, Any]) -> WorkflowSnapshot:
    """Snapshot detached from the running state."""
    data = copy.deepcopy(dict(state))
    step = data.get("current_step", "analyze")
    return WorkflowSnapshot(
        step=step,
        state=SnapshotState(
            current_step=step,
            analysis=data.get("analysis"),
            functions=data.get("functions") or [],
            estimation=data.get("estimation"),
            cost=data.get("cost"),
            error=data.get("error"),
            is_complete=bool(data.get("is_complete")),
        ),
    )
