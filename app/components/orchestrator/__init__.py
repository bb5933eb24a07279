from .state import EstimationState, WorkflowResult, WorkflowSnapshot
from .workflow import EstimationWorkflow, create_estimation_workflow
from .service import OrchestratorService
from .router import router

__all__ = [
    "EstimationState",
    "WorkflowResult",
    "WorkflowSnapshot",
    "EstimationWorkflow",
    "create_estimation_workflow",
    "OrchestratorService",
    "router",
]
