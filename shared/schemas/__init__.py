"""Shared Pydantic schemas for the estimation workflow."""

from shared.schemas.analysis import AnalysisResult, NonFunctionalRequirements
from shared.schemas.base import CamelModel
from shared.schemas.cost import CostBreakdown, CostEstimate, ThirdPartyService
from shared.schemas.estimation import EffortBreakdown, EffortEstimation, TeamMember
from shared.schemas.function_module import DifficultyLevel, FunctionBreakdown, FunctionModule

__all__ = [
    "AnalysisResult",
    "NonFunctionalRequirements",
    "CamelModel",
    "CostBreakdown",
    "CostEstimate",
    "ThirdPartyService",
    "EffortBreakdown",
    "EffortEstimation",
    "TeamMember",
    "DifficultyLevel",
    "FunctionBreakdown",
    "FunctionModule",
]
