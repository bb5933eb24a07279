"""Function module schema produced by the breakdown stage."""

from typing import List, Literal, Optional

from pydantic import Field

from shared.schemas.base import CamelModel

DifficultyLevel = Literal["simple", "medium", "complex", "very_complex"]


class FunctionModule(CamelModel):
    """One independently deliverable function of the project."""

    module_name: str = Field(..., description="Module name, e.g. user management, order system")
    function_name: str = Field(..., description="Function name, e.g. user registration, order creation")
    description: str = Field(..., description="What the function does")
    difficulty_level: DifficultyLevel = Field(..., description="Difficulty level")
    estimated_hours: float = Field(
        ..., ge=0, allow_inf_nan=False, description="Estimated effort in hours"
    )
    dependencies: Optional[List[str]] = Field(
        default=None, description="Other functions this one depends on"
    )


class FunctionBreakdown(CamelModel):
    """Wrapper object returned by the model for a breakdown request."""

    modules: List[FunctionModule] = Field(..., description="Function module list")
