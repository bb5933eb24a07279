"""Effort estimation schema produced by the estimate stage."""

from typing import List

from pydantic import Field

from shared.schemas.base import CamelModel


class EffortBreakdown(CamelModel):
    """Hours per delivery phase."""

    development: float = Field(..., ge=0, allow_inf_nan=False, description="Development hours")
    testing: float = Field(..., ge=0, allow_inf_nan=False, description="Testing hours")
    integration: float = Field(..., ge=0, allow_inf_nan=False, description="Integration hours")


class TeamMember(CamelModel):
    """A role in the proposed team."""

    role: str = Field(..., description="Role, e.g. frontend developer, backend developer, QA engineer")
    count: float = Field(..., ge=0, allow_inf_nan=False, description="Number of people")
    duration: float = Field(..., ge=0, allow_inf_nan=False, description="Engagement length in days")


class EffortEstimation(CamelModel):
    """Total effort and team composition for the project."""

    total_hours: float = Field(..., ge=0, allow_inf_nan=False, description="Total effort in hours")
    breakdown: EffortBreakdown
    team_composition: List[TeamMember] = Field(
        ..., min_length=1, description="Suggested team composition"
    )
