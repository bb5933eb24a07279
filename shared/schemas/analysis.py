"""Requirement analysis schema produced by the analyze stage."""

from typing import List, Optional

from pydantic import Field

from shared.schemas.base import CamelModel


class NonFunctionalRequirements(CamelModel):
    """Quality attributes called out by the requirement."""

    performance: Optional[str] = Field(
        default=None, description="Performance requirements (response time, concurrency)"
    )
    security: Optional[str] = Field(
        default=None, description="Security requirements (data protection, access control)"
    )
    scalability: Optional[str] = Field(
        default=None, description="Scalability requirements (future growth)"
    )


class AnalysisResult(CamelModel):
    """Structured reading of a free-text requirement."""

    project_type: str = Field(
        ..., min_length=1, description="Project type, e.g. e-commerce platform, admin system, mobile app"
    )
    business_goals: List[str] = Field(..., description="Business goals the client wants to reach")
    key_features: List[str] = Field(..., description="Functional requirements explicitly mentioned")
    tech_stack: List[str] = Field(..., description="Recommended technology stack")
    non_functional_requirements: NonFunctionalRequirements = Field(
        ..., description="Non-functional requirements"
    )
    risks: List[str] = Field(..., description="Potential project risks")
