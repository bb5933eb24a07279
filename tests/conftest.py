"""Pytest configuration and shared fixtures."""

from typing import Any, Callable, Dict, List, Tuple, Type, Union

import pytest
from pydantic import BaseModel

from app.components.base.config import CostParameters
from app.components.base.exceptions import GenerationError
from shared.schemas import (
    AnalysisResult,
    EffortBreakdown,
    EffortEstimation,
    FunctionBreakdown,
    FunctionModule,
    NonFunctionalRequirements,
    TeamMember,
)

Scripted = Union[BaseModel, Dict[str, Any], Exception, Callable[[str], Any]]


class ScriptedGenerator:
    """Deterministic stand-in for the model: one canned answer per schema."""

    def __init__(self, responses: Dict[Type[BaseModel], Scripted]):
        self.responses = dict(responses)
        self.calls: List[Tuple[Type[BaseModel], str]] = []

    async def generate(self, prompt, schema):
        self.calls.append((schema, prompt))
        if schema not in self.responses:
            raise GenerationError(f"no scripted response for {schema.__name__}", component="test")
        response = self.responses[schema]
        if isinstance(response, Exception):
            raise response
        if callable(response) and not isinstance(response, BaseModel):
            response = response(prompt)
        if isinstance(response, BaseModel):
            response = response.model_dump()
        return schema.model_validate(response)

    def called_schemas(self) -> List[Type[BaseModel]]:
        return [schema for schema, _ in self.calls]


@pytest.fixture
def analysis_result() -> AnalysisResult:
    return AnalysisResult(
        project_type="E-commerce platform",
        business_goals=["Sell products online", "Reduce order handling time"],
        key_features=["Product catalog", "Checkout", "Order tracking"],
        tech_stack=["Python", "FastAPI", "React"],
        non_functional_requirements=NonFunctionalRequirements(
            performance="Pages load in under 2 seconds",
            security="PCI compliant payment handling",
        ),
        risks=["Payment provider integration"],
    )


@pytest.fixture
def function_breakdown() -> FunctionBreakdown:
    return FunctionBreakdown(modules=[
        FunctionModule(
            module_name="User management",
            function_name="User registration",
            description="Sign up with email and password",
            difficulty_level="simple",
            estimated_hours=10,
        ),
        FunctionModule(
            module_name="Order system",
            function_name="Checkout",
            description="Cart checkout with online payment",
            difficulty_level="complex",
            estimated_hours=10,
            dependencies=["User registration"],
        ),
    ])


@pytest.fixture
def effort_estimation() -> EffortEstimation:
    return EffortEstimation(
        total_hours=80,
        breakdown=EffortBreakdown(development=48, testing=16, integration=16),
        team_composition=[TeamMember(role="Backend developer", count=1, duration=10)],
    )


@pytest.fixture
def cost_parameters() -> CostParameters:
    return CostParameters()


@pytest.fixture
def generator(analysis_result, function_breakdown, effort_estimation) -> ScriptedGenerator:
    return ScriptedGenerator({
        AnalysisResult: analysis_result,
        FunctionBreakdown: function_breakdown,
        EffortEstimation: effort_estimation,
    })
