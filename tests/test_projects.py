"""Tests for the file-backed project store."""

import pytest

from app.components.base.exceptions import ProjectNotFoundError, RequirementNotFoundError
from app.components.projects.models import ProjectCreateRequest, RequirementCreateRequest
from app.components.projects.service import ProjectService


@pytest.fixture
def store(tmp_path) -> ProjectService:
    return ProjectService(str(tmp_path))


@pytest.mark.asyncio
async def test_create_and_get_project(store):
    project = await store.process(ProjectCreateRequest(name="Shop", industry="retail"))

    assert project.project_id.startswith("proj_")
    assert project.status == "draft"
    loaded = await store.get_project(project.project_id)
    assert loaded == project


@pytest.mark.asyncio
async def test_update_status(store):
    project = await store.process(ProjectCreateRequest(name="Shop"))
    await store.update_status(project.project_id, "analyzing")
    assert (await store.get_project(project.project_id)).status == "analyzing"


@pytest.mark.asyncio
async def test_unknown_project(store):
    with pytest.raises(ProjectNotFoundError):
        await store.get_project("proj_missing")


@pytest.mark.asyncio
async def test_path_like_ids_are_rejected(store):
    with pytest.raises(ProjectNotFoundError):
        await store.get_project("../etc")


@pytest.mark.asyncio
async def test_requirements(store, analysis_result):
    project = await store.process(ProjectCreateRequest(name="Shop"))
    requirement = await store.create_requirement(
        project.project_id, RequirementCreateRequest(raw_content="Build a shop")
    )

    loaded = await store.get_requirement(project.project_id, requirement.requirement_id)
    assert loaded.raw_content == "Build a shop"
    assert loaded.parsed_content is None

    await store.save_requirement_analysis(project.project_id, requirement.requirement_id, analysis_result)
    loaded = await store.get_requirement(project.project_id, requirement.requirement_id)
    assert loaded.parsed_content == analysis_result

    with pytest.raises(RequirementNotFoundError):
        await store.get_requirement(project.project_id, "req_missing")


@pytest.mark.asyncio
async def test_functions_and_cost_are_replaced(store, function_breakdown, effort_estimation, cost_parameters):
    from app.components.cost_calculation.service import CostCalculationService

    project = await store.process(ProjectCreateRequest(name="Shop"))
    assert await store.get_functions(project.project_id) == []
    assert await store.get_cost(project.project_id) is None

    await store.replace_functions(project.project_id, function_breakdown.modules)
    await store.replace_functions(project.project_id, function_breakdown.modules[:1])
    assert await store.get_functions(project.project_id) == function_breakdown.modules[:1]

    cost = CostCalculationService(cost_parameters).calculate(effort_estimation)
    await store.replace_cost(project.project_id, cost)
    assert await store.get_cost(project.project_id) == cost
