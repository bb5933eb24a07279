"""HTTP tests for the agent and project endpoints."""

import json
from typing import List, Tuple
from unittest.mock import AsyncMock

import anyio
import pytest
from conftest import ScriptedGenerator
from httpx import ASGITransport, AsyncClient

from app.components.base.config import CostParameters
from app.components.orchestrator.router import get_service
from app.components.orchestrator.service import AgentRunRequest, OrchestratorService
from app.components.orchestrator.workflow import EstimationWorkflow
from app.components.projects.models import ProjectCreateRequest, RequirementCreateRequest
from app.components.projects.router import get_project_service
from app.components.projects.service import ProjectService
from app.main import app
from shared.schemas import AnalysisResult, FunctionBreakdown


@pytest.fixture
def projects(tmp_path) -> ProjectService:
    return ProjectService(str(tmp_path / "projects"))


@pytest.fixture
def generator_holder(generator):
    return {"generator": generator}


@pytest.fixture
async def client(projects, generator_holder):
    def orchestrator():
        workflow = EstimationWorkflow(generator_holder["generator"], cost_parameters=CostParameters())
        return OrchestratorService(workflow=workflow, projects=projects, timeout_seconds=30)

    app.dependency_overrides[get_service] = orchestrator
    app.dependency_overrides[get_project_service] = lambda: projects
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


async def seed(projects: ProjectService, raw_content="Build an online shop with checkout") -> Tuple[str, str]:
    project = await projects.process(ProjectCreateRequest(name="Shop"))
    requirement = await projects.create_requirement(
        project.project_id, RequirementCreateRequest(raw_content=raw_content)
    )
    return project.project_id, requirement.requirement_id


def parse_sse(body: str) -> List[Tuple[str, dict]]:
    events = []
    for block in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in block.splitlines())
        events.append((lines["event"], json.loads(lines["data"])))
    return events


@pytest.mark.asyncio
async def test_run_success_persists_results(client, projects):
    project_id, requirement_id = await seed(projects)

    resp = await client.post("/api/v1/agent/run", json={"projectId": project_id, "requirementId": requirement_id})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["success"] is True
    assert body["data"]["analysis"]["projectType"] == "E-commerce platform"
    assert body["data"]["cost"]["totalCost"] == 17250
    assert len(body["data"]["functions"]) == 2

    assert (await projects.get_project(project_id)).status == "completed"
    assert len(await projects.get_functions(project_id)) == 2
    assert (await projects.get_cost(project_id)).total_cost == 17250
    requirement = await projects.get_requirement(project_id, requirement_id)
    assert requirement.parsed_content.project_type == "E-commerce platform"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"projectId": "proj_x"}, {"requirementId": "req_x"}])
async def test_run_missing_parameters(client, body):
    resp = await client.post("/api/v1/agent/run", json=body)
    assert resp.status_code == 400
    assert "error" in resp.json()


@pytest.mark.asyncio
async def test_run_unknown_requirement(client, projects):
    project_id, _ = await seed(projects)
    resp = await client.post("/api/v1/agent/run", json={"projectId": project_id, "requirementId": "req_nope"})
    assert resp.status_code == 404
    assert "req_nope" in resp.json()["error"]


@pytest.mark.asyncio
async def test_run_blank_requirement(client, projects, generator):
    project_id, requirement_id = await seed(projects, raw_content="   ")
    resp = await client.post("/api/v1/agent/run", json={"projectId": project_id, "requirementId": requirement_id})

    assert resp.status_code == 400
    assert resp.json() == {"error": "requirement text is empty"}
    assert generator.calls == []
    assert (await projects.get_project(project_id)).status == "draft"


@pytest.mark.asyncio
async def test_run_failure_rolls_back_status(client, projects, generator_holder, analysis_result):
    generator_holder["generator"] = ScriptedGenerator({
        AnalysisResult: analysis_result,
        FunctionBreakdown: {"modules": []},
    })
    project_id, requirement_id = await seed(projects)

    resp = await client.post("/api/v1/agent/run", json={"projectId": project_id, "requirementId": requirement_id})

    assert resp.status_code == 500
    assert resp.json()["error"].startswith("breakdown failed: ")
    assert (await projects.get_project(project_id)).status == "draft"
    assert await projects.get_cost(project_id) is None


@pytest.mark.asyncio
async def test_stream_success(client, projects):
    project_id, requirement_id = await seed(projects)

    resp = await client.post("/api/v1/agent/stream", json={"projectId": project_id, "requirementId": requirement_id})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/event-stream")
    events = parse_sse(resp.text)
    assert [name for name, _ in events] == ["progress"] * 4 + ["complete"]
    assert [data["step"] for _, data in events[:4]] == ["breakdown", "estimate", "calculate", "complete"]
    assert events[3][1]["isComplete"] is True

    complete = events[-1][1]
    assert complete["success"] is True
    assert complete["data"]["cost"]["totalCost"] == 17250
    assert complete["data"]["estimation"]["totalHours"] == 80
    assert (await projects.get_project(project_id)).status == "completed"


@pytest.mark.asyncio
async def test_stream_failure(client, projects, generator_holder, analysis_result):
    generator_holder["generator"] = ScriptedGenerator({
        AnalysisResult: analysis_result,
        FunctionBreakdown: {"modules": []},
    })
    project_id, requirement_id = await seed(projects)

    resp = await client.post("/api/v1/agent/stream", json={"projectId": project_id, "requirementId": requirement_id})

    events = parse_sse(resp.text)
    assert [name for name, _ in events] == ["progress", "progress", "error"]
    assert events[1][1]["error"].startswith("breakdown failed: ")
    assert events[-1][1]["error"] == events[1][1]["error"]
    assert (await projects.get_project(project_id)).status == "draft"


@pytest.mark.asyncio
async def test_stream_validation_errors_are_plain_json(client, projects):
    resp = await client.post("/api/v1/agent/stream", json={})
    assert resp.status_code == 400

    project_id, _ = await seed(projects)
    resp = await client.post("/api/v1/agent/stream", json={"projectId": project_id, "requirementId": "req_nope"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_project_endpoints(client):
    resp = await client.post("/api/v1/projects", json={"name": "CRM", "industry": "finance"})
    assert resp.status_code == 200
    project_id = resp.json()["projectId"]

    resp = await client.post(f"/api/v1/projects/{project_id}/requirements", json={"rawContent": "Build a CRM"})
    assert resp.status_code == 200
    requirement_id = resp.json()["requirementId"]

    resp = await client.post("/api/v1/agent/run", json={"projectId": project_id, "requirementId": requirement_id})
    assert resp.status_code == 200

    resp = await client.get(f"/api/v1/projects/{project_id}/estimate")
    assert resp.status_code == 200
    estimate = resp.json()
    assert estimate["project"]["status"] == "completed"
    assert len(estimate["functions"]) == 2
    assert estimate["cost"]["totalCost"] == 17250


@pytest.mark.asyncio
async def test_unknown_project_is_404(client):
    resp = await client.get("/api/v1/projects/proj_missing")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_config_hides_nothing_sensitive(client):
    resp = await client.get("/api/v1/config")
    assert resp.status_code == 200
    data = resp.json()
    assert data["cost_parameters"]["labor_cost_per_day"] == 1500
    assert data["cost_parameters"]["risk_buffer_percentage"] == 15


@pytest.mark.asyncio
async def test_run_save_failure_rolls_back_status(client, projects, monkeypatch):
    monkeypatch.setattr(projects, "replace_functions", AsyncMock(side_effect=OSError("disk full")))
    project_id, requirement_id = await seed(projects)

    resp = await client.post("/api/v1/agent/run", json={"projectId": project_id, "requirementId": requirement_id})

    assert resp.status_code == 500
    assert resp.json() == {"error": "disk full"}
    assert (await projects.get_project(project_id)).status == "draft"


@pytest.mark.asyncio
async def test_stream_client_disconnect_rolls_back_status(projects, generator):
    service = OrchestratorService(
        workflow=EstimationWorkflow(generator, cost_parameters=CostParameters()),
        projects=projects,
        timeout_seconds=30,
    )
    project_id, requirement_id = await seed(projects)
    run = await service.prepare(AgentRunRequest(project_id=project_id, requirement_id=requirement_id))
    received = []

    async def consume(scope: anyio.CancelScope):
        async for event in service.process_streaming(run):
            received.append(event)
            scope.cancel()

    async with anyio.create_task_group() as tg:
        tg.start_soon(consume, tg.cancel_scope)

    assert received
    assert all(event.startswith("event: progress") for event in received)
    assert (await projects.get_project(project_id)).status == "draft"
    assert await projects.get_cost(project_id) is None
