"""Tests for the estimation workflow in batch and streaming mode."""

import asyncio

import pytest
from conftest import ScriptedGenerator

from app.components.base.config import CostParameters
from app.components.base.exceptions import GenerationError
from app.components.orchestrator.state import WORKFLOW_STEPS
from app.components.orchestrator.workflow import EstimationWorkflow
from shared.schemas import AnalysisResult, EffortEstimation, FunctionBreakdown

REQUIREMENT = "We need an online shop with a product catalog, checkout and order tracking."


def make_workflow(generator) -> EstimationWorkflow:
    return EstimationWorkflow(generator, cost_parameters=CostParameters())


async def collect(workflow, raw_requirement=REQUIREMENT):
    return [s async for s in workflow.stream("proj_1", "req_1", raw_requirement)]


def assert_forward_only(steps):
    indexes = [WORKFLOW_STEPS.index(step) for step in steps]
    assert indexes == sorted(indexes)
    assert all(b - a <= 1 for a, b in zip(indexes, indexes[1:]))


@pytest.mark.asyncio
async def test_run_completes_all_stages(generator):
    result = await make_workflow(generator).run("proj_1", "req_1", REQUIREMENT)

    assert result.success is True
    assert result.error is None
    assert result.analysis.project_type == "E-commerce platform"
    assert len(result.functions) == 2
    assert result.estimation.total_hours == 80
    assert result.cost.total_cost == 17250
    assert generator.called_schemas() == [AnalysisResult, FunctionBreakdown, EffortEstimation]
    assert [m["role"] for m in result.messages] == [
        "analysis", "breakdown", "estimation", "cost_calculation",
    ]


@pytest.mark.asyncio
async def test_stream_yields_one_snapshot_per_stage(generator):
    snapshots = await collect(make_workflow(generator))

    assert [s.step for s in snapshots] == ["breakdown", "estimate", "calculate", "complete"]
    assert_forward_only(["analyze"] + [s.step for s in snapshots])
    assert snapshots[0].state.analysis is not None
    assert snapshots[0].state.functions == []
    assert snapshots[1].state.functions
    assert snapshots[-1].state.is_complete is True
    assert snapshots[-1].state.cost.total_cost == 17250


@pytest.mark.asyncio
async def test_stream_and_run_agree(generator, analysis_result, function_breakdown, effort_estimation):
    batch = await make_workflow(generator).run("proj_1", "req_1", REQUIREMENT)
    streamed = (await collect(make_workflow(ScriptedGenerator({
        AnalysisResult: analysis_result,
        FunctionBreakdown: function_breakdown,
        EffortEstimation: effort_estimation,
    }))))[-1].state

    assert streamed.analysis == batch.analysis
    assert streamed.functions == batch.functions
    assert streamed.estimation == batch.estimation
    assert streamed.cost == batch.cost
    assert streamed.error == batch.error


@pytest.mark.asyncio
async def test_empty_requirement_fails_before_generation(generator):
    result = await make_workflow(generator).run("proj_1", "req_1", "")

    assert result.success is False
    assert result.error == "analysis failed: requirement text is empty"
    assert result.analysis is None
    assert result.functions == []
    assert result.estimation is None
    assert result.cost is None
    assert generator.calls == []
    assert result.messages[-1]["role"] == "error_handler"


@pytest.mark.asyncio
async def test_empty_breakdown_stops_the_run(analysis_result, effort_estimation):
    generator = ScriptedGenerator({
        AnalysisResult: analysis_result,
        FunctionBreakdown: {"modules": []},
        EffortEstimation: effort_estimation,
    })
    snapshots = await collect(make_workflow(generator))

    assert [s.step for s in snapshots] == ["breakdown", "breakdown"]
    assert snapshots[-1].state.error.startswith("breakdown failed: ")
    assert snapshots[-1].state.is_complete is False
    assert EffortEstimation not in generator.called_schemas()


@pytest.mark.asyncio
@pytest.mark.parametrize("failing_schema,expected_calls", [
    (AnalysisResult, [AnalysisResult]),
    (FunctionBreakdown, [AnalysisResult, FunctionBreakdown]),
    (EffortEstimation, [AnalysisResult, FunctionBreakdown, EffortEstimation]),
])
async def test_failure_skips_remaining_stages(
    failing_schema, expected_calls, analysis_result, function_breakdown, effort_estimation
):
    responses = {
        AnalysisResult: analysis_result,
        FunctionBreakdown: function_breakdown,
        EffortEstimation: effort_estimation,
    }
    responses[failing_schema] = GenerationError("model returned garbage")
    generator = ScriptedGenerator(responses)

    result = await make_workflow(generator).run("proj_1", "req_1", REQUIREMENT)

    assert result.success is False
    assert result.error.endswith("model returned garbage")
    assert result.cost is None
    assert generator.called_schemas() == expected_calls


@pytest.mark.asyncio
async def test_calculation_failure_is_reported(generator):
    workflow = EstimationWorkflow(generator, cost_parameters=CostParameters(risk_buffer_percentage=150))
    result = await workflow.run("proj_1", "req_1", REQUIREMENT)

    assert result.success is False
    assert result.error.startswith("calculation failed: buffer_percentage")
    assert result.estimation is not None
    assert result.cost is None


@pytest.mark.asyncio
async def test_stream_is_lazy(generator):
    snapshots = make_workflow(generator).stream("proj_1", "req_1", REQUIREMENT)
    first = await snapshots.__anext__()
    await snapshots.aclose()

    assert first.step == "breakdown"
    assert EffortEstimation not in generator.called_schemas()


@pytest.mark.asyncio
async def test_concurrent_runs_do_not_share_state(generator):
    workflow = make_workflow(generator)
    ok, failed = await asyncio.gather(
        workflow.run("proj_1", "req_1", REQUIREMENT),
        workflow.run("proj_2", "req_2", "   "),
    )

    assert ok.success is True
    assert failed.success is False
    assert failed.analysis is None
