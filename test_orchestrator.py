"""Tests for the section orchestrator."""
import asyncio

import pytest

from conftest import FakeOpenAI, connection_error, section_output, valid_brief
from errors import GenerationError, SchemaError, ValidationError
from models import Blueprint, PipelineStatus, SectionKind
from orchestrator import BlueprintOrchestrator, create_blueprint, section_plan
from pipeline.formatter import blueprint_payload
from pipeline.normalizer import normalize_brief


def test_section_plan_follows_research_flag():
    with_research = normalize_brief(valid_brief(includeResearch=True))
    without_research = normalize_brief(valid_brief(includeResearch=False))

    assert section_plan(with_research) == [
        SectionKind.CORE_CONCEPT,
        SectionKind.SCRIPT,
        SectionKind.VISUAL_PLAN,
        SectionKind.AUDIO_PLAN,
        SectionKind.RESEARCH,
        SectionKind.WORKFLOW,
    ]
    assert SectionKind.RESEARCH not in section_plan(without_research)


@pytest.mark.asyncio
async def test_complete_blueprint_with_research(make_client):
    fake = FakeOpenAI()
    brief = normalize_brief(valid_brief())
    assert brief.keywords == ["ai"]

    result = await BlueprintOrchestrator(brief, make_client(fake)).run()

    assert result.status == PipelineStatus.COMPLETE
    assert len(result.sections_completed) == 6
    assert [kind for kind, _ in fake.requests] == result.sections_completed

    blueprint = result.blueprint
    assert isinstance(blueprint, Blueprint)
    assert blueprint.research is not None
    assert blueprint.script.outline
    script_names = set(blueprint.script.segment_names)
    assert all(scene.segment in script_names for scene in blueprint.visual_plan.scene_design)


@pytest.mark.asyncio
async def test_blueprint_without_research(make_client):
    fake = FakeOpenAI()
    brief = normalize_brief(valid_brief(includeResearch=False))

    result = await BlueprintOrchestrator(brief, make_client(fake)).run()

    assert result.ok
    assert result.blueprint.research is None
    assert fake.calls[SectionKind.RESEARCH] == 0
    assert "research" not in blueprint_payload(result.blueprint)


@pytest.mark.asyncio
async def test_script_failure_stops_pipeline(make_client):
    fake = FakeOpenAI({SectionKind.SCRIPT: [connection_error()]})
    brief = normalize_brief(valid_brief())

    result = await BlueprintOrchestrator(brief, make_client(fake, max_retries=2)).run()

    assert result.status == PipelineStatus.FAILED
    assert result.failed_section == SectionKind.SCRIPT
    assert isinstance(result.error, GenerationError)
    assert result.blueprint is None
    assert result.sections_completed == [SectionKind.CORE_CONCEPT]
    assert fake.calls[SectionKind.CORE_CONCEPT] == 1
    assert fake.calls[SectionKind.SCRIPT] == 1 + 2
    for kind in [SectionKind.VISUAL_PLAN, SectionKind.AUDIO_PLAN, SectionKind.RESEARCH, SectionKind.WORKFLOW]:
        assert fake.calls[kind] == 0


@pytest.mark.asyncio
async def test_schema_failure_is_not_retried(make_client):
    visual = section_output(SectionKind.VISUAL_PLAN)
    visual["sceneDesign"][0]["segment"] = "Outro Montage"
    fake = FakeOpenAI({SectionKind.VISUAL_PLAN: [visual]})
    brief = normalize_brief(valid_brief())

    result = await BlueprintOrchestrator(brief, make_client(fake)).run()

    assert result.failed_section == SectionKind.VISUAL_PLAN
    assert isinstance(result.error, SchemaError)
    assert result.error.field == "sceneDesign.0.segment"
    assert fake.calls[SectionKind.VISUAL_PLAN] == 1
    assert fake.calls[SectionKind.AUDIO_PLAN] == 0


@pytest.mark.asyncio
async def test_run_is_terminal(make_client):
    fake = FakeOpenAI()
    orchestrator = BlueprintOrchestrator(normalize_brief(valid_brief()), make_client(fake))

    first = await orchestrator.run()
    second = await orchestrator.run()

    assert first is second
    assert fake.calls[SectionKind.CORE_CONCEPT] == 1


@pytest.mark.asyncio
async def test_create_blueprint_short_circuits_invalid_brief(make_client):
    fake = FakeOpenAI()

    with pytest.raises(ValidationError) as exc:
        await create_blueprint(valid_brief(duration="8"), make_client(fake))

    assert exc.value.field == "duration"
    assert fake.requests == []


@pytest.mark.asyncio
async def test_create_blueprint_raises_terminal_error(make_client):
    fake = FakeOpenAI({SectionKind.WORKFLOW: ["not json at all"]})

    with pytest.raises(SchemaError) as exc:
        await create_blueprint(valid_brief(), make_client(fake))
    assert exc.value.section == "workflow"


@pytest.mark.asyncio
async def test_cancellation_stops_further_sections(make_client):
    started = asyncio.Event()
    fake = FakeOpenAI()
    answer = fake.create

    async def create(**kwargs):
        if kwargs["messages"][-1]["content"].startswith("Plan the voice"):
            started.set()
            await asyncio.sleep(10)
        return await answer(**kwargs)

    fake.chat.completions.create = create
    orchestrator = BlueprintOrchestrator(normalize_brief(valid_brief()), make_client(fake, timeout=30))

    task = asyncio.ensure_future(orchestrator.run())
    await started.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert orchestrator.sections == {}
    assert orchestrator.result is None
    assert fake.calls[SectionKind.RESEARCH] == 0
    assert fake.calls[SectionKind.WORKFLOW] == 0


@pytest.mark.asyncio
async def test_concurrent_requests_are_independent(make_client):
    client = make_client(FakeOpenAI())
    first = BlueprintOrchestrator(normalize_brief(valid_brief()), client)
    second = BlueprintOrchestrator(normalize_brief(valid_brief(includeResearch=False)), client)

    results = await asyncio.gather(first.run(), second.run())

    assert all(result.ok for result in results)
    assert results[0].blueprint.research is not None
    assert results[1].blueprint.research is None
