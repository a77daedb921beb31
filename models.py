"""Data models for Blueprint Studio."""
from pydantic import BaseModel, ConfigDict, Field, BeforeValidator, AfterValidator, StringConstraints
from pydantic.alias_generators import to_camel
from typing import Annotated, List, Optional, Any
from enum import Enum


def ensure_list(value: Any) -> Any:
    """Wrap a lone value in a list; leave lists (and None) untouched."""
    if value is None or isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return [value]


def _clean_strings(value: Any) -> Any:
    value = ensure_list(value)
    if not isinstance(value, list):
        return value
    cleaned = []
    for item in value:
        if isinstance(item, str):
            item = item.strip()
            if not item:
                continue
        cleaned.append(item)
    return cleaned


def dedupe_casefold(values: List[str]) -> List[str]:
    """Drop case-insensitive duplicates, keeping the first spelling seen."""
    seen = set()
    result = []
    for value in values:
        key = value.casefold()
        if key not in seen:
            seen.add(key)
            result.append(value)
    return result


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("must be a number, not a boolean")
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
TextList = Annotated[List[Text], BeforeValidator(_clean_strings)]
KeywordSet = Annotated[List[Text], BeforeValidator(_clean_strings), AfterValidator(dedupe_casefold)]
OptionalText = Annotated[Optional[Text], BeforeValidator(_blank_to_none)]
Number = Annotated[float, BeforeValidator(_reject_bool)]
WholeNumber = Annotated[int, BeforeValidator(_reject_bool)]


class SectionKind(str, Enum):
    """Blueprint sections, in generation order."""
    CORE_CONCEPT = "coreConcept"
    SCRIPT = "script"
    VISUAL_PLAN = "visualPlan"
    AUDIO_PLAN = "audioPlan"
    RESEARCH = "research"
    WORKFLOW = "workflow"


SECTION_ORDER = [
    SectionKind.CORE_CONCEPT,
    SectionKind.SCRIPT,
    SectionKind.VISUAL_PLAN,
    SectionKind.AUDIO_PLAN,
    SectionKind.RESEARCH,
    SectionKind.WORKFLOW,
]


class BlueprintModel(BaseModel):
    """Immutable model serialized with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Brief(BlueprintModel):
    """Normalized creative brief. Build it through ``normalize_brief``."""
    topic: str
    target_audience: str
    content_goal: str
    tone: str
    duration: str
    platform_focus: str
    call_to_action: Optional[str] = None
    include_research: bool = True
    keywords: List[str] = Field(default_factory=list)
    competitors: List[str] = Field(default_factory=list)


# Core concept

class ViralIdea(BlueprintModel):
    """Headline idea with its hook."""
    title: Text
    hook: Text
    virality_triggers: TextList


class NarrativePillar(BlueprintModel):
    """Recurring theme the video is built on."""
    pillar: Text
    description: Text
    performance_hook: Text


class CoreConcept(BlueprintModel):
    """Big idea and positioning for the channel."""
    viral_idea: ViralIdea
    channel_mission: Text
    signature_angle: Text
    narrative_pillars: Annotated[List[NarrativePillar], BeforeValidator(ensure_list)] = Field(min_length=1)
    recommended_keywords: KeywordSet


# Script

class ScriptSegment(BlueprintModel):
    """One beat of the script outline."""
    segment: Text
    objective: Text
    retention_device: Text
    narration_beats: TextList
    visual_notes: TextList


class Script(BlueprintModel):
    """Retention-first script; outline order is narrative order."""
    length_estimate_seconds: WholeNumber = Field(gt=0)
    cta: Text
    outline: Annotated[List[ScriptSegment], BeforeValidator(ensure_list)] = Field(min_length=1)

    @property
    def segment_names(self) -> List[str]:
        return [segment.segment for segment in self.outline]


# Visual plan

class ThumbnailConcept(BlueprintModel):
    """Thumbnail idea with an image generation prompt."""
    headline: Text
    description: Text
    color_palette: TextList
    ai_prompt: Text


class SceneDesign(BlueprintModel):
    """Visual treatment for one script segment."""
    segment: Text  # matches a Script outline segment name
    primary_visuals: TextList
    motion_ideas: TextList
    stock_prompts: TextList


class VisualPlan(BlueprintModel):
    """Thumbnails and scene-by-scene visuals."""
    thumbnail_concepts: Annotated[List[ThumbnailConcept], BeforeValidator(ensure_list)] = Field(min_length=1)
    scene_design: Annotated[List[SceneDesign], BeforeValidator(ensure_list)] = Field(min_length=1)


# Audio plan

class AudioMoment(BlueprintModel):
    """Music and SFX cue at a point in the video."""
    moment: Text
    music_mood: Text
    sfx_ideas: TextList


class AudioPlan(BlueprintModel):
    """Voice, pacing and sound design."""
    voice_profile: Text
    pacing_guidance: Text
    audio_moments: Annotated[List[AudioMoment], BeforeValidator(ensure_list)] = Field(min_length=1)
    ai_voice_prompt: Text


# Research

class KeyInsight(BlueprintModel):
    """Research finding with its evidence."""
    insight: Text
    evidence: Text
    source: Text


class CompetitorLesson(BlueprintModel):
    """Takeaway from a competing channel."""
    channel: Text
    lesson: Text
    reference: OptionalText = None


class Research(BlueprintModel):
    """Competitive research and SEO keywords."""
    summary: Text
    key_insights: Annotated[List[KeyInsight], BeforeValidator(ensure_list)] = Field(min_length=1)
    competitor_breakdown: Annotated[List[CompetitorLesson], BeforeValidator(ensure_list)]
    seo_keywords: KeywordSet


# Workflow

class AutomationStep(BlueprintModel):
    """AI tool step with a ready-to-use prompt."""
    tool: Text
    purpose: Text
    prompt: Text


class ExecutionTimeline(BlueprintModel):
    """Hours per production phase."""
    pre_production: Number = Field(ge=0, allow_inf_nan=False)
    production: Number = Field(ge=0, allow_inf_nan=False)
    post_production: Number = Field(ge=0, allow_inf_nan=False)


class Workflow(BlueprintModel):
    """Automation steps and execution timeline."""
    automations: Annotated[List[AutomationStep], BeforeValidator(ensure_list)] = Field(min_length=1)
    execution_timeline_hours: ExecutionTimeline


class Blueprint(BlueprintModel):
    """Complete production blueprint."""
    core_concept: CoreConcept
    script: Script
    visual_plan: VisualPlan
    audio_plan: AudioPlan
    research: Optional[Research] = None
    workflow: Workflow


class PipelineStatus(str, Enum):
    """Terminal states of a pipeline run."""
    COMPLETE = "complete"
    FAILED = "failed"


class PipelineResult(BaseModel):
    """Outcome of one orchestrator run."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: PipelineStatus
    blueprint: Optional[Blueprint] = None
    failed_section: Optional[SectionKind] = None
    error: Optional[Exception] = None
    sections_completed: List[SectionKind] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == PipelineStatus.COMPLETE


class BlueprintResponse(BaseModel):
    """Response envelope returned across the HTTP boundary."""
    success: bool
    data: Optional[dict] = None
    error: Optional[str] = None
