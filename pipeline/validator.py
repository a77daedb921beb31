"""Schema Validator - Turns raw section output into typed sections."""
import json
import logging
import re
from typing import Any, Dict, Mapping, Type

import pydantic
from pydantic import BaseModel

from errors import SchemaError
from models import (
    AudioPlan,
    CoreConcept,
    Research,
    Script,
    SectionKind,
    VisualPlan,
    Workflow,
)

logger = logging.getLogger(__name__)

SECTION_MODELS: Dict[SectionKind, Type[BaseModel]] = {
    SectionKind.CORE_CONCEPT: CoreConcept,
    SectionKind.SCRIPT: Script,
    SectionKind.VISUAL_PLAN: VisualPlan,
    SectionKind.AUDIO_PLAN: AudioPlan,
    SectionKind.RESEARCH: Research,
    SectionKind.WORKFLOW: Workflow,
}

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def _key(value: str) -> str:
    return " ".join(value.split()).casefold()


def parse_payload(section: SectionKind, raw: Any) -> Dict[str, Any]:
    """Decode raw output into a JSON object for one section."""
    data = raw
    if isinstance(raw, (str, bytes)):
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        text = text.strip()
        fenced = _CODE_FENCE.match(text)
        if fenced:
            text = fenced.group(1)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaError(section.value, "$", f"not valid JSON ({e.msg})") from e

    if not isinstance(data, dict):
        raise SchemaError(section.value, "$", "expected a JSON object")

    # Some models wrap the section in a key named after it.
    if len(data) == 1:
        (only_key, only_value), = data.items()
        if isinstance(only_value, dict) and _key(only_key) in {
            _key(section.value),
            _key(section.name),
        }:
            data = only_value
    return data


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "$"


def _check_script(script: Script) -> Script:
    seen = set()
    for index, name in enumerate(script.segment_names):
        if _key(name) in seen:
            raise SchemaError(SectionKind.SCRIPT.value, f"outline.{index}.segment", f"duplicate segment name '{name}'")
        seen.add(_key(name))
    return script


def _link_scenes(visual: VisualPlan, sections: Mapping[SectionKind, Any]) -> VisualPlan:
    """Match scene designs to script segments, adopting the script's spelling."""
    script = sections.get(SectionKind.SCRIPT)
    if not isinstance(script, Script):
        raise SchemaError(SectionKind.VISUAL_PLAN.value, "sceneDesign", "no script available to reference")

    names = {_key(name): name for name in script.segment_names}
    scenes = []
    for index, scene in enumerate(visual.scene_design):
        canonical = names.get(_key(scene.segment))
        if canonical is None:
            raise SchemaError(
                SectionKind.VISUAL_PLAN.value,
                f"sceneDesign.{index}.segment",
                f"'{scene.segment}' is not a script segment",
            )
        if canonical != scene.segment:
            scene = scene.model_copy(update={"segment": canonical})
        scenes.append(scene)
    return visual.model_copy(update={"scene_design": scenes})


def validate_section(
    section: SectionKind,
    raw: Any,
    sections: Mapping[SectionKind, Any],
) -> BaseModel:
    """
    Validate raw output for one section.

    Args:
        section: Section kind the output belongs to
        raw: Raw text (or already-decoded JSON) from the generation client
        sections: Sections validated so far, for cross-section checks

    Returns:
        Typed section model

    Raises:
        SchemaError: when the output cannot be normalized into the section shape
    """
    data = parse_payload(section, raw)
    model = SECTION_MODELS[section]

    try:
        result = model.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = _field_path(first["loc"])
        logger.warning(f"{section.value} output rejected at {field}: {first['msg']}")
        raise SchemaError(section.value, field, first["msg"]) from e

    if isinstance(result, Script):
        result = _check_script(result)
    elif isinstance(result, VisualPlan):
        result = _link_scenes(result, sections)
    return result
