"""Result Formatter - Assembles sections into the final blueprint."""
from typing import Any, Dict, Mapping

from models import Blueprint, BlueprintResponse, SectionKind

DEFAULT_ERROR_MESSAGE = "Unexpected error generating automation."


def format_blueprint(sections: Mapping[SectionKind, Any]) -> Blueprint:
    """Build a Blueprint from validated sections keyed by kind."""
    return Blueprint(
        core_concept=sections[SectionKind.CORE_CONCEPT],
        script=sections[SectionKind.SCRIPT],
        visual_plan=sections[SectionKind.VISUAL_PLAN],
        audio_plan=sections[SectionKind.AUDIO_PLAN],
        research=sections.get(SectionKind.RESEARCH),
        workflow=sections[SectionKind.WORKFLOW],
    )


def blueprint_payload(blueprint: Blueprint) -> Dict[str, Any]:
    """Serialize a blueprint with camelCase keys, omitting absent optionals."""
    return blueprint.model_dump(mode="json", by_alias=True, exclude_none=True)


def format_success(blueprint: Blueprint) -> BlueprintResponse:
    return BlueprintResponse(success=True, data=blueprint_payload(blueprint))


def format_failure(message: str = DEFAULT_ERROR_MESSAGE) -> BlueprintResponse:
    return BlueprintResponse(success=False, error=message or DEFAULT_ERROR_MESSAGE)
