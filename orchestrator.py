"""Main orchestrator for the Blueprint Studio pipeline."""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from config import settings
from errors import GenerationError, SchemaError
from models import (
    SECTION_ORDER,
    Blueprint,
    Brief,
    PipelineResult,
    PipelineStatus,
    SectionKind,
)
from pipeline import (
    GenerationClient,
    compose_instruction,
    format_blueprint,
    normalize_brief,
    validate_section,
)

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


def section_plan(brief: Brief) -> List[SectionKind]:
    """Sections to generate for a brief, in order."""
    return [
        kind for kind in SECTION_ORDER
        if kind != SectionKind.RESEARCH or brief.include_research
    ]


class BlueprintOrchestrator:
    """Generates one blueprint, section by section, for a single request.

    Create a new instance per request. Sections are generated strictly in
    order because each prompt builds on the sections before it; the first
    failure ends the run.
    """

    def __init__(self, brief: Brief, client: GenerationClient):
        self.brief = brief
        self.client = client
        self.plan = section_plan(brief)
        self.sections: Dict[SectionKind, BaseModel] = {}
        self.current: Optional[SectionKind] = None
        self.result: Optional[PipelineResult] = None

    async def run(self) -> PipelineResult:
        """
        Run the pipeline to a terminal state.

        Returns:
            PipelineResult, complete with a Blueprint or failed with the
            section and error that stopped it
        """
        if self.result is not None:
            return self.result

        logger.info(f"Generating blueprint for: {self.brief.topic} ({len(self.plan)} sections)")

        try:
            for step, kind in enumerate(self.plan, 1):
                self.current = kind
                logger.info(f"Step {step}/{len(self.plan)}: generating {kind.value}...")
                section = await self._generate_section(kind)
                self.sections[kind] = section
        except (GenerationError, SchemaError) as e:
            logger.error(f"Pipeline failed at {self.current.value}: {e}")
            self.result = PipelineResult(
                status=PipelineStatus.FAILED,
                failed_section=self.current,
                error=e,
                sections_completed=list(self.sections),
            )
            self.sections = {}
            return self.result
        except asyncio.CancelledError:
            logger.warning(f"Pipeline cancelled during {self.current.value if self.current else 'startup'}")
            self.sections = {}
            raise

        blueprint = format_blueprint(self.sections)
        self.result = PipelineResult(
            status=PipelineStatus.COMPLETE,
            blueprint=blueprint,
            sections_completed=list(self.sections),
        )
        self.current = None
        logger.info("Blueprint complete!")
        return self.result

    async def _generate_section(self, kind: SectionKind) -> BaseModel:
        """Compose, generate and validate a single section."""
        instruction = compose_instruction(self.brief, kind, self.sections)
        raw = await self.client.generate(instruction, kind)
        return validate_section(kind, raw, self.sections)


async def create_blueprint(payload: Any, client: GenerationClient) -> Blueprint:
    """
    Normalize a raw request and generate its blueprint.

    Raises:
        ValidationError: brief is malformed (no generation calls are made)
        GenerationError: the service failed for a section
        SchemaError: a section could not be normalized
    """
    brief = normalize_brief(payload)
    result = await BlueprintOrchestrator(brief, client).run()
    if not result.ok:
        raise result.error
    return result.blueprint
