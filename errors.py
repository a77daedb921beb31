"""Error taxonomy for the blueprint pipeline.

Every error here is terminal for a request: the boundary turns it into a
single failure message and never returns a partial blueprint.
"""
from typing import Optional


class PipelineError(Exception):
    """Base class for pipeline failures."""


class ValidationError(PipelineError):
    """The incoming brief is malformed."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class GenerationError(PipelineError):
    """The generative service failed for a section after all retries."""

    def __init__(self, section: str, cause: Optional[BaseException] = None):
        self.section = section
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Generation failed for {section}{detail}")


class SchemaError(PipelineError):
    """Generated content could not be normalized into the section shape."""

    def __init__(self, section: str, field: str, reason: str):
        self.section = section
        self.field = field
        self.reason = reason
        super().__init__(f"Malformed {section} output at {field}: {reason}")
