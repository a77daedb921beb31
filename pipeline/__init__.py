"""Blueprint Studio pipeline components."""
from .normalizer import normalize_brief
from .prompts import compose_instruction
from .generation_client import GenerationClient
from .validator import validate_section
from .formatter import format_blueprint, format_success, format_failure

__all__ = [
    "normalize_brief",
    "compose_instruction",
    "GenerationClient",
    "validate_section",
    "format_blueprint",
    "format_success",
    "format_failure",
]
