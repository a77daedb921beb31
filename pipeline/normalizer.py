"""Request Normalizer - Validates and canonicalizes incoming briefs."""
import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from config import settings
from errors import ValidationError
from models import Brief, dedupe_casefold

logger = logging.getLogger(__name__)

# Minimum trimmed length is exclusive: a value must be longer than this.
REQUIRED_FIELDS: Dict[str, int] = {
    "topic": 3,
    "targetAudience": 3,
    "contentGoal": 3,
    "tone": 3,
    "duration": 2,
}

LIST_DELIMITERS = re.compile(r"[,;\n]")

_TRUE_STRINGS = {"true", "1", "yes", "y", "on"}
_FALSE_STRINGS = {"false", "0", "no", "n", "off", ""}


def _lookup(payload: Mapping[str, Any], field: str) -> Any:
    """Read a camelCase field, falling back to its snake_case spelling."""
    if field in payload:
        return payload[field]
    snake = re.sub(r"(?<!^)(?=[A-Z])", "_", field).lower()
    return payload.get(snake)


def _required_text(payload: Mapping[str, Any], field: str, min_length: int) -> str:
    value = _lookup(payload, field)
    if value is None:
        raise ValidationError(field, "is required")
    if not isinstance(value, str):
        raise ValidationError(field, "must be a string")
    value = value.strip()
    if len(value) <= min_length:
        raise ValidationError(field, f"must be longer than {min_length} characters")
    return value


def _optional_text(payload: Mapping[str, Any], field: str) -> Optional[str]:
    value = _lookup(payload, field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(field, "must be a string")
    return value.strip() or None


def _flag(payload: Mapping[str, Any], field: str, default: bool) -> bool:
    value = _lookup(payload, field)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS | _FALSE_STRINGS:
        return value.strip().lower() in _TRUE_STRINGS
    raise ValidationError(field, "must be a boolean")


def split_list(value: Any, field: str = "list") -> List[str]:
    """Turn a sequence or delimiter-separated string into trimmed, non-empty entries."""
    if value is None:
        return []
    if isinstance(value, str):
        items = LIST_DELIMITERS.split(value)
    elif isinstance(value, (list, tuple)):
        items = []
        for item in value:
            if not isinstance(item, str):
                raise ValidationError(field, "must contain only strings")
            items.append(item)
    else:
        raise ValidationError(field, "must be a list of strings")
    return [item.strip() for item in items if item.strip()]


def normalize_keywords(value: Any) -> List[str]:
    """Lower-case, trim and dedupe keywords. Idempotent."""
    return dedupe_casefold([item.lower() for item in split_list(value, "keywords")])


def normalize_competitors(value: Any) -> List[str]:
    """Lower-case, trim and dedupe competitor names. Idempotent."""
    return dedupe_casefold([item.lower() for item in split_list(value, "competitors")])


def normalize_brief(payload: Any) -> Brief:
    """
    Validate a raw request payload and build a Brief.

    Args:
        payload: Deserialized request body (camelCase or snake_case keys)

    Returns:
        Brief object

    Raises:
        ValidationError: naming the first offending field
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("payload", "must be a JSON object")

    fields = {
        field: _required_text(payload, field, min_length)
        for field, min_length in REQUIRED_FIELDS.items()
    }

    brief = Brief(
        topic=fields["topic"],
        target_audience=fields["targetAudience"],
        content_goal=fields["contentGoal"],
        tone=fields["tone"],
        duration=fields["duration"],
        platform_focus=_optional_text(payload, "platformFocus") or settings.default_platform,
        call_to_action=_optional_text(payload, "callToAction"),
        include_research=_flag(payload, "includeResearch", default=True),
        keywords=normalize_keywords(_lookup(payload, "keywords")),
        competitors=normalize_competitors(_lookup(payload, "competitors")),
    )
    logger.debug(f"Normalized brief for topic: {brief.topic}")
    return brief
