"""
Parsing for the `tags` column of things-to-do records.

The connector stores tags as a JSON array of strings serialized as text,
e.g. '["Hiking", "Camping"]'. Parsing here is total: every input maps to a
list of tags, and anything that is not a JSON array of strings maps to an
empty list and is reported as malformed so callers can record a warning.
"""

from __future__ import annotations

import json
import math
from typing import Any, NamedTuple

EMPTY_TAGS = "[]"


class TagParseResult(NamedTuple):
    """Parsed tags plus whether the raw value was malformed."""

    tags: list[str]
    malformed: bool


def _is_missing(raw: Any) -> bool:
    if raw is None:
        return True
    return isinstance(raw, float) and math.isnan(raw)


def parse_tags(raw: Any) -> TagParseResult:
    """
    Parse a raw tags value into a list of tag strings.

    Args:
        raw: Value from the tags column (str, None or NaN)

    Returns:
        TagParseResult: tags in source order, and malformed=True when the value
        was present but not a JSON array of strings

    Example:
        >>> parse_tags('["Hiking","Camping"]')
        TagParseResult(tags=['Hiking', 'Camping'], malformed=False)
        >>> parse_tags("not json")
        TagParseResult(tags=[], malformed=True)
    """
    if _is_missing(raw):
        return TagParseResult([], False)

    if not isinstance(raw, str):
        return TagParseResult([], True)

    if raw == EMPTY_TAGS:
        return TagParseResult([], False)

    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, RecursionError):
        return TagParseResult([], True)

    if not isinstance(parsed, list):
        return TagParseResult([], True)

    if not all(isinstance(tag, str) for tag in parsed):
        return TagParseResult([], True)

    return TagParseResult(parsed, False)
