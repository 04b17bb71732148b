"""JSON value kinds for loosely-structured question banks."""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any


class JsonKind(Enum):
    """The closed set of shapes a parsed JSON value can take."""
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


_WS_RE = re.compile(r"\s+")


def json_kind(value: Any) -> JsonKind:
    """Classify a value produced by ``json.load``.

    ``bool`` is checked before ``int`` since it subclasses it. Anything that
    is not a JSON value (tuples, sets, custom objects) counts as NULL.
    """
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    return JsonKind.NULL


def number_to_text(value: int | float) -> str:
    """Render a JSON number the way it reads in the source document."""
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def normalize_for_match(text: Any) -> str:
    """Lowercase, collapse runs of whitespace and trim."""
    if text is None:
        return ""
    return _WS_RE.sub(" ", str(text).lower()).strip()
