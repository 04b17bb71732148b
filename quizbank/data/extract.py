"""Text and choice-list extraction from arbitrarily nested JSON values.

Question banks mix flat strings, bilingual ``{"en": ..., "ja": ...}`` objects
and wrapper objects such as ``{"label": {"en": ...}}``. The helpers here pick
the first plausible display string, preferring English.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence

from ..config import TEXT_PRIORITY_KEYS
from .values import JsonKind, json_kind, normalize_for_match, number_to_text

DEFAULT_MAX_DEPTH = 7


def extract_text(
    node: Any,
    max_depth: int = DEFAULT_MAX_DEPTH,
    priority_keys: Optional[Sequence[str]] = None,
    _depth: int = 0,
) -> str:
    """Return the first non-empty human-readable string found in ``node``.

    Objects are searched through ``priority_keys`` first, then through all of
    their values in insertion order. Containers nested deeper than
    ``max_depth`` yield ``""``; that bound is what guarantees termination.
    """
    keys = TEXT_PRIORITY_KEYS if priority_keys is None else priority_keys
    kind = json_kind(node)

    if kind is JsonKind.STRING:
        return node.strip()
    if kind is JsonKind.NUMBER:
        return number_to_text(node)
    if kind in (JsonKind.NULL, JsonKind.BOOLEAN):
        return ""
    if _depth > max_depth:
        return ""

    if kind is JsonKind.ARRAY:
        for item in node:
            s = extract_text(item, max_depth, keys, _depth + 1)
            if s:
                return s
        return ""

    # JsonKind.OBJECT
    for k in keys:
        if k in node:
            s = extract_text(node[k], max_depth, keys, _depth + 1)
            if s:
                return s
    for value in node.values():
        s = extract_text(value, max_depth, keys, _depth + 1)
        if s:
            return s
    return ""


def first_text(
    record: dict,
    keys: Iterable[str],
    max_depth: int = DEFAULT_MAX_DEPTH,
    priority_keys: Optional[Sequence[str]] = None,
) -> str:
    """First non-empty ``extract_text`` over the listed keys present in ``record``."""
    for k in keys:
        if k in record:
            s = extract_text(record[k], max_depth, priority_keys)
            if s:
                return s
    return ""


def extract_choices(
    node: Any,
    max_depth: int = DEFAULT_MAX_DEPTH,
    priority_keys: Optional[Sequence[str]] = None,
) -> List[str]:
    """Turn an array of choice values into distinct display strings.

    Duplicates are detected case- and whitespace-insensitively; the first
    occurrence keeps its original casing. Non-arrays yield ``[]``.
    """
    if json_kind(node) is not JsonKind.ARRAY:
        return []

    out: List[str] = []
    seen = set()
    for item in node:
        s = extract_text(item, max_depth, priority_keys)
        if not s:
            continue
        key = normalize_for_match(s)
        if key in seen:
            continue
        seen.add(key)
        out.append(s)
    return out


def same_choices(a: Sequence[str], b: Sequence[str]) -> bool:
    """True when both lists match position by position after normalization."""
    if len(a) != len(b):
        return False
    return all(normalize_for_match(x) == normalize_for_match(y) for x, y in zip(a, b))


def localize(
    node: Any,
    lang: str = "en",
    max_depth: int = DEFAULT_MAX_DEPTH,
    fallback: bool = True,
) -> str:
    """Pick the ``lang`` side of a bilingual object.

    Without a usable ``lang`` side the English text is returned, or ``""``
    when ``fallback`` is False.
    """
    if json_kind(node) is JsonKind.OBJECT and lang in node:
        s = extract_text(node[lang], max_depth)
        if s:
            return s
    return extract_text(node, max_depth) if fallback else ""
