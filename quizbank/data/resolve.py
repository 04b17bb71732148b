"""Strict correct-answer resolution.

Only allow-listed keys are treated as a correct-answer signal. They are
looked up on the record itself, then on objects exactly one level below it.
An unrelated field mistaken for the answer is worse than reporting the
question as unresolved, so nothing else is scanned.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..config import CORRECT_KEYS
from .extract import extract_choices, same_choices
from .values import JsonKind, json_kind, normalize_for_match, number_to_text

logger = logging.getLogger(__name__)


def _index_from_number(value: int | float, n: int) -> Optional[int]:
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if 0 <= value < n:
        return value
    # 1-based
    if 0 <= value - 1 < n:
        return value - 1
    return None


def _index_from_letter(value: str, n: int) -> Optional[int]:
    letter = value.strip().upper()
    if len(letter) != 1 or not ("A" <= letter <= "Z"):
        return None
    idx = ord(letter) - ord("A")
    return idx if idx < n else None


def _index_from_text(value: str, choices: Sequence[str]) -> Optional[int]:
    target = normalize_for_match(value)
    if not target:
        return None
    for i, choice in enumerate(choices):
        if normalize_for_match(choice) == target:
            return i
    return None


def _unwrap_object(value: dict) -> str:
    """Representative string of an answer object: en, then text, then any string."""
    for k in ("en", "text"):
        if json_kind(value.get(k)) is JsonKind.STRING:
            return value[k]
    for v in value.values():
        if json_kind(v) is JsonKind.STRING:
            return v
    return ""


def resolve_value(value: Any, choices: Sequence[str]) -> Optional[int]:
    """Map one candidate answer value to an index into ``choices``."""
    n = len(choices)
    kind = json_kind(value)

    if kind is JsonKind.NUMBER:
        idx = _index_from_number(value, n)
        if idx is not None:
            return idx
        return _index_from_text(number_to_text(value), choices)
    if kind is JsonKind.STRING:
        idx = _index_from_letter(value, n)
        if idx is not None:
            return idx
        return _index_from_text(value, choices)
    if kind is JsonKind.OBJECT:
        return _index_from_text(_unwrap_object(value), choices)
    if kind is JsonKind.ARRAY and len(value) == 1 and json_kind(value[0]) is not JsonKind.ARRAY:
        return resolve_value(value[0], choices)
    return None


def _scan_keys(obj: dict, choices: Sequence[str], keys: Sequence[str]) -> Optional[int]:
    for k in keys:
        if k not in obj:
            continue
        idx = resolve_value(obj[k], choices)
        if idx is not None:
            return idx
    return None


def resolve_correct_index(
    record: Any,
    choices: Sequence[str],
    keys: Optional[Sequence[str]] = None,
) -> Optional[int]:
    """Index of the correct choice in ``choices``, or None when unresolved."""
    keys = CORRECT_KEYS if keys is None else keys
    if json_kind(record) is not JsonKind.OBJECT or not choices:
        return None

    idx = _scan_keys(record, choices, keys)
    if idx is not None:
        return idx

    for name, value in record.items():
        kind = json_kind(value)
        if kind is JsonKind.OBJECT:
            idx = _scan_keys(value, choices, keys)
        elif kind is JsonKind.ARRAY:
            if same_choices(extract_choices(value), choices):
                continue
            idx = None
            for item in value:
                if json_kind(item) is JsonKind.OBJECT:
                    idx = _scan_keys(item, choices, keys)
                    if idx is not None:
                        break
        else:
            continue
        if idx is not None:
            logger.debug("Correct answer found under nested field %r", name)
            return idx
    return None
