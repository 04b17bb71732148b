"""Stable identifiers for questions that ship without one.

Ids are derived from the question text and its choices, compared the same
way the normalizer compares text: case-insensitive, whitespace collapsed.
Choice order is ignored so a shuffled copy keeps its id.
"""

from __future__ import annotations

import hashlib
from typing import Sequence

from .data.values import normalize_for_match

ID_DIGEST_SIZE = 16


def question_fingerprint(question_text: str, choices: Sequence[str]) -> str:
    """Canonical text two equivalent questions share."""
    parts = sorted(normalize_for_match(c) for c in choices)
    return "|".join([normalize_for_match(question_text), *parts])


def level_salt(id_salt: str, level: str) -> str:
    """Salt that keeps derived ids of the same question distinct across levels."""
    if id_salt and level:
        return f"{id_salt}:{level}"
    return id_salt or level


def make_question_id(
    question_text: str,
    choices: Sequence[str],
    salt: str | None = None
) -> str:
    """Derive a question id with BLAKE2b.

    Args:
        question_text: Display text of the question
        choices: Distinct choice strings, in any order
        salt: Optional prefix, see ``level_salt``

    Returns:
        32-character hex digest
    """
    fingerprint = question_fingerprint(question_text, choices)
    if salt:
        fingerprint = f"{salt}:{fingerprint}"
    return hashlib.blake2b(fingerprint.encode("utf-8"), digest_size=ID_DIGEST_SIZE).hexdigest()
