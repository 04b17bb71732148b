"""Record normalization and question collection over whole documents."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from ..config import NormalizerConfig
from ..security import make_question_id
from .extract import extract_choices, extract_text, first_text, localize
from .resolve import resolve_correct_index
from .schemas import Question
from .values import JsonKind, json_kind

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = NormalizerConfig()

# A question needs at least two distinct choices whatever the config says
MIN_USABLE_CHOICES = 2


def _min_choices(cfg: NormalizerConfig) -> int:
    return max(MIN_USABLE_CHOICES, cfg.min_choices)


def _find_choices(record: dict, cfg: NormalizerConfig) -> List[str]:
    choices: List[str] = []
    for k in cfg.choices_keys:
        if k in record:
            choices = extract_choices(record[k], cfg.max_depth, cfg.text_priority_keys)
            break
    if len(choices) >= _min_choices(cfg):
        return choices

    # Fall back to the first array field that looks like a choice list
    for value in record.values():
        if json_kind(value) is not JsonKind.ARRAY:
            continue
        candidate = extract_choices(value, cfg.max_depth, cfg.text_priority_keys)
        if len(candidate) >= _min_choices(cfg):
            return candidate
    return choices


def _as_lines(value: Any) -> list:
    return value if json_kind(value) is JsonKind.ARRAY else [value]


def _first_ja(record: dict, keys: List[str], depth: int) -> str:
    for k in keys:
        if k in record:
            s = localize(record[k], "ja", depth, fallback=False)
            if s:
                return s
    return ""


def _hint_pairs(record: dict, cfg: NormalizerConfig) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    """All hint lines as aligned (English, Japanese) tuples.

    Lines come from the first hint key with any text. Japanese sides are read
    from bilingual line objects, or from a parallel ``hint_ja``-style array
    when the record has one.
    """
    depth, prio = cfg.max_depth, cfg.text_priority_keys
    en: List[str] = []
    ja: List[str] = []
    for k in cfg.hint_keys:
        if k not in record:
            continue
        items = _as_lines(record[k])
        en = [extract_text(item, depth, prio) for item in items]
        ja = [localize(item, "ja", depth, fallback=False) for item in items]
        if any(en) or any(ja):
            break
        en, ja = [], []

    for k in cfg.hint_ja_keys:
        if k in record:
            parallel = [extract_text(item, depth, prio) for item in _as_lines(record[k])]
            if any(parallel):
                ja = parallel
                break

    n = max(len(en), len(ja))
    pairs = [
        (en[i] if i < len(en) else "", ja[i] if i < len(ja) else "")
        for i in range(n)
    ]
    pairs = [(e, j) for e, j in pairs if e or j]
    return tuple(e for e, _ in pairs), tuple(j for _, j in pairs)


def normalize_record(
    record: Any,
    config: Optional[NormalizerConfig] = None,
    id_salt: str = "",
) -> Optional[Question]:
    """Build a Question from one raw record, or None when nothing is usable.

    An unresolved correct answer is not a failure: the question is returned
    with ``correct_index=None``.
    """
    if json_kind(record) is not JsonKind.OBJECT:
        return None
    cfg = config or _DEFAULT_CONFIG
    depth, prio = cfg.max_depth, cfg.text_priority_keys

    question_text = first_text(record, cfg.question_keys, depth, prio)
    if not question_text:
        question_text = extract_text(record, depth, prio)

    choices = _find_choices(record, cfg)
    if not question_text and not choices:
        return None

    qid = first_text(record, cfg.id_keys, depth, prio)
    if not qid:
        qid = make_question_id(question_text, choices, salt=id_salt or None)

    hints, hints_ja = _hint_pairs(record, cfg)
    return Question(
        question_text=question_text,
        choices=tuple(choices),
        hint=first_text(record, cfg.hint_keys, depth, prio),
        correct_index=resolve_correct_index(record, choices, cfg.correct_keys),
        id=qid,
        category=first_text(record, cfg.category_keys, depth, prio),
        explanation=first_text(record, cfg.explanation_keys, depth, prio),
        translation=first_text(record, cfg.translation_keys, depth, prio),
        hints=hints,
        question_ja=_first_ja(record, cfg.question_keys, depth),
        hints_ja=hints_ja,
        explanation_ja=_first_ja(record, cfg.explanation_keys, depth),
    )


def collect_questions(
    document: Any,
    config: Optional[NormalizerConfig] = None,
    id_salt: str = "",
) -> List[Question]:
    """Walk a parsed document and return every usable question, in order.

    Each object is normalized and kept when it has enough choices; its values
    are searched for further questions either way, so records wrapped in
    grouping objects at any depth are found. A question nested inside another
    question's fields is reported as well.
    """
    cfg = config or _DEFAULT_CONFIG
    out: List[Question] = []
    _walk(document, cfg, id_salt, out, 0)
    return out


def _walk(node: Any, cfg: NormalizerConfig, id_salt: str, out: List[Question], depth: int) -> None:
    kind = json_kind(node)
    if kind not in (JsonKind.ARRAY, JsonKind.OBJECT):
        return
    if depth > cfg.max_walk_depth:
        logger.debug("Skipping node nested deeper than %d levels", cfg.max_walk_depth)
        return

    if kind is JsonKind.ARRAY:
        for item in node:
            _walk(item, cfg, id_salt, out, depth + 1)
        return

    question = normalize_record(node, cfg, id_salt)
    if question is not None and len(question.choices) >= _min_choices(cfg):
        out.append(question)
    for value in node.values():
        _walk(value, cfg, id_salt, out, depth + 1)
