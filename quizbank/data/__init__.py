"""Question-bank normalization for quizbank."""

from .extract import extract_choices, extract_text, localize
from .loader import LevelLibrary, build_pool, load_document, load_pool, shuffle_choices
from .normalizer import collect_questions, normalize_record
from .resolve import resolve_correct_index
from .schemas import Question, QuestionPool
from .values import JsonKind, json_kind

__all__ = [
    "JsonKind",
    "json_kind",
    "Question",
    "QuestionPool",
    "extract_text",
    "extract_choices",
    "localize",
    "resolve_correct_index",
    "normalize_record",
    "collect_questions",
    "load_document",
    "load_pool",
    "build_pool",
    "shuffle_choices",
    "LevelLibrary",
]
