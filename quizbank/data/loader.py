"""Loading question banks and turning them into question pools."""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import DataConfig, NormalizerConfig
from ..security import level_salt
from ..utils.io import read_json, read_jsonl, shuffle_list
from .normalizer import collect_questions
from .schemas import Question, QuestionPool

logger = logging.getLogger(__name__)


def _stable_int(s: str) -> int:
    """Convert string to stable integer using hash."""
    return int(hashlib.sha256(s.encode("utf-8")).hexdigest()[:8], 16)


def shuffle_choices(question: Question, seed: Optional[int] = None) -> Question:
    """Return a copy of ``question`` with its choices permuted.

    The correct index is recomputed from the permutation, never carried over.
    """
    order = shuffle_list(list(range(len(question.choices))), seed=seed)
    choices = tuple(question.choices[i] for i in order)
    correct_index = None
    if question.correct_index is not None:
        correct_index = order.index(question.correct_index)
    return question._replace(choices=choices, correct_index=correct_index)


def load_document(path: Union[str, Path]) -> Any:
    """Read a question-bank document from a ``.json`` or ``.jsonl`` file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the path is not a file, has an unsupported suffix,
            or does not contain valid JSON
    """
    filepath = Path(path).resolve()
    if not filepath.exists():
        raise FileNotFoundError(f"Question bank not found: {filepath}")
    if not filepath.is_file():
        raise ValueError(f"Path is not a file: {filepath}")
    if filepath.suffix not in {".jsonl", ".json"}:
        raise ValueError(f"Expected .jsonl or .json file, got: {filepath.suffix}")

    try:
        if filepath.suffix == ".jsonl":
            return list(read_jsonl(filepath))
        return read_json(filepath)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {filepath}: {e}") from e
    except UnicodeDecodeError as e:
        raise ValueError(f"Question bank is not UTF-8 text: {filepath}") from e


def build_pool(
    document: Any,
    level: str = "",
    source: str = "",
    config: Optional[NormalizerConfig] = None,
    id_salt: str = "",
    shuffle_seed: Optional[int] = None,
) -> QuestionPool:
    """Collect the questions of an already parsed document into a pool."""
    questions: List[Question] = collect_questions(document, config, id_salt=id_salt)
    if shuffle_seed is not None:
        questions = [
            shuffle_choices(q, seed=shuffle_seed + (_stable_int(q.id) % 100000))
            for q in questions
        ]
    pool = QuestionPool(questions=tuple(questions), level=level, source=source)
    logger.debug(
        "Built pool %s: %d questions, %d unresolved",
        pool.name, len(pool), len(pool.unresolved()),
    )
    return pool


def load_pool(
    path: Union[str, Path],
    level: str = "",
    config: Optional[NormalizerConfig] = None,
    id_salt: str = "",
    shuffle_seed: Optional[int] = None,
) -> QuestionPool:
    """Load one question-bank file and return its QuestionPool.

    Args:
        path: Path to a .json or .jsonl question bank
        level: Level label recorded on the pool (e.g. "A1")
        config: Normalizer key lists and depth bounds
        id_salt: Salt for ids derived for records that carry none
        shuffle_seed: Optional seed for shuffling choices per question

    Returns:
        QuestionPool in document order
    """
    document = load_document(path)
    return build_pool(
        document,
        level=level,
        source=str(path),
        config=config,
        id_salt=id_salt,
        shuffle_seed=shuffle_seed,
    )


def level_path(data_dir: Union[str, Path], level: str, pattern: str = "quizData_{level}.json") -> Path:
    return Path(data_dir) / pattern.format(level=level)


class LevelLibrary:
    """Per-level pool cache over a directory of question banks.

    Each level's file is read at most once; later calls return the cached pool.
    """

    def __init__(
        self,
        data: Optional[DataConfig] = None,
        normalizer: Optional[NormalizerConfig] = None,
    ):
        self.data = data or DataConfig()
        self.normalizer = normalizer or NormalizerConfig()
        self._cache: Dict[str, QuestionPool] = {}

    def path_for(self, level: str) -> Path:
        return level_path(self.data.data_dir, level, self.data.file_pattern)

    def levels(self) -> List[str]:
        """Configured levels whose file exists on disk."""
        return [lvl for lvl in self.data.levels if self.path_for(lvl).is_file()]

    def get(self, level: str) -> QuestionPool:
        if level not in self._cache:
            salt = level_salt(self.data.id_salt, level)
            self._cache[level] = load_pool(
                self.path_for(level),
                level=level,
                config=self.normalizer,
                id_salt=salt,
            )
            logger.info("Loaded level %s: %d questions", level, len(self._cache[level]))
        return self._cache[level]

    def __contains__(self, level: str) -> bool:
        return level in self._cache
