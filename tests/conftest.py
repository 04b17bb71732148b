from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quizbank.utils.logging import reset_logging  # noqa: E402


# ====================
# Question-bank fixtures
# ====================

@pytest.fixture
def fruit_choices() -> List[str]:
    return ["Apple", "Banana", "Cherry"]


@pytest.fixture
def bilingual_record() -> Dict[str, Any]:
    """A record in the current authoring format (bilingual objects everywhere)."""
    return {
        "id": "A1-001",
        "level": "A1",
        "category": {"en": "Food", "ja": "食べ物"},
        "question": {"en": "Which one is yellow?", "ja": "どれが黄色いですか？"},
        "hints": [{"en": "Monkeys like it.", "ja": "サルが好きです。"}],
        "choices": [
            {"en": "Apple", "ja": "りんご"},
            {"en": "Banana", "ja": "バナナ"},
            {"en": "Cherry", "ja": "さくらんぼ"},
        ],
        "correctAnswer": {"en": "Banana", "ja": "バナナ"},
        "explanation": {"en": "Bananas are yellow.", "ja": "バナナは黄色です。"},
    }


@pytest.fixture
def mixed_document() -> List[Any]:
    """A level document mixing several historical record shapes and junk."""
    return [
        {"prompt": "Which animal barks?", "options": ["Cat", "Dog", "Fish"], "correctIndex": 1},
        {"text": "Which animal meows?", "answers": ["cat", "dog"], "correctLetter": "a"},
        {"stem": "The sky is...", "choices": ["blue", "green", "red"], "answer": "Blue"},
        {"question": "Broken record", "choices": ["only one"]},
        "not a record",
        None,
        5,
        {"group": {"question": "Nested?", "choices": ["yes", "no"], "answer_idx": 2}},
    ]


def make_record(i: int, correct: int, n_choices: int = 4) -> Dict[str, Any]:
    choices = [f"Option {i}-{j}" for j in range(n_choices)]
    return {"id": f"q{i}", "question": f"Question {i}?", "choices": choices, "correctIndex": correct}


@pytest.fixture
def write_bank(tmp_path):
    """Write a JSON document to a file under tmp_path and return its path."""
    def _write(name: str, document: Any) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
        return path
    return _write


@pytest.fixture(autouse=True)
def _isolated_logging():
    yield
    reset_logging()
