from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List


QUESTION_KEYS = ["question", "text", "prompt", "stem", "title", "sentence", "query"]
CHOICES_KEYS = ["choices", "options", "answers", "variants", "alternatives"]
HINT_KEYS = ["hint", "hints", "hint_en", "clue", "tip"]
# Parallel Japanese hint lines, paired by position with the hint lines
HINT_JA_KEYS = ["hint_ja", "hints_ja"]
TEXT_PRIORITY_KEYS = (
    ["en", "english"] + QUESTION_KEYS + ["label", "value", "name", "display"]
)
# Bare "index" is deliberately absent: too many records use it for ordering.
CORRECT_KEYS = [
    "correct", "correctAnswer", "correct_answer", "answer", "key", "solution",
    "correctIndex", "answerIndex", "answer_idx",
    "letter", "answerLetter", "correctLetter", "ans", "answer_text", "correct_text",
]
ID_KEYS = ["id", "qid", "question_id", "uid"]
CATEGORY_KEYS = ["category", "subcategory", "topic"]
EXPLANATION_KEYS = ["explanation", "explain", "rationale"]
TRANSLATION_KEYS = ["translation", "ja", "japanese"]


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_dir: str = "logs"
    filename: str = "quizbank.log"
    structured: bool = False

    def file_path(self) -> Path:
        return Path(self.log_dir) / self.filename


@dataclass
class DeterminismConfig:
    seed: int = 42


@dataclass
class NormalizerConfig:
    """Key allow-lists and depth bounds used when normalizing records.

    The lists are ordered: earlier keys win when a record carries several.
    """
    max_depth: int = 7
    max_walk_depth: int = 64
    min_choices: int = 2
    question_keys: List[str] = field(default_factory=lambda: list(QUESTION_KEYS))
    choices_keys: List[str] = field(default_factory=lambda: list(CHOICES_KEYS))
    hint_keys: List[str] = field(default_factory=lambda: list(HINT_KEYS))
    hint_ja_keys: List[str] = field(default_factory=lambda: list(HINT_JA_KEYS))
    text_priority_keys: List[str] = field(default_factory=lambda: list(TEXT_PRIORITY_KEYS))
    correct_keys: List[str] = field(default_factory=lambda: list(CORRECT_KEYS))
    id_keys: List[str] = field(default_factory=lambda: list(ID_KEYS))
    category_keys: List[str] = field(default_factory=lambda: list(CATEGORY_KEYS))
    explanation_keys: List[str] = field(default_factory=lambda: list(EXPLANATION_KEYS))
    translation_keys: List[str] = field(default_factory=lambda: list(TRANSLATION_KEYS))


@dataclass
class DataConfig:
    data_dir: str = "public/data"
    file_pattern: str = "quizData_{level}.json"
    levels: List[str] = field(default_factory=lambda: ["A1", "A2"])
    id_salt: str = ""


@dataclass
class AuditConfig:
    significance: float = 0.05
    skew_threshold: float = 0.6
    min_questions: int = 10
    max_examples: int = 6


def _section(payload: dict, name: str) -> dict:
    section = payload.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{name}' must be a JSON object")
    return section


@dataclass
class AppConfig:
    logging: LoggingConfig = None  # type: ignore[assignment]
    determinism: DeterminismConfig = None  # type: ignore[assignment]
    normalizer: NormalizerConfig = None  # type: ignore[assignment]
    data: DataConfig = None  # type: ignore[assignment]
    audit: AuditConfig = None  # type: ignore[assignment]

    @staticmethod
    def from_json(path: str | Path) -> "AppConfig":
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        return AppConfig.from_dict(payload)

    @staticmethod
    def from_dict(payload: dict) -> "AppConfig":
        if not isinstance(payload, dict):
            raise ValueError(f"Config must be a JSON object, got {type(payload).__name__}")
        return AppConfig(
            logging=LoggingConfig(**_section(payload, "logging")),
            determinism=DeterminismConfig(**_section(payload, "determinism")),
            normalizer=NormalizerConfig(**_section(payload, "normalizer")),
            data=DataConfig(**_section(payload, "data")),
            audit=AuditConfig(**_section(payload, "audit")),
        )

    def to_json(self, path: str | Path) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w", encoding="utf-8") as f:
            json.dump({
                "logging": asdict(self.logging),
                "determinism": asdict(self.determinism),
                "normalizer": asdict(self.normalizer),
                "data": asdict(self.data),
                "audit": asdict(self.audit),
            }, f, indent=2, ensure_ascii=False)


# Provide safe defaults via a factory function for top-level config
def default_app_config() -> AppConfig:
    return AppConfig(
        logging=LoggingConfig(),
        determinism=DeterminismConfig(),
        normalizer=NormalizerConfig(),
        data=DataConfig(),
        audit=AuditConfig(),
    )
