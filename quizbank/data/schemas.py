"""Data schemas for quizbank."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import zip_longest
from typing import Iterator, NamedTuple, Optional, Tuple

from .values import normalize_for_match


class Question(NamedTuple):
    """One normalized multiple-choice question.

    ``correct_index`` is None when no correct answer could be determined.
    ``hints`` and ``hints_ja`` have the same length; a line missing on one
    side is ``""``. The ``_ja`` fields are empty when the source has no
    Japanese text.
    """
    question_text: str
    choices: Tuple[str, ...]
    hint: str = ""
    correct_index: Optional[int] = None
    id: str = ""
    category: str = ""
    explanation: str = ""
    translation: str = ""
    hints: Tuple[str, ...] = ()
    question_ja: str = ""
    hints_ja: Tuple[str, ...] = ()
    explanation_ja: str = ""

    @property
    def is_resolved(self) -> bool:
        return self.correct_index is not None

    @property
    def correct_choice(self) -> Optional[str]:
        if self.correct_index is None:
            return None
        return self.choices[self.correct_index]

    def is_correct(self, choice_index: int) -> bool:
        # Unresolved questions have no correct choice at all.
        return self.correct_index is not None and choice_index == self.correct_index

    def text_for(self, lang: str = "en") -> str:
        if lang == "ja" and self.question_ja:
            return self.question_ja
        return self.question_text

    def explanation_for(self, lang: str = "en") -> str:
        if lang == "ja" and self.explanation_ja:
            return self.explanation_ja
        return self.explanation

    def hint_lines(self, lang: str = "en") -> Tuple[str, ...]:
        """Hint lines in ``lang``, each falling back to the other language."""
        if lang == "ja":
            pairs = zip_longest(self.hints_ja, self.hints, fillvalue="")
        else:
            pairs = zip_longest(self.hints, self.hints_ja, fillvalue="")
        return tuple(first or second for first, second in pairs)


@dataclass(frozen=True)
class QuestionPool:
    """Ordered, immutable questions for one level or source document."""
    questions: Tuple[Question, ...]
    level: str = ""
    source: str = ""

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self.questions)

    def __getitem__(self, i):
        return self.questions[i]

    def resolved(self) -> Tuple[Question, ...]:
        return tuple(q for q in self.questions if q.is_resolved)

    def unresolved(self) -> Tuple[Question, ...]:
        return tuple(q for q in self.questions if not q.is_resolved)

    def by_category(self, category: str) -> "QuestionPool":
        """Sub-pool of the questions in ``category``, compared case-insensitively."""
        key = normalize_for_match(category)
        return QuestionPool(
            questions=tuple(q for q in self.questions if normalize_for_match(q.category) == key),
            level=self.level,
            source=self.source,
        )

    @property
    def name(self) -> str:
        return self.level or self.source or "pool"
