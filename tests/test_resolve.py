"""Tests for strict correct-answer resolution."""

import pytest

from quizbank.config import CORRECT_KEYS
from quizbank.data.resolve import resolve_correct_index, resolve_value

CHOICES = ["Apple", "Banana", "Cherry"]


@pytest.mark.parametrize(
    "record, expected",
    [
        ({"answer": "banana"}, 1),
        ({"answer": "  BANANA "}, 1),
        ({"correctIndex": 1}, 1),
        ({"correctIndex": 0}, 0),
        ({"correctIndex": 3}, 2),  # 1-based fallback
        ({"correctIndex": 4}, None),
        ({"correctIndex": -1}, None),
        ({"correctIndex": 2.0}, 2),
        ({"correctIndex": 1.5}, None),
        ({"correctLetter": "C"}, 2),
        ({"correctLetter": "c"}, 2),
        ({"correctLetter": "Z"}, None),
        ({"correctAnswer": {"en": "Cherry", "ja": "さくらんぼ"}}, 2),
        ({"correctAnswer": {"text": "apple"}}, 0),
        ({"correctAnswer": {"ja": "バナナ", "romaji": "banana"}}, None),
        ({"answer": ["Cherry"]}, 2),
        ({"answer": ["Apple", "Cherry"]}, None),
        ({"answer": True}, None),
        ({"answer": None}, None),
        ({"answer": ""}, None),
    ],
)
def test_resolve_top_level(record, expected):
    assert resolve_correct_index(record, CHOICES) == expected


def test_first_recognized_key_that_resolves_wins():
    record = {"answer": "Durian", "solution": "Cherry", "correctIndex": 0}
    # "answer" does not match any choice, "key" is absent, "solution" matches
    assert resolve_correct_index(record, CHOICES) == 2


def test_key_priority_not_record_order():
    record = {"correctIndex": 0, "correct": "Banana"}
    assert resolve_correct_index(record, CHOICES) == 1


def test_unrecognized_keys_are_ignored():
    assert resolve_correct_index({"right": "Banana", "index": 1, "pick": "B"}, CHOICES) is None


def test_bare_index_is_not_an_answer_key():
    assert "index" not in CORRECT_KEYS
    assert resolve_correct_index({"index": 2}, CHOICES) is None


def test_duplicate_choice_arrays_are_not_answers():
    record = {"choices": list(CHOICES), "options": ["apple", "BANANA", "cherry "]}
    assert resolve_correct_index(record, CHOICES) is None


def test_nested_object_one_level_deep():
    record = {"question": "Q", "meta": {"answer": "C"}}
    assert resolve_correct_index(record, CHOICES) == 2


def test_top_level_beats_nested():
    record = {"meta": {"answer": "Apple"}, "answer": "Cherry"}
    assert resolve_correct_index(record, CHOICES) == 2


def test_never_deeper_than_one_level():
    record = {"meta": {"inner": {"answer": "Banana"}}}
    assert resolve_correct_index(record, CHOICES) is None


def test_objects_inside_non_choice_arrays_are_checked():
    record = {"annotations": [{"note": "x"}, {"correct": "Banana"}]}
    assert resolve_correct_index(record, CHOICES) == 1


def test_choice_array_objects_are_skipped():
    record = {
        "options": [
            {"en": "Apple", "answer": "Apple"},
            {"en": "Banana"},
            {"en": "Cherry"},
        ]
    }
    assert resolve_correct_index(record, CHOICES) is None


def test_custom_allow_list():
    record = {"rightAnswer": "B"}
    assert resolve_correct_index(record, CHOICES) is None
    assert resolve_correct_index(record, CHOICES, keys=["rightAnswer"]) == 1


def test_non_object_and_empty_choices():
    assert resolve_correct_index(["answer", "Apple"], CHOICES) is None
    assert resolve_correct_index({"answer": "Apple"}, []) is None


def test_letter_then_literal_fallback():
    # Single letters map by position before literal matching.
    assert resolve_value("b", ["a", "b", "c"]) == 1
    # Out-of-range letter still gets a literal match.
    assert resolve_value("Z", ["X", "Y", "Z"]) == 2
    # Numeric strings are literal text, not indices.
    assert resolve_value("4", ["3", "4", "5"]) == 1
    assert resolve_value("1", ["Apple", "Banana"]) is None


def test_non_ascii_single_characters_are_literal():
    assert resolve_value("ß", ["a", "b"]) is None
    assert resolve_value("é", ["e", "é"]) == 1


def test_out_of_range_number_matches_choice_text():
    # Neither 0-based nor 1-based, so the number is compared as text.
    assert resolve_value(5, ["3", "4", "5"]) == 2
    assert resolve_value(5.0, ["3", "4", "5"]) == 2
    assert resolve_correct_index({"answer": 5}, ["3", "4", "5"]) == 2
    assert resolve_value(12, ["10", "11"]) is None


def test_in_range_number_stays_an_index():
    assert resolve_value(2, ["3", "4", "5"]) == 2
    assert resolve_value(3, ["3", "4", "5"]) == 2
