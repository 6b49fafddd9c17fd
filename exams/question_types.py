# exams/question_types.py
"""
Supported question types and the answer-key payload each one stores.

Answer keys live in a JSON column, so every type gets a small frozen
dataclass describing its key and ``parse_answer_key`` is the only code that
reads the raw JSON shape.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from django.db import models


class QuestionType(models.TextChoices):
    MULTIPLE_CHOICE = "multiple_choice", "Multiple Choice"
    TRUE_FALSE = "true_false", "True / False"
    MULTIPLE_SELECTION = "multiple_selection", "Multiple Selection"
    MATCHING = "matching", "Matching"
    SEQUENCE = "sequence", "Sequence"
    MATH_INPUT = "math_input", "Math Input"
    SHORT_ANSWER = "short_answer", "Short Answer"
    ARABIC_RESPONSE = "arabic_response", "Arabic Response"
    JAVANESE_RESPONSE = "javanese_response", "Javanese Response"
    ESSAY = "essay", "Essay"
    ARRANGE_WORDS = "arrange_words", "Arrange Words"


class Difficulty(models.TextChoices):
    EASY = "easy", "Easy"
    MEDIUM = "medium", "Medium"
    HARD = "hard", "Hard"


# Types a human grader has to mark
MANUALLY_GRADED = frozenset({str(QuestionType.ESSAY)})


@dataclass(frozen=True)
class ChoiceKey:
    answer: Any = None


@dataclass(frozen=True)
class SelectionKey:
    answers: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class MatchingKey:
    # (left, right) pairs in authoring order
    pairs: Tuple[Tuple[Any, Any], ...] = ()


@dataclass(frozen=True)
class OrderKey:
    order: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class NumericKey:
    answer: float = 0.0
    tolerance: float = 0.0


@dataclass(frozen=True)
class TextKey:
    answers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WordsKey:
    words: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class ManualKey:
    rubric: Dict[str, Any] = field(default_factory=dict, compare=False)


def _as_mapping(payload):
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except ValueError:
            return {}
    return payload if isinstance(payload, dict) else {}


def _as_tuple(value):
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return ()


def _to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _matching_pairs(raw):
    pairs = []
    if isinstance(raw, dict):
        items = raw.items()
    elif isinstance(raw, list):
        items = enumerate(raw)
    else:
        return ()

    for key, value in items:
        if isinstance(value, dict) and "left" in value:
            pairs.append((value["left"], value.get("right")))
        else:
            # Malformed list entries still count towards the total
            pairs.append((key, value))
    return tuple(pairs)


def _text_answers(data):
    answers = list(_as_tuple(data.get("answers")))
    # Older keys carry a single "answer"
    legacy = data.get("answer")
    if legacy is not None and legacy not in answers:
        answers.append(legacy)
    return tuple(str(a) for a in answers)


def parse_answer_key(question_type, payload):
    """
    Turn a stored answer-key payload into the typed key for ``question_type``.

    Returns ``None`` for a type this catalog does not know.
    """
    data = _as_mapping(payload)

    if question_type in (QuestionType.MULTIPLE_CHOICE, QuestionType.TRUE_FALSE):
        return ChoiceKey(answer=data.get("answer"))
    if question_type == QuestionType.MULTIPLE_SELECTION:
        return SelectionKey(answers=_as_tuple(data.get("answers")))
    if question_type == QuestionType.MATCHING:
        return MatchingKey(pairs=_matching_pairs(data.get("pairs")))
    if question_type == QuestionType.SEQUENCE:
        return OrderKey(order=_as_tuple(data.get("order")))
    if question_type == QuestionType.MATH_INPUT:
        return NumericKey(
            answer=_to_float(data.get("answer", 0)),
            tolerance=_to_float(data.get("tolerance", 0)),
        )
    if question_type in (
        QuestionType.SHORT_ANSWER,
        QuestionType.ARABIC_RESPONSE,
        QuestionType.JAVANESE_RESPONSE,
    ):
        return TextKey(answers=_text_answers(data))
    if question_type == QuestionType.ARRANGE_WORDS:
        return WordsKey(words=_as_tuple(data.get("words")))
    if question_type == QuestionType.ESSAY:
        return ManualKey(rubric=data)
    return None
