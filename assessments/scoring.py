# assessments/scoring.py
"""
Auto-grading rules for every question type.

``score`` is pure: it reads a typed answer key (see
``exams.question_types.parse_answer_key``), the student's already-decoded
answer and the question's maximum score, and returns a ``ScoreOutcome``.
Nothing here touches the database.
"""
import json
from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple, Optional

from exams.question_types import (
    ChoiceKey,
    MatchingKey,
    NumericKey,
    OrderKey,
    QuestionType,
    SelectionKey,
    TextKey,
    WordsKey,
    parse_answer_key,
)

ZERO = Decimal("0")
ONE_DECIMAL = Decimal("0.1")


class ScoreOutcome(NamedTuple):
    score: Decimal
    is_correct: Optional[bool]


WRONG = ScoreOutcome(ZERO, False)


def decode_answer(raw):
    """
    Normalise an incoming answer once, at the API boundary.

    Clients sometimes send arrays and objects as JSON text; those are decoded.
    Any other string is an answer in its own right and stays as it is.
    """
    if isinstance(raw, str) and raw.strip()[:1] in ("[", "{"):
        try:
            return json.loads(raw)
        except ValueError:
            return raw
    return raw


# --- comparison helpers ---

def _number(value):
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _loose_equal(a, b):
    """Equality that treats "1" and 1 as the same answer."""
    if a == b:
        return True
    if a is None or b is None or isinstance(a, (list, dict)) or isinstance(b, (list, dict)):
        return False
    na, nb = _number(a), _number(b)
    if na is not None and nb is not None:
        return na == nb
    return str(a) == str(b)


def _token(value):
    number = _number(value)
    if number is not None and number.is_integer():
        return str(int(number))
    return str(value)


def _full(max_score):
    return Decimal(str(max_score))


def _binary(is_correct, max_score):
    return ScoreOutcome(_full(max_score) if is_correct else ZERO, is_correct)


def _ratio(hits, total, max_score):
    if total <= 0:
        return WRONG
    earned = (_full(max_score) * Decimal(hits) / Decimal(total)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
    return ScoreOutcome(max(earned, ZERO), hits == total)


# --- per-type rules ---

def _score_choice(key: ChoiceKey, answer, max_score):
    return _binary(_loose_equal(answer, key.answer), max_score)


def _true_false_token(value):
    if isinstance(value, bool):
        return "T" if value else "F"
    if isinstance(value, str):
        value = value.strip().upper()
        return {"TRUE": "T", "FALSE": "F"}.get(value, value)
    return value


def _score_true_false(key: ChoiceKey, answer, max_score):
    expected = _true_false_token(key.answer)
    return _binary(expected is not None and _true_false_token(answer) == expected, max_score)


def _score_selection(key: SelectionKey, answer, max_score):
    selected = [_token(a) for a in answer] if isinstance(answer, (list, tuple)) else []
    picked = set(selected)

    # Every pick that is not a hit counts against the student, repeats included
    right = sum(1 for a in key.answers if _token(a) in picked)
    wrong = max(0, len(selected) - right)
    net = max(0, right - wrong)
    return _ratio(net, len(key.answers), max_score)


def _student_pairs(answer):
    if isinstance(answer, dict):
        return {str(k): v for k, v in answer.items()}
    if isinstance(answer, list):
        return {
            str(item["left"]): item.get("right")
            for item in answer
            if isinstance(item, dict) and "left" in item
        }
    return {}


def _score_matching(key: MatchingKey, answer, max_score):
    student = _student_pairs(answer)
    hits = 0
    for left, right in key.pairs:
        if not left or str(left) not in student:
            continue
        if _loose_equal(student[str(left)], right):
            hits += 1
    return _ratio(hits, len(key.pairs), max_score)


def _score_sequence(key: OrderKey, answer, max_score):
    if not isinstance(answer, (list, tuple)) or len(answer) != len(key.order):
        return _binary(False, max_score)
    return _binary(all(_loose_equal(a, b) for a, b in zip(answer, key.order)), max_score)


def _score_math(key: NumericKey, answer, max_score):
    value = _number(answer)
    if value is None:
        return _binary(False, max_score)
    return _binary(abs(value - key.answer) <= key.tolerance, max_score)


def _score_text(key: TextKey, answer, max_score):
    if isinstance(answer, (list, dict)):
        return _binary(False, max_score)
    given = str(answer).strip().lower()
    return _binary(any(given == a.strip().lower() for a in key.answers), max_score)


def _score_words(key: WordsKey, answer, max_score):
    return _binary(isinstance(answer, (list, tuple)) and list(answer) == list(key.words), max_score)


_RULES = {
    QuestionType.MULTIPLE_CHOICE: (ChoiceKey, _score_choice),
    QuestionType.TRUE_FALSE: (ChoiceKey, _score_true_false),
    QuestionType.MULTIPLE_SELECTION: (SelectionKey, _score_selection),
    QuestionType.MATCHING: (MatchingKey, _score_matching),
    QuestionType.SEQUENCE: (OrderKey, _score_sequence),
    QuestionType.MATH_INPUT: (NumericKey, _score_math),
    QuestionType.SHORT_ANSWER: (TextKey, _score_text),
    QuestionType.ARABIC_RESPONSE: (TextKey, _score_text),
    QuestionType.JAVANESE_RESPONSE: (TextKey, _score_text),
    QuestionType.ARRANGE_WORDS: (WordsKey, _score_words),
}

# Keyed by the plain value so rows loaded from the database dispatch the same way
RULES = {str(question_type): rule for question_type, rule in _RULES.items()}


def score(question_type, answer_key, student_answer, max_score, current=None):
    """
    Grade one answer.

    ``current`` is the outcome already stored for the answer. Essays are never
    auto-graded, so for them ``current`` comes back untouched (or an ungraded
    zero when there is none). Unknown types and keys that do not fit their
    type score zero rather than raising.
    """
    if student_answer is None:
        return WRONG

    if question_type == QuestionType.ESSAY:
        return current if current is not None else ScoreOutcome(ZERO, None)

    rule = RULES.get(str(question_type))
    if rule is None:
        return WRONG

    key_class, grade = rule
    if not isinstance(answer_key, key_class):
        return WRONG
    return grade(answer_key, student_answer, max_score)


def score_snapshot(snapshot, student_answer, current=None):
    """Grade ``student_answer`` against a QuestionSnapshot's stored key."""
    key = parse_answer_key(snapshot.question_type, snapshot.answer_key)
    return score(snapshot.question_type, key, student_answer, snapshot.score_value, current=current)
