from decimal import Decimal

import pytest

from assessments.scoring import RULES, ScoreOutcome, decode_answer, score
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


def grade(question_type, payload, answer, max_score=10, current=None):
    key = parse_answer_key(question_type, payload)
    return score(question_type, key, answer, max_score, current=current)


class TestMultipleChoice:
    def test_correct_answer_scores_full_marks(self):
        assert grade(QuestionType.MULTIPLE_CHOICE, {'answer': 'A'}, 'A') == (Decimal('10'), True)

    def test_wrong_answer_scores_zero(self):
        assert grade(QuestionType.MULTIPLE_CHOICE, {'answer': 'A'}, 'B') == (Decimal('0'), False)

    def test_loose_comparison_of_numbers_and_strings(self):
        assert grade(QuestionType.MULTIPLE_CHOICE, {'answer': 2}, '2').is_correct is True

    def test_is_repeatable(self):
        first = grade(QuestionType.MULTIPLE_CHOICE, {'answer': 'C'}, 'C')
        second = grade(QuestionType.MULTIPLE_CHOICE, {'answer': 'C'}, 'C')
        assert first == second


class TestTrueFalse:
    def test_letter_key(self):
        assert grade(QuestionType.TRUE_FALSE, {'answer': 'T'}, 'T').is_correct is True
        assert grade(QuestionType.TRUE_FALSE, {'answer': 'T'}, 'F').is_correct is False

    def test_boolean_answer_maps_to_letter(self):
        assert grade(QuestionType.TRUE_FALSE, {'answer': 'F'}, False).is_correct is True


class TestMultipleSelection:
    key = {'answers': ['A', 'C']}

    def test_exact_set_scores_full(self):
        assert grade(QuestionType.MULTIPLE_SELECTION, self.key, ['C', 'A']) == (Decimal('10'), True)

    def test_extra_wrong_option_is_penalised(self):
        # right 2, wrong 1 -> net 1 of 2
        outcome = grade(QuestionType.MULTIPLE_SELECTION, self.key, ['A', 'C', 'D'])
        assert outcome == (Decimal('5.0'), False)
        assert outcome.score < 10

    def test_partial_selection(self):
        assert grade(QuestionType.MULTIPLE_SELECTION, self.key, ['A']) == (Decimal('5.0'), False)

    def test_net_never_negative(self):
        assert grade(QuestionType.MULTIPLE_SELECTION, self.key, ['B', 'D', 'A']).score == Decimal('0')

    def test_rounds_to_one_decimal(self):
        outcome = grade(QuestionType.MULTIPLE_SELECTION, {'answers': ['A', 'B', 'C']}, ['A'])
        assert outcome.score == Decimal('3.3')

    def test_scalar_answer_scores_zero(self):
        assert grade(QuestionType.MULTIPLE_SELECTION, self.key, 'A') == (Decimal('0'), False)

    def test_repeated_pick_counts_as_wrong(self):
        # right 1, wrong 1 -> net 0
        assert grade(QuestionType.MULTIPLE_SELECTION, self.key, ['A', 'A']) == (Decimal('0'), False)

    def test_repeat_on_top_of_full_selection_is_penalised(self):
        assert grade(QuestionType.MULTIPLE_SELECTION, self.key, ['A', 'C', 'C']) == (Decimal('5.0'), False)


class TestMatching:
    key = {'pairs': {'cat': 'meow', 'dog': 'woof', 'cow': 'moo'}}

    def test_all_pairs(self):
        answer = {'cat': 'meow', 'dog': 'woof', 'cow': 'moo'}
        assert grade(QuestionType.MATCHING, self.key, answer, max_score=6) == (Decimal('6'), True)

    def test_swapped_pairs_are_not_correct(self):
        answer = {'cat': 'woof', 'dog': 'meow', 'cow': 'moo'}
        outcome = grade(QuestionType.MATCHING, self.key, answer, max_score=6)
        assert outcome == (Decimal('2.0'), False)

    def test_pairs_given_as_objects(self):
        key = {'pairs': [{'left': 'H2O', 'right': 'water'}, {'left': 'NaCl', 'right': 'salt'}]}
        answer = [{'left': 'H2O', 'right': 'water'}, {'left': 'NaCl', 'right': 'salt'}]
        assert grade(QuestionType.MATCHING, key, answer).is_correct is True

    def test_malformed_key_entry_still_counts_in_total(self):
        key = {'pairs': [{'left': 'a', 'right': '1'}, 'junk']}
        assert grade(QuestionType.MATCHING, key, {'a': '1'}) == (Decimal('5.0'), False)


class TestSequence:
    key = {'order': ['egg', 'larva', 'pupa', 'butterfly']}

    def test_exact_order(self):
        answer = ['egg', 'larva', 'pupa', 'butterfly']
        assert grade(QuestionType.SEQUENCE, self.key, answer) == (Decimal('10'), True)

    def test_any_permutation_is_wrong(self):
        answer = ['egg', 'pupa', 'larva', 'butterfly']
        assert grade(QuestionType.SEQUENCE, self.key, answer) == (Decimal('0'), False)


class TestMathInput:
    def test_within_tolerance(self):
        assert grade(QuestionType.MATH_INPUT, {'answer': 3.14, 'tolerance': 0.01}, '3.149').is_correct is True

    def test_outside_tolerance(self):
        assert grade(QuestionType.MATH_INPUT, {'answer': 3.14, 'tolerance': 0.01}, 3.2).is_correct is False

    def test_not_a_number(self):
        assert grade(QuestionType.MATH_INPUT, {'answer': 4}, 'four') == (Decimal('0'), False)


class TestTextResponses:
    @pytest.mark.parametrize('question_type', [
        QuestionType.SHORT_ANSWER,
        QuestionType.ARABIC_RESPONSE,
        QuestionType.JAVANESE_RESPONSE,
    ])
    def test_trimmed_case_insensitive_match(self, question_type):
        key = {'answers': ['Jakarta', 'DKI Jakarta']}
        assert grade(question_type, key, '  jakarta ').is_correct is True
        assert grade(question_type, key, 'Bandung').is_correct is False

    def test_legacy_single_answer_is_accepted(self):
        assert grade(QuestionType.SHORT_ANSWER, {'answer': 'Bogor'}, 'bogor').is_correct is True


class TestArrangeWords:
    def test_exact_order(self):
        key = {'words': ['saya', 'pergi', 'ke', 'pasar']}
        assert grade(QuestionType.ARRANGE_WORDS, key, ['saya', 'pergi', 'ke', 'pasar']).is_correct is True
        assert grade(QuestionType.ARRANGE_WORDS, key, ['pergi', 'saya', 'ke', 'pasar']).is_correct is False


class TestEssay:
    def test_keeps_existing_grade(self):
        current = ScoreOutcome(Decimal('7'), True)
        assert grade(QuestionType.ESSAY, {}, 'A long essay', current=current) == current

    def test_ungraded_essay_stays_ungraded(self):
        assert grade(QuestionType.ESSAY, {}, 'A long essay') == (Decimal('0'), None)

    def test_blank_essay_short_circuits(self):
        assert grade(QuestionType.ESSAY, {}, None) == (Decimal('0'), False)


class TestDefaults:
    def test_missing_answer_scores_zero(self):
        assert grade(QuestionType.MULTIPLE_CHOICE, {'answer': 'A'}, None) == (Decimal('0'), False)

    def test_unknown_type_scores_zero(self):
        assert score('drawing', None, 'anything', 10) == (Decimal('0'), False)

    def test_key_of_the_wrong_shape_scores_zero(self):
        assert score(QuestionType.SEQUENCE, ChoiceKey(answer='A'), ['A'], 10) == (Decimal('0'), False)

    def test_every_auto_graded_type_has_a_rule(self):
        auto = {str(t) for t in QuestionType} - {str(QuestionType.ESSAY)}
        assert auto == set(RULES)


class TestAnswerKeyParsing:
    def test_shapes(self):
        assert parse_answer_key(QuestionType.MULTIPLE_CHOICE, {'answer': 'B'}) == ChoiceKey('B')
        assert parse_answer_key(QuestionType.MULTIPLE_SELECTION, {'answers': ['A']}) == SelectionKey(('A',))
        assert parse_answer_key(QuestionType.MATCHING, {'pairs': {'a': 'b'}}) == MatchingKey((('a', 'b'),))
        assert parse_answer_key(QuestionType.SEQUENCE, {'order': [1, 2]}) == OrderKey((1, 2))
        assert parse_answer_key(QuestionType.MATH_INPUT, {'answer': '2.5'}) == NumericKey(2.5, 0.0)
        assert parse_answer_key(QuestionType.SHORT_ANSWER, {'answers': ['x'], 'answer': 'y'}) == TextKey(('x', 'y'))
        assert parse_answer_key(QuestionType.ARRANGE_WORDS, {'words': ['a']}) == WordsKey(('a',))

    def test_json_text_key(self):
        assert parse_answer_key(QuestionType.MULTIPLE_CHOICE, '{"answer": "D"}') == ChoiceKey('D')

    def test_unknown_type(self):
        assert parse_answer_key('drawing', {}) is None


class TestDecodeAnswer:
    def test_json_encoded_array_is_decoded(self):
        assert decode_answer('["A", "C"]') == ['A', 'C']

    def test_plain_text_is_kept(self):
        assert decode_answer('Jakarta') == 'Jakarta'

    def test_numeric_text_stays_text(self):
        assert decode_answer('042') == '042'
        assert decode_answer('true') == 'true'

    def test_non_strings_pass_through(self):
        assert decode_answer({'a': 'b'}) == {'a': 'b'}
