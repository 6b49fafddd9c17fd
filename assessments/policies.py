# assessments/policies.py
"""
Which attempt a student's ExamResult should point at.

Each policy answers one question: given the attempt being finalised and the
attempt the existing result was built from, should the new one take over?
"""
from exams.models import Exam


def _official(candidate, current_session, current_result):
    return True


def _best_attempt(candidate, current_session, current_result):
    # Ties keep the earlier attempt
    return candidate.score_percent > current_result.score_percent


def _latest_attempt(candidate, current_session, current_result):
    return candidate.session.attempt_number >= current_session.attempt_number


RESULT_POLICIES = {
    str(Exam.ResultPolicy.OFFICIAL): _official,
    str(Exam.ResultPolicy.BEST_ATTEMPT): _best_attempt,
    str(Exam.ResultPolicy.LATEST_ATTEMPT): _latest_attempt,
}


def should_replace(policy, candidate, current_result):
    """
    ``candidate`` is a ``ResultFigures`` for the attempt being finalised.
    A result that already points at that attempt is always rewritten.
    """
    if current_result.session_id == candidate.session.id:
        return True
    prefer = RESULT_POLICIES.get(str(policy), _official)
    return prefer(candidate, current_result.session, current_result)
