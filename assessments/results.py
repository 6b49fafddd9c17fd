# assessments/results.py
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple

from django.db import transaction
from django.db.models import Sum

from .models import ExamResult, ExamSession
from .policies import should_replace
from .scoring import ZERO

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
CENTS = Decimal("0.01")


class ResultFigures(NamedTuple):
    session: ExamSession
    total_score: Decimal
    score_percent: Decimal
    is_passed: bool


def session_total(session):
    return session.answers.aggregate(total=Sum('awarded_marks'))['total'] or ZERO


def compute_figures(session, total_score):
    achievable = Decimal(session.total_max_score or 0)
    raw_percent = Decimal(total_score) / achievable * HUNDRED if achievable > 0 else ZERO
    percent = raw_percent.quantize(CENTS, rounding=ROUND_HALF_UP)
    return ResultFigures(
        session=session,
        total_score=Decimal(total_score),
        score_percent=percent,
        # Pass mark is checked before rounding: 69.995% does not pass 70
        is_passed=raw_percent >= session.exam.pass_mark_percentage,
    )


def finalize_session(session):
    """
    Recompute an attempt's total from its answers and promote it into the
    student's ExamResult according to the exam's result policy.

    Safe to call any number of times; everything is derived from the stored
    answer scores.
    """
    exam = session.exam
    with transaction.atomic():
        total = session_total(session)
        session.total_score = total
        session.save(update_fields=['total_score'])

        figures = compute_figures(session, total)
        result, created = ExamResult.objects.select_for_update().get_or_create(
            user_id=session.user_id,
            exam_id=exam.id,
            defaults={
                'session': session,
                'total_score': figures.total_score,
                'score_percent': figures.score_percent,
                'is_passed': figures.is_passed,
                'result_type': exam.result_policy,
            },
        )
        if created:
            logger.info("Result created for user %s on exam %s from session %s (%s%%)",
                        session.user_id, exam.id, session.id, figures.score_percent)
            return result

        if should_replace(exam.result_policy, figures, result):
            result.session = session
            result.total_score = figures.total_score
            result.score_percent = figures.score_percent
            result.is_passed = figures.is_passed
            result.result_type = exam.result_policy
            result.save()
            logger.info("Result for user %s on exam %s now from session %s (%s%%)",
                        session.user_id, exam.id, session.id, figures.score_percent)
        else:
            logger.info("Session %s kept out of result for user %s on exam %s by %s policy",
                        session.id, session.user_id, exam.id, exam.result_policy)
        return result


def list_results(user):
    return (
        ExamResult.objects.filter(user=user)
        .select_related('exam', 'session')
        .order_by('-updated_at')
    )
