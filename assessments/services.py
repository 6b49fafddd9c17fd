# assessments/services.py
"""
Exam-taking lifecycle: start (with question snapshotting), answer, finish,
correct.

Every function takes the acting student and the current time explicitly and
runs inside one database transaction. Uniqueness constraints on the models
(one open attempt per student and exam, one answer row per attempt and
question) settle concurrent calls.
"""
import logging
import random
from datetime import timedelta
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import F

from cores.models import PlatformSetting
from exams.models import QuestionSnapshot
from exams.question_types import MANUALLY_GRADED, QuestionType

from .exceptions import (
    ExamUnavailable,
    InvalidToken,
    MaxAttemptsReached,
    NoActiveSession,
    NotFound,
    ScoreExceedsMaximum,
    TimeWindowClosed,
    ValidationFailed,
)
from .models import ExamSession, StudentAnswer
from .results import finalize_session
from .scoring import ScoreOutcome, ZERO, score_snapshot
from .signals import session_finished, session_force_finished
from .timer import effective_deadline, remaining_seconds

logger = logging.getLogger(__name__)

LIST_ANSWER_TYPES = {
    str(QuestionType.MULTIPLE_SELECTION),
    str(QuestionType.SEQUENCE),
    str(QuestionType.ARRANGE_WORDS),
}


class MarkingStatus:
    FULL = "full"
    PARTIAL = "partial"
    NO = "no"

    choices = (FULL, PARTIAL, NO)


def get_open_session(student, exam, lock=False):
    queryset = ExamSession.objects.filter(user=student, exam=exam, is_finished=False)
    if lock:
        queryset = queryset.select_for_update()
    return queryset.first()


def _require_open_session(student, exam):
    session = get_open_session(student, exam, lock=True)
    if session is None:
        logger.warning("No open session for user %s on exam %s", getattr(student, 'pk', None), exam.id)
        raise NoActiveSession()
    return session


# --- Start / snapshot ---

def _check_can_start(exam, now, token, has_access):
    if not exam.is_published or not has_access:
        raise ExamUnavailable()
    if exam.start_time and now < exam.start_time:
        raise TimeWindowClosed("Exam has not started yet.")
    if exam.end_time and now > exam.end_time:
        raise TimeWindowClosed("Exam has ended.")
    # An empty configured token matches nothing
    if exam.requires_token and (not exam.token or token != exam.token):
        raise InvalidToken()


def snapshot_questions(exam, rng=None):
    """
    Snapshot the exam's live questions in delivery order.

    Shuffling only changes the order handed back for this attempt; the exam's
    own ordering is left alone.
    """
    snapshots = [
        QuestionSnapshot.capture(question, number)
        for number, question in enumerate(exam.questions.all(), start=1)
    ]
    if exam.is_randomized_question:
        (rng or random).shuffle(snapshots)
    return snapshots


def _create_attempt(student, exam, now, attempt_number, ip_address, rng):
    session = ExamSession.objects.create(
        user=student,
        exam=exam,
        attempt_number=attempt_number,
        start_time=now,
        ip_address=ip_address,
        total_score=ZERO,
        total_max_score=ZERO,
    )

    snapshots = snapshot_questions(exam, rng=rng)
    StudentAnswer.objects.bulk_create([
        StudentAnswer(
            session=session,
            question=snapshot,
            question_number=order,
            awarded_marks=ZERO,
        )
        for order, snapshot in enumerate(snapshots, start=1)
    ])

    session.total_max_score = Decimal(sum(s.score_value for s in snapshots))
    session.save(update_fields=['total_max_score'])
    return session


def start_attempt(student, exam, now, token=None, has_access=True, ip_address=None, rng=None):
    """
    Start (or resume) ``student``'s attempt at ``exam``.

    Returns ``(session, created)``. An attempt that is still open is handed
    back unchanged instead of starting another one.
    """
    _check_can_start(exam, now, token, has_access)

    open_session = get_open_session(student, exam)
    if open_session:
        logger.info("Resuming session %s for user %s on exam %s", open_session.id, student.pk, exam.id)
        return open_session, False

    finished = ExamSession.objects.filter(user=student, exam=exam, is_finished=True).count()
    if exam.max_attempts and finished >= exam.max_attempts:
        logger.warning("User %s hit max attempts (%s) on exam %s", student.pk, exam.max_attempts, exam.id)
        raise MaxAttemptsReached()

    try:
        with transaction.atomic():
            session = _create_attempt(student, exam, now, finished + 1, ip_address, rng)
    except IntegrityError:
        # Lost a race with a concurrent start; resume the winner's attempt
        session = get_open_session(student, exam)
        if session is None:
            raise
        logger.info("Concurrent start for user %s on exam %s resumed session %s", student.pk, exam.id, session.id)
        return session, False

    logger.info("Started session %s (attempt %s) for user %s on exam %s",
                session.id, session.attempt_number, student.pk, exam.id)
    return session, True


# --- Answers ---

def check_answer_shape(question_type, answer):
    """Reject payloads that cannot be an answer to ``question_type``."""
    if answer is None:
        return
    if str(question_type) in LIST_ANSWER_TYPES:
        if not isinstance(answer, list):
            raise ValidationFailed("This question expects a list of answers.")
    elif question_type == QuestionType.MATCHING:
        if not isinstance(answer, (dict, list)):
            raise ValidationFailed("This question expects pairs of answers.")
    elif isinstance(answer, (dict, list)):
        raise ValidationFailed("This question expects a single answer.")


def _regrade(record):
    if str(record.question.question_type) in MANUALLY_GRADED:
        # Only a grader sets these marks
        return ScoreOutcome(record.awarded_marks, record.is_correct)
    outcome = score_snapshot(record.question, record.answer, ScoreOutcome(record.awarded_marks, record.is_correct))
    record.awarded_marks = outcome.score
    record.is_correct = outcome.is_correct
    return outcome


def save_answer(student, exam, answer_id, answer, now, is_flagged=None):
    """
    Store (or overwrite) one answer of the student's open attempt and grade
    it straight away.
    """
    with transaction.atomic():
        session = _require_open_session(student, exam)

        grace = timedelta(seconds=PlatformSetting.load().answer_grace_seconds)
        if now > effective_deadline(session, exam) + grace:
            logger.warning("Late answer from user %s on session %s rejected", student.pk, session.id)
            raise TimeWindowClosed("Time is up for this attempt.")

        record = (
            StudentAnswer.objects.select_for_update()
            .select_related('question')
            .filter(id=answer_id, session=session)
            .first()
        )
        if record is None:
            raise NotFound("Question not found within this session.")

        check_answer_shape(record.question.question_type, answer)

        record.answer = answer
        _regrade(record)
        if is_flagged is not None:
            record.is_flagged = is_flagged
        record.answered_at = now
        record.save(update_fields=['answer', 'awarded_marks', 'is_correct', 'is_flagged', 'answered_at'])
    return record


def time_left(student, exam, now):
    session = get_open_session(student, exam)
    if session is None:
        raise NoActiveSession()
    return remaining_seconds(session, exam, now)


# --- Finish ---

def rescore_session(session):
    """Grade every answer of an attempt again from what is stored."""
    records = list(session.answers.select_related('question'))
    for record in records:
        _regrade(record)
    StudentAnswer.objects.bulk_update(records, ['awarded_marks', 'is_correct'])
    return records


def _close(session, now):
    rescore_session(session)
    session.finish_time = now
    session.is_finished = True
    session.duration_taken = max(0, int((now - session.start_time).total_seconds()))
    session.save(update_fields=['finish_time', 'is_finished', 'duration_taken'])
    return finalize_session(session)


def finish_attempt(student, exam, now):
    """Finish the open attempt. Returns ``(session, result)``."""
    with transaction.atomic():
        session = _require_open_session(student, exam)
        result = _close(session, now)
        transaction.on_commit(
            lambda: session_finished.send(sender=ExamSession, session=session, result=result)
        )
    logger.info("User %s finished session %s on exam %s with %s/%s",
                student.pk, session.id, exam.id, session.total_score, session.total_max_score)
    return session, result


def force_finish(exam, student, now):
    """A proctor ends a student's open attempt."""
    with transaction.atomic():
        session = _require_open_session(student, exam)
        result = _close(session, now)
        transaction.on_commit(
            lambda: session_force_finished.send(sender=ExamSession, session=session, result=result)
        )
    logger.info("Session %s of user %s force finished on exam %s", session.id, student.pk, exam.id)
    return session, result


def finish_expired_sessions(now, exam=None):
    """Finish every open attempt whose time has run out. Returns how many."""
    open_sessions = ExamSession.objects.filter(is_finished=False).select_related('exam', 'user')
    if exam is not None:
        open_sessions = open_sessions.filter(exam=exam)

    finished = 0
    for session in open_sessions:
        if remaining_seconds(session, session.exam, now) > 0:
            continue
        try:
            force_finish(session.exam, session.user, now)
        except NoActiveSession:
            # Finished by someone else meanwhile
            continue
        finished += 1
    return finished


def add_extra_time(exam, student, minutes):
    if minutes is None or minutes < 1:
        raise ValidationFailed("Extra time must be at least one minute.")
    with transaction.atomic():
        session = _require_open_session(student, exam)
        ExamSession.objects.filter(pk=session.pk).update(extra_time=F('extra_time') + minutes)
        session.refresh_from_db(fields=['extra_time'])
    logger.info("Granted %s extra minutes to session %s", minutes, session.id)
    return session


# --- Correction ---

def _check_marking_status(marking_status):
    if marking_status is not None and marking_status not in MarkingStatus.choices:
        raise ValidationFailed("Unknown marking status.")


def _mark(record, score=None, marking_status=None, is_correct=None, comment=None, cap=False):
    """
    Apply one grader decision to ``record`` and save it.

    With ``cap`` a score above the question maximum is lowered to it instead
    of being refused.
    """
    max_score = Decimal(record.question.score_value)
    new_score = record.awarded_marks if score is None else Decimal(str(score))
    correct = record.is_correct if is_correct is None else is_correct

    if marking_status == MarkingStatus.FULL:
        new_score, correct = max_score, True
    elif marking_status == MarkingStatus.NO:
        new_score, correct = ZERO, False

    if new_score < 0:
        raise ValidationFailed("Score cannot be negative.")
    if new_score > max_score:
        if not cap:
            raise ScoreExceedsMaximum(f"Score cannot exceed maximum score of {max_score}")
        new_score = max_score

    record.awarded_marks = new_score
    record.is_correct = correct if correct is not None else new_score == max_score
    if comment is not None:
        record.grader_comment = comment
    record.save(update_fields=['awarded_marks', 'is_correct', 'grader_comment'])
    return record


def correct_answer(session, answer_id, score=None, marking_status=None, is_correct=None, comment=None):
    """
    Manually grade one answer of a finished attempt, then recompute the
    attempt and its result.
    """
    _check_marking_status(marking_status)

    with transaction.atomic():
        session = ExamSession.objects.select_for_update().select_related('exam').get(pk=session.pk)
        if not session.is_finished:
            raise ValidationFailed("Only finished attempts can be corrected.")

        record = (
            StudentAnswer.objects.select_for_update()
            .select_related('question')
            .filter(id=answer_id, session=session)
            .first()
        )
        if record is None:
            raise NotFound("Answer not found for this session.")

        _mark(record, score=score, marking_status=marking_status, is_correct=is_correct, comment=comment)

        session.is_corrected = True
        session.save(update_fields=['is_corrected'])
        finalize_session(session)

    logger.info("Answer %s of session %s corrected to %s", record.id, session.id, record.awarded_marks)
    return record


def correct_answers_bulk(exam, updates):
    """
    Grade many answers of ``exam`` in one go.

    ``updates`` is a list of dicts with an ``id`` (the answer) and any of
    ``score``, ``marking_status``, ``is_correct`` and ``comment``. Scores above
    a question's maximum are capped. Either every update is applied or none
    is. Returns the number of answers updated.
    """
    for update in updates:
        _check_marking_status(update.get('marking_status'))

    with transaction.atomic():
        ids = [update['id'] for update in updates]
        records = {
            record.id: record
            for record in StudentAnswer.objects.select_for_update()
            .select_related('question', 'session')
            .filter(id__in=ids, session__exam=exam)
        }
        missing = [answer_id for answer_id in ids if answer_id not in records]
        if missing:
            raise NotFound(f"Answers not found for this exam: {missing}")

        touched = {}
        for update in updates:
            record = records[update['id']]
            if not record.session.is_finished:
                raise ValidationFailed("Only finished attempts can be corrected.")
            _mark(
                record,
                score=update.get('score'),
                marking_status=update.get('marking_status'),
                is_correct=update.get('is_correct'),
                comment=update.get('comment'),
                cap=True,
            )
            touched[record.session_id] = record.session

        for session in touched.values():
            session.is_corrected = True
            session.save(update_fields=['is_corrected'])
            finalize_session(session)

    logger.info("Bulk correction on exam %s updated %s answers in %s sessions", exam.id, len(updates), len(touched))
    return len(updates)


def answers_for_question(exam, snapshot_id):
    """Every student's answer to one snapshot question of ``exam``, for side-by-side grading."""
    snapshot = QuestionSnapshot.objects.filter(id=snapshot_id, exam=exam).first()
    if snapshot is None:
        raise NotFound("Question not found for this exam.")
    answers = (
        StudentAnswer.objects.filter(question=snapshot)
        .select_related('session__user', 'question')
        .order_by('session__user__email', 'session__attempt_number')
    )
    return snapshot, answers


def finish_correction(session):
    """Recompute a corrected attempt and push it into the result again."""
    with transaction.atomic():
        session = ExamSession.objects.select_for_update().select_related('exam').get(pk=session.pk)
        if not session.is_finished:
            raise ValidationFailed("Only finished attempts can be corrected.")
        session.is_corrected = True
        session.save(update_fields=['is_corrected'])
        result = finalize_session(session)
    logger.info("Correction finished for session %s: %s", session.id, session.total_score)
    return session, result


def recalculate_session(session):
    """Regrade every answer from stored data; finished attempts are finalised again."""
    with transaction.atomic():
        session = ExamSession.objects.select_for_update().select_related('exam').get(pk=session.pk)
        rescore_session(session)
        result = finalize_session(session) if session.is_finished else None
    return session, result


def pending_corrections(exam=None):
    queryset = ExamSession.objects.filter(is_finished=True, is_corrected=False).select_related('exam', 'user')
    if exam is not None:
        queryset = queryset.filter(exam=exam)
    return queryset
