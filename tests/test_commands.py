from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from assessments import services
from assessments.models import ExamSession, StudentAnswer

pytestmark = pytest.mark.django_db


def test_finish_expired_sessions_command(make_user, exam):
    stale, fresh = make_user(), make_user()
    services.start_attempt(stale, exam, timezone.now() - timedelta(hours=2))
    services.start_attempt(fresh, exam, timezone.now())

    out = StringIO()
    call_command('finish_expired_sessions', stdout=out)

    assert "Finished 1 expired session(s)" in out.getvalue()
    assert ExamSession.objects.get(user=stale).is_finished
    assert not ExamSession.objects.get(user=fresh).is_finished


def test_finish_expired_sessions_unknown_exam():
    out = StringIO()
    call_command('finish_expired_sessions', exam=999, stdout=out)
    assert "not found" in out.getvalue()


def test_recalculate_scores_after_a_key_fix(student, exam, now):
    session, _ = services.start_attempt(student, exam, now)
    record = session.answers.get()
    services.save_answer(student, exam, record.id, 'B', now)
    services.finish_attempt(student, exam, now + timedelta(minutes=5))

    # the published key was wrong; fix the snapshot the attempt used
    snapshot = record.question
    snapshot.answer_key = {'answer': 'B'}
    snapshot.save(update_fields=['answer_key'])

    out = StringIO()
    call_command('recalculate_scores', exam=exam.id, stdout=out)

    assert "Recalculated 1 session(s)" in out.getvalue()
    assert StudentAnswer.objects.get(id=record.id).awarded_marks == 10
    session.refresh_from_db()
    assert session.total_score == 10
    assert session.results.get().score_percent == 100
