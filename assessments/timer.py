# assessments/timer.py
from datetime import timedelta


def effective_deadline(session, exam):
    """
    The moment an attempt runs out of time.

    That is the attempt's own duration (plus any extra minutes a proctor
    granted) or the exam's hard end time, whichever comes first.
    """
    by_duration = session.start_time + timedelta(minutes=exam.duration_minutes + (session.extra_time or 0))
    if exam.end_time and exam.end_time < by_duration:
        return exam.end_time
    return by_duration


def remaining_seconds(session, exam, now):
    """Whole seconds left on the attempt at ``now``; never negative."""
    deadline = effective_deadline(session, exam)
    if now >= deadline:
        return 0
    return int((deadline - now).total_seconds())


def is_expired(session, exam, now):
    return remaining_seconds(session, exam, now) == 0
