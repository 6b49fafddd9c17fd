from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from exams.models import Exam, Question
from exams.question_types import QuestionType

User = get_user_model()

START = datetime(2026, 3, 2, 8, 0, tzinfo=dt_timezone.utc)


@pytest.fixture(autouse=True)
def _clear_cache():
    # PlatformSetting is cached; keep tests from seeing each other's rows
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def now():
    return START


@pytest.fixture
def make_user(db):
    counter = {'n': 0}

    def _make(role=User.Role.STUDENT, **kwargs):
        counter['n'] += 1
        n = counter['n']
        return User.objects.create_user(
            username=kwargs.pop('username', f"user{n}"),
            email=kwargs.pop('email', f"user{n}@school.test"),
            password='secret-pass-123',
            first_name=kwargs.pop('first_name', f"Student{n}"),
            last_name=kwargs.pop('last_name', "Test"),
            role=role,
            **kwargs,
        )
    return _make


@pytest.fixture
def student(make_user):
    return make_user()


@pytest.fixture
def teacher(make_user):
    return make_user(role=User.Role.TEACHER)


@pytest.fixture
def make_exam(db):
    def _make(**kwargs):
        fields = {
            'title': "Mathematics Midterm",
            'duration_minutes': 60,
            'pass_mark_percentage': 70,
            'is_published': True,
        }
        fields.update(kwargs)
        return Exam.objects.create(**fields)
    return _make


@pytest.fixture
def add_question(db):
    def _add(exam, question_type=QuestionType.MULTIPLE_CHOICE, answer_key=None, points=10, **kwargs):
        position = exam.questions.count() + 1
        return Question.objects.create(
            exam=exam,
            position=kwargs.pop('position', position),
            text=kwargs.pop('text', f"Question {position}"),
            question_type=question_type,
            answer_key={'answer': 'A'} if answer_key is None else answer_key,
            points=points,
            options=kwargs.pop('options', ['A', 'B', 'C', 'D']),
            **kwargs,
        )
    return _add


@pytest.fixture
def exam(make_exam, add_question):
    """Sixty minutes, one multiple choice question worth 10 with key "A"."""
    exam = make_exam()
    add_question(exam)
    return exam


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def later():
    def _later(**delta):
        return START + timedelta(**delta)
    return _later
