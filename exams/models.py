# exams/models.py
import hashlib
import json

from django.db import models

from .question_types import Difficulty, QuestionType


class Exam(models.Model):
    """Exam definition. Authored elsewhere; the exam engine only reads it."""

    class TimerType(models.TextChoices):
        STRICT = "strict", "Strict"  # clock keeps running while the student is away
        FLEXIBLE = "flexible", "Flexible"

    class ResultPolicy(models.TextChoices):
        OFFICIAL = "official", "Official Attempt"
        BEST_ATTEMPT = "best_attempt", "Best Attempt"
        LATEST_ATTEMPT = "latest_attempt", "Latest Attempt"

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    duration_minutes = models.PositiveIntegerField()
    pass_mark_percentage = models.PositiveIntegerField(default=50)

    # Optional hard window; null means open-ended on that side
    start_time = models.DateTimeField(null=True, blank=True)
    end_time = models.DateTimeField(null=True, blank=True)

    timer_type = models.CharField(max_length=20, choices=TimerType.choices, default=TimerType.STRICT)
    max_attempts = models.PositiveIntegerField(null=True, blank=True)  # null = unlimited
    is_randomized_question = models.BooleanField(default=False)
    result_policy = models.CharField(max_length=20, choices=ResultPolicy.choices, default=ResultPolicy.OFFICIAL)

    token = models.CharField(max_length=32, blank=True)
    is_token_visible = models.BooleanField(default=False)

    is_published = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.title

    @property
    def requires_token(self):
        return self.is_token_visible


class Question(models.Model):
    """A live question assigned to an exam. Editable until snapshotted."""

    exam = models.ForeignKey(Exam, related_name='questions', on_delete=models.CASCADE)
    position = models.PositiveIntegerField(default=0)

    text = models.TextField()
    question_type = models.CharField(max_length=30, choices=QuestionType.choices, default=QuestionType.MULTIPLE_CHOICE)
    difficulty = models.CharField(max_length=20, choices=Difficulty.choices, default=Difficulty.MEDIUM)
    points = models.PositiveIntegerField(default=1)

    options = models.JSONField(default=list, blank=True)
    answer_key = models.JSONField(default=dict, blank=True)
    hint = models.TextField(blank=True)

    class Meta:
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.text[:50]}..."


class QuestionSnapshot(models.Model):
    """
    Frozen copy of a question as it looked when an attempt started.

    Snapshots are keyed by the exam and a fingerprint of the copied fields, so
    attempts started against an unchanged question share one row while an
    edited question produces a new one. Rows are never updated.
    """

    exam = models.ForeignKey(Exam, related_name='snapshots', on_delete=models.CASCADE)
    source_question = models.ForeignKey(
        Question, related_name='snapshots', on_delete=models.SET_NULL, null=True, blank=True
    )
    fingerprint = models.CharField(max_length=64)

    question_number = models.PositiveIntegerField()
    content = models.TextField()
    options = models.JSONField(default=list, blank=True)
    answer_key = models.JSONField(default=dict, blank=True)
    score_value = models.PositiveIntegerField()
    question_type = models.CharField(max_length=30, choices=QuestionType.choices)
    difficulty = models.CharField(max_length=20, choices=Difficulty.choices)
    hint = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['exam', 'fingerprint'], name='unique_snapshot_per_exam_fingerprint'),
        ]

    def __str__(self):
        return f"Q{self.question_number} ({self.question_type}) of {self.exam_id}"

    @staticmethod
    def fields_from(question, number):
        return {
            'source_question_id': question.id,
            'question_number': number,
            'content': question.text,
            'options': question.options,
            'answer_key': question.answer_key,
            'score_value': question.points,
            'question_type': question.question_type,
            'difficulty': question.difficulty,
            'hint': question.hint,
        }

    @classmethod
    def capture(cls, question, number):
        """Return the snapshot matching ``question`` as it is right now, creating it if needed."""
        fields = cls.fields_from(question, number)
        digest = hashlib.sha256(
            json.dumps(fields, sort_keys=True, default=str).encode('utf-8')
        ).hexdigest()
        snapshot, _ = cls.objects.get_or_create(
            exam_id=question.exam_id,
            fingerprint=digest,
            defaults=fields,
        )
        return snapshot
