# assessments/models.py
from django.db import models
from django.conf import settings
from exams.models import Exam, QuestionSnapshot


class ExamSession(models.Model):
    """Tracks a student's specific attempt at an exam."""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='exam_sessions', on_delete=models.CASCADE)
    exam = models.ForeignKey(Exam, related_name='sessions', on_delete=models.CASCADE)
    attempt_number = models.PositiveIntegerField()

    start_time = models.DateTimeField()
    finish_time = models.DateTimeField(null=True, blank=True)  # When they submitted
    duration_taken = models.PositiveIntegerField(default=0)  # seconds
    extra_time = models.PositiveIntegerField(default=0)  # minutes granted by a proctor
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    total_score = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    total_max_score = models.DecimalField(max_digits=8, decimal_places=2, default=0)

    # Status for the grading workflow
    is_finished = models.BooleanField(default=False)
    is_corrected = models.BooleanField(default=False)

    class Meta:
        constraints = [
            # One open attempt per student and exam
            models.UniqueConstraint(
                fields=['user', 'exam'],
                condition=models.Q(is_finished=False),
                name='one_open_session_per_student_exam',
            ),
            models.UniqueConstraint(fields=['user', 'exam', 'attempt_number'], name='unique_attempt_number'),
        ]
        ordering = ['-start_time']

    def __str__(self):
        return f"{self.user} - {self.exam.title} (attempt {self.attempt_number})"

    @property
    def status(self):
        if self.is_corrected:
            return "corrected"
        if self.is_finished:
            return "finished"
        return "in_progress"


class StudentAnswer(models.Model):
    """One student's answer to one snapshot question inside an attempt."""
    session = models.ForeignKey(ExamSession, related_name='answers', on_delete=models.CASCADE)
    question = models.ForeignKey(QuestionSnapshot, related_name='answers', on_delete=models.PROTECT)
    question_number = models.PositiveIntegerField(default=1)

    answer = models.JSONField(null=True, blank=True)
    is_flagged = models.BooleanField(default=False)
    answered_at = models.DateTimeField(null=True, blank=True)

    # Grading; is_correct stays null for essays nobody has marked yet
    is_correct = models.BooleanField(null=True)
    awarded_marks = models.DecimalField(max_digits=7, decimal_places=2, default=0)
    grader_comment = models.TextField(blank=True)  # Feedback from the grader

    class Meta:
        unique_together = ('session', 'question')
        ordering = ['question_number']

    def __str__(self):
        return f"{self.session_id} #{self.question_number}"


class ExamResult(models.Model):
    """The one authoritative outcome per student and exam, used for ranking."""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='exam_results', on_delete=models.CASCADE)
    exam = models.ForeignKey(Exam, related_name='results', on_delete=models.CASCADE)
    session = models.ForeignKey(ExamSession, related_name='results', on_delete=models.CASCADE)

    total_score = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    score_percent = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    is_passed = models.BooleanField(default=False)
    result_type = models.CharField(max_length=20, choices=Exam.ResultPolicy.choices, default=Exam.ResultPolicy.OFFICIAL)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('user', 'exam')
        ordering = ['-total_score', '-score_percent']

    def __str__(self):
        return f"{self.user} - {self.exam.title}: {self.total_score}"
