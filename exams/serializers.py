# exams/serializers.py
from rest_framework import serializers
from .models import Exam, QuestionSnapshot

# --- Exam Serializers ---

class ExamSummarySerializer(serializers.ModelSerializer):
    # Map frontend 'passing_score' to backend 'pass_mark_percentage'
    passing_score = serializers.IntegerField(source='pass_mark_percentage', read_only=True)
    requires_token = serializers.BooleanField(read_only=True)

    class Meta:
        model = Exam
        fields = [
            'id', 'title', 'description', 'duration_minutes', 'passing_score',
            'start_time', 'end_time', 'timer_type', 'max_attempts',
            'result_policy', 'requires_token',
        ]

# --- Snapshot Serializers ---

class QuestionSnapshotSerializer(serializers.ModelSerializer):
    """Student-facing view of a snapshot. Never carries the answer key."""
    question_type_label = serializers.CharField(source='get_question_type_display', read_only=True)

    class Meta:
        model = QuestionSnapshot
        fields = [
            'id', 'question_number', 'content', 'options', 'score_value',
            'question_type', 'question_type_label', 'difficulty', 'hint',
        ]


class GradingQuestionSnapshotSerializer(QuestionSnapshotSerializer):
    """Grader view, includes the answer key."""
    class Meta(QuestionSnapshotSerializer.Meta):
        fields = QuestionSnapshotSerializer.Meta.fields + ['answer_key']
