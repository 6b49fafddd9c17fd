from rest_framework import serializers
from .models import ExamSession, StudentAnswer, ExamResult
from .scoring import decode_answer
from .services import MarkingStatus
from exams.serializers import ExamSummarySerializer, QuestionSnapshotSerializer, GradingQuestionSnapshotSerializer


class ExamSessionSerializer(serializers.ModelSerializer):
    """Attempt header, without answers."""
    exam = ExamSummarySerializer(read_only=True)
    student = serializers.CharField(source='user.get_full_name', read_only=True)
    status = serializers.CharField(read_only=True)

    class Meta:
        model = ExamSession
        fields = [
            'id', 'exam', 'student', 'attempt_number', 'start_time', 'finish_time',
            'duration_taken', 'extra_time', 'total_score', 'total_max_score',
            'is_finished', 'is_corrected', 'status',
        ]
        read_only_fields = fields


class TakeAnswerSerializer(serializers.ModelSerializer):
    """What a student sees while sitting the exam: no keys, no marks."""
    question = QuestionSnapshotSerializer(read_only=True)

    class Meta:
        model = StudentAnswer
        fields = ['id', 'question_number', 'answer', 'is_flagged', 'answered_at', 'question']
        read_only_fields = fields


class GradingAnswerSerializer(serializers.ModelSerializer):
    question = GradingQuestionSnapshotSerializer(read_only=True)
    student = serializers.CharField(source='session.user.get_full_name', read_only=True)
    session_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = StudentAnswer
        fields = [
            'id', 'session_id', 'student', 'question_number', 'answer', 'is_flagged', 'answered_at',
            'is_correct', 'awarded_marks', 'grader_comment', 'question',
        ]
        read_only_fields = fields


class ExamResultSerializer(serializers.ModelSerializer):
    exam = ExamSummarySerializer(read_only=True)
    student = serializers.CharField(source='user.get_full_name', read_only=True)
    session_id = serializers.IntegerField(read_only=True)
    attempt_number = serializers.IntegerField(source='session.attempt_number', read_only=True)

    class Meta:
        model = ExamResult
        fields = [
            'id', 'exam', 'student', 'session_id', 'attempt_number', 'total_score',
            'score_percent', 'is_passed', 'result_type', 'updated_at',
        ]
        read_only_fields = fields

# --- Request payloads ---

class StartExamSerializer(serializers.Serializer):
    token = serializers.CharField(required=False, allow_blank=True)


class SaveAnswerSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()  # the StudentAnswer id
    answer = serializers.JSONField(required=False, allow_null=True)
    is_flagged = serializers.BooleanField(required=False, allow_null=True)

    def validate_answer(self, value):
        # Arrays sometimes arrive JSON-encoded a second time
        return decode_answer(value)


class CorrectionSerializer(serializers.Serializer):
    score = serializers.DecimalField(max_digits=7, decimal_places=2, required=False, allow_null=True)
    marking_status = serializers.ChoiceField(choices=MarkingStatus.choices, required=False, allow_null=True)
    is_correct = serializers.BooleanField(required=False, allow_null=True)
    comment = serializers.CharField(required=False, allow_blank=True)


class StudentActionSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    minutes = serializers.IntegerField(min_value=1, required=False)


class BulkCorrectionItemSerializer(CorrectionSerializer):
    id = serializers.IntegerField()  # the StudentAnswer id
    score = serializers.DecimalField(max_digits=7, decimal_places=2, min_value=0, required=False, allow_null=True)


class BulkCorrectionSerializer(serializers.Serializer):
    updates = BulkCorrectionItemSerializer(many=True, allow_empty=False)
