import logging

from rest_framework import generics, permissions, status, views
from rest_framework.response import Response
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from django.utils import timezone

from cores.models import PlatformSetting
from exams.models import Exam
from exams.serializers import GradingQuestionSnapshotSerializer
from . import services
from .access import has_exam_access
from .exceptions import ExamEngineError
from .leaderboard import leaderboard, rank, rank_in_exam
from .models import ExamResult, ExamSession
from .permissions import IsGraderOrAdmin
from .results import list_results
from .serializers import (
    BulkCorrectionSerializer,
    CorrectionSerializer,
    ExamResultSerializer,
    ExamSessionSerializer,
    GradingAnswerSerializer,
    SaveAnswerSerializer,
    StartExamSerializer,
    StudentActionSerializer,
    TakeAnswerSerializer,
)
from .timer import remaining_seconds

logger = logging.getLogger(__name__)

User = get_user_model()


def error_response(exc):
    return Response({"error": exc.message, "code": exc.code}, status=exc.status_code)


# --- STUDENT VIEWS ---

class StartExamView(views.APIView):
    """
    Student starts an exam, or resumes the attempt that is still open.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, exam_id):
        exam = get_object_or_404(Exam, id=exam_id)
        serializer = StartExamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            session, created = services.start_attempt(
                request.user,
                exam,
                now=timezone.now(),
                token=serializer.validated_data.get('token'),
                has_access=has_exam_access(request.user, exam),
                ip_address=request.META.get('REMOTE_ADDR'),
            )
        except ExamEngineError as e:
            return error_response(e)

        data = {
            "exam_session_id": session.id,
            "session": ExamSessionSerializer(session).data,
            "message": "Exam started successfully." if created else "Resuming existing session.",
        }
        return Response(data, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


class TakeExamView(views.APIView):
    """Open attempt with its questions (no answer keys) and the time left."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, exam_id):
        exam = get_object_or_404(Exam, id=exam_id)
        session = services.get_open_session(request.user, exam)
        if not session:
            return Response(
                {"error": "No active session found. Please start the exam first.", "code": "no_active_session"},
                status=status.HTTP_403_FORBIDDEN,
            )

        answers = session.answers.select_related('question').order_by('question_number')
        return Response({
            "session": ExamSessionSerializer(session).data,
            "questions": TakeAnswerSerializer(answers, many=True).data,
            "remaining_seconds": remaining_seconds(session, exam, timezone.now()),
        })


class SaveAnswerView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, exam_id):
        exam = get_object_or_404(Exam, id=exam_id)
        serializer = SaveAnswerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = serializer.validated_data

        try:
            record = services.save_answer(
                request.user,
                exam,
                answer_id=payload['question_id'],
                answer=payload.get('answer'),
                now=timezone.now(),
                is_flagged=payload.get('is_flagged'),
            )
        except ExamEngineError as e:
            return error_response(e)

        return Response({
            "question_id": record.id,
            "is_answered": record.answer is not None,
            "detail": TakeAnswerSerializer(record).data,
        })


class RemainingTimeView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, exam_id):
        exam = get_object_or_404(Exam, id=exam_id)
        try:
            seconds = services.time_left(request.user, exam, timezone.now())
        except ExamEngineError as e:
            return error_response(e)
        return Response({"remaining_seconds": seconds})


class FinishExamView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, exam_id):
        exam = get_object_or_404(Exam, id=exam_id)
        try:
            session, result = services.finish_attempt(request.user, exam, timezone.now())
        except ExamEngineError as e:
            return error_response(e)

        return Response({
            "exam_session_id": session.id,
            "session": ExamSessionSerializer(session).data,
            "total_score": session.total_score,
            "finished_at": session.finish_time,
            "result": ExamResultSerializer(result).data,
        })


class StudentResultListView(generics.ListAPIView):
    """Results of the logged-in student."""
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = ExamResultSerializer

    def get_queryset(self):
        return list_results(self.request.user)


class LeaderboardView(views.APIView):
    """Top results, optionally for one exam, plus where the caller stands."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        exam = None
        exam_id = request.query_params.get('exam_id')
        if exam_id:
            exam = get_object_or_404(Exam, id=exam_id)

        try:
            limit = int(request.query_params.get('limit', PlatformSetting.load().leaderboard_limit))
        except ValueError:
            return Response({"error": "limit must be a number", "code": "validation_failed"},
                            status=status.HTTP_400_BAD_REQUEST)

        rows = list(leaderboard(exam=exam, limit=max(1, limit)))
        data = []
        for row in rows:
            item = ExamResultSerializer(row).data
            item['rank'] = rank(rows, row)
            data.append(item)

        my_rank = None
        if exam is not None:
            mine = ExamResult.objects.filter(exam=exam, user=request.user).first()
            if mine:
                my_rank = rank_in_exam(mine)

        return Response({"results": data, "my_rank": my_rank})


# --- GRADING VIEWS ---

class PendingGradingListView(generics.ListAPIView):
    """Finished attempts nobody has corrected yet."""
    permission_classes = [IsGraderOrAdmin]
    serializer_class = ExamSessionSerializer

    def get_queryset(self):
        exam_id = self.request.query_params.get('exam_id')
        exam = get_object_or_404(Exam, id=exam_id) if exam_id else None
        return services.pending_corrections(exam=exam)


class SessionCorrectionDetailView(views.APIView):
    """All answers of one attempt, with answer keys, for correction."""
    permission_classes = [IsGraderOrAdmin]

    def get(self, request, session_id):
        session = get_object_or_404(ExamSession.objects.select_related('exam', 'user'), id=session_id)
        answers = session.answers.select_related('question').order_by('question_number')
        return Response({
            "session": ExamSessionSerializer(session).data,
            "answers": GradingAnswerSerializer(answers, many=True).data,
        })


class CorrectAnswerView(views.APIView):
    permission_classes = [IsGraderOrAdmin]

    def patch(self, request, session_id, answer_id):
        session = get_object_or_404(ExamSession, id=session_id)
        serializer = CorrectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = serializer.validated_data

        try:
            record = services.correct_answer(
                session,
                answer_id,
                score=payload.get('score'),
                marking_status=payload.get('marking_status'),
                is_correct=payload.get('is_correct'),
                comment=payload.get('comment'),
            )
        except ExamEngineError as e:
            return error_response(e)

        logger.info("User %s corrected answer %s", request.user.pk, record.id)
        return Response(GradingAnswerSerializer(record).data)


class QuestionAnswersView(views.APIView):
    """Every student's answer to one question of an exam, with the answer key."""
    permission_classes = [IsGraderOrAdmin]

    def get(self, request, exam_id, snapshot_id):
        exam = get_object_or_404(Exam, id=exam_id)
        try:
            snapshot, answers = services.answers_for_question(exam, snapshot_id)
        except ExamEngineError as e:
            return error_response(e)

        return Response({
            "question": GradingQuestionSnapshotSerializer(snapshot).data,
            "answers": GradingAnswerSerializer(answers, many=True).data,
        })


class BulkCorrectionView(views.APIView):
    permission_classes = [IsGraderOrAdmin]

    def post(self, request, exam_id):
        exam = get_object_or_404(Exam, id=exam_id)
        serializer = BulkCorrectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            updated = services.correct_answers_bulk(exam, serializer.validated_data["updates"])
        except ExamEngineError as e:
            return error_response(e)

        logger.info("User %s bulk corrected %s answers on exam %s", request.user.pk, updated, exam.id)
        return Response({"updated": updated, "message": f"Successfully updated {updated} answers."})


class FinishCorrectionView(views.APIView):
    permission_classes = [IsGraderOrAdmin]

    def post(self, request, session_id):
        session = get_object_or_404(ExamSession, id=session_id)
        try:
            session, result = services.finish_correction(session)
        except ExamEngineError as e:
            return error_response(e)

        return Response({
            "status": "Correction finished and scores updated.",
            "session": ExamSessionSerializer(session).data,
            "result": ExamResultSerializer(result).data,
        })


class RecalculateSessionView(views.APIView):
    permission_classes = [IsGraderOrAdmin]

    def post(self, request, session_id):
        session = get_object_or_404(ExamSession, id=session_id)
        session, result = services.recalculate_session(session)
        return Response({
            "session": ExamSessionSerializer(session).data,
            "result": ExamResultSerializer(result).data if result else None,
        })


# --- PROCTOR VIEWS ---

class AddTimeView(views.APIView):
    permission_classes = [IsGraderOrAdmin]

    def post(self, request, exam_id):
        exam = get_object_or_404(Exam, id=exam_id)
        serializer = StudentActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        student = get_object_or_404(User, id=serializer.validated_data['user_id'])

        try:
            session = services.add_extra_time(exam, student, serializer.validated_data.get('minutes'))
        except ExamEngineError as e:
            return error_response(e)

        return Response({"status": "Extra time added successfully", "extra_time": session.extra_time})


class ForceFinishView(views.APIView):
    permission_classes = [IsGraderOrAdmin]

    def post(self, request, exam_id):
        exam = get_object_or_404(Exam, id=exam_id)
        serializer = StudentActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        student = get_object_or_404(User, id=serializer.validated_data['user_id'])

        try:
            session, result = services.force_finish(exam, student, timezone.now())
        except ExamEngineError as e:
            return error_response(e)

        return Response({
            "status": "Exam force finished successfully",
            "session": ExamSessionSerializer(session).data,
            "result": ExamResultSerializer(result).data,
        })
