from django.urls import path
from .views import (
    StartExamView,
    TakeExamView,
    SaveAnswerView,
    RemainingTimeView,
    FinishExamView,
    StudentResultListView,
    LeaderboardView,
    PendingGradingListView,
    SessionCorrectionDetailView,
    CorrectAnswerView,
    FinishCorrectionView,
    QuestionAnswersView,
    BulkCorrectionView,
    RecalculateSessionView,
    AddTimeView,
    ForceFinishView,
)

urlpatterns = [
    # --- Student: taking an exam ---
    path('exams/<int:exam_id>/start/', StartExamView.as_view(), name='exam-start'),
    path('exams/<int:exam_id>/take/', TakeExamView.as_view(), name='exam-take'),
    path('exams/<int:exam_id>/answer/', SaveAnswerView.as_view(), name='exam-answer'),
    path('exams/<int:exam_id>/remaining/', RemainingTimeView.as_view(), name='exam-remaining'),
    path('exams/<int:exam_id>/finish/', FinishExamView.as_view(), name='exam-finish'),

    # --- Student: results ---
    path('results/', StudentResultListView.as_view(), name='result-list'),
    path('results/leaderboard/', LeaderboardView.as_view(), name='result-leaderboard'),

    # --- Grading ---
    path('grading/pending/', PendingGradingListView.as_view(), name='grading-pending'),
    path('grading/sessions/<int:session_id>/', SessionCorrectionDetailView.as_view(), name='grading-session'),
    path('grading/sessions/<int:session_id>/answers/<int:answer_id>/', CorrectAnswerView.as_view(), name='grading-answer'),
    path('grading/sessions/<int:session_id>/finish/', FinishCorrectionView.as_view(), name='grading-finish'),
    path('grading/sessions/<int:session_id>/recalculate/', RecalculateSessionView.as_view(), name='grading-recalculate'),
    path('grading/exams/<int:exam_id>/questions/<int:snapshot_id>/answers/', QuestionAnswersView.as_view(), name='grading-question-answers'),
    path('grading/exams/<int:exam_id>/bulk/', BulkCorrectionView.as_view(), name='grading-bulk'),

    # --- Proctoring ---
    path('exams/<int:exam_id>/add-time/', AddTimeView.as_view(), name='exam-add-time'),
    path('exams/<int:exam_id>/force-finish/', ForceFinishView.as_view(), name='exam-force-finish'),
]
