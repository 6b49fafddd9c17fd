# assessments/exceptions.py
from rest_framework import status


class ExamEngineError(Exception):
    """Base class for every failure the exam engine reports to callers."""
    code = "error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "The request could not be completed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(ExamEngineError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class ExamUnavailable(NotFound):
    code = "exam_unavailable"
    default_message = "Exam not found or you do not have access to it."


class TimeWindowClosed(ExamEngineError):
    code = "time_window_closed"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "The exam is not open at this time."


class InvalidToken(ExamEngineError):
    code = "invalid_token"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid exam token."


class MaxAttemptsReached(ExamEngineError):
    code = "max_attempts_reached"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Maximum attempts reached."


class NoActiveSession(ExamEngineError):
    code = "no_active_session"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "No active session found."


class ScoreExceedsMaximum(ExamEngineError):
    code = "score_exceeds_maximum"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Score cannot exceed the question's maximum score."


class ValidationFailed(ExamEngineError):
    code = "validation_failed"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid payload."
