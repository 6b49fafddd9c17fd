# assessments/leaderboard.py
from django.db.models import Q

from .models import ExamResult


def _sort_key(result):
    return (-result.total_score, -result.score_percent, getattr(result, 'pk', None) or 0)


def order_results(results):
    """Highest total first, then highest percent; earlier rows win remaining ties."""
    return sorted(results, key=_sort_key)


def rank(results, target):
    """
    1 + the number of results strictly ahead of ``target``.

    Equal results share a rank, so ranks can skip (1, 2, 2, 4).
    """
    ahead = sum(
        1 for r in results
        if r.total_score > target.total_score
        or (r.total_score == target.total_score and r.score_percent > target.score_percent)
    )
    return ahead + 1


def leaderboard(exam=None, limit=10):
    queryset = ExamResult.objects.select_related('user', 'exam')
    if exam is not None:
        queryset = queryset.filter(exam=exam)
    return queryset.order_by('-total_score', '-score_percent', 'id')[:limit]


def rank_in_exam(result):
    """Same ranking as ``rank`` but counted by the database."""
    ahead = ExamResult.objects.filter(exam_id=result.exam_id).filter(
        Q(total_score__gt=result.total_score)
        | Q(total_score=result.total_score, score_percent__gt=result.score_percent)
    ).count()
    return ahead + 1
