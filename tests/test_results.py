from decimal import Decimal
from types import SimpleNamespace

from assessments.results import compute_figures


def attempt(achievable, pass_mark=70):
    return SimpleNamespace(total_max_score=Decimal(achievable), exam=SimpleNamespace(pass_mark_percentage=pass_mark))


def test_percent_is_rounded_to_cents():
    figures = compute_figures(attempt(3), Decimal('2'))
    assert figures.score_percent == Decimal('66.67')


def test_pass_mark_is_checked_before_rounding():
    # 139990 / 200000 = 69.995%, shown as 70.00 but still below the mark
    figures = compute_figures(attempt(200000), Decimal('139990'))
    assert figures.score_percent == Decimal('70.00')
    assert figures.is_passed is False


def test_exactly_on_the_mark_passes():
    assert compute_figures(attempt(20), Decimal('14')).is_passed is True


def test_nothing_achievable():
    figures = compute_figures(attempt(0), Decimal('0'))
    assert figures.score_percent == 0
    assert figures.is_passed is False
