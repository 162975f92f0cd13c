"""
Daily summary calculator.

Maps (owner, date, all stress events, all finance events) to one
DailySummary. Filtering by date happens here, not in the caller.
"""

from collections.abc import Iterable

from moodspend.insights.aggregation import (
    category_totals,
    round_half_up,
    top_label,
    total_amount,
)
from moodspend.models import DailySummary, FinanceEvent, StressEvent


def compute_daily_summary(
    owner_id: str,
    date: str,
    stress_events: Iterable[StressEvent],
    finance_events: Iterable[FinanceEvent],
) -> DailySummary:
    """
    Roll up one day's events.

    A day without stress events reports avg = max = 0 and no top labels;
    `stress_count` tells that apart from a genuinely calm day.
    """
    day_stress = [e for e in stress_events if e.date == date]
    day_expenses = [e for e in finance_events if e.date == date and e.is_expense]

    stress_count = len(day_stress)
    if stress_count:
        scores = [e.score for e in day_stress]
        stress_avg = round_half_up(sum(scores) / stress_count)
        stress_max = max(scores)
    else:
        stress_avg = 0
        stress_max = 0

    return DailySummary(
        owner_id=owner_id,
        date=date,
        stress_score_avg=stress_avg,
        stress_score_max=stress_max,
        stress_count=stress_count,
        top_mood=top_label(e.mood for e in day_stress),
        top_context=top_label(e.context for e in day_stress),
        daily_expense=total_amount(day_expenses),
        top_categories=category_totals(day_expenses),
    )
