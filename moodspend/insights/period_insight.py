"""
Period insight engine.

Aggregates a window of calendar days into a StressSpendInsight:

- average daily spend over the window and a spend-spike flag for one focus day
- Low / Mid / High stress buckets with average daily spend per bucket
- High-vs-Low spend ratio
- top spend categories per day-level top mood, and overall
- templated pattern / trigger sentences

Days with neither stress nor expense events join no bucket, so sparse
history does not drag the Low bucket toward zero. Expense-only days are
bucketed with an explicit neutral score (thresholds.finance_only_score, 50
by default), which lands them in Mid.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime

from moodspend.insights.aggregation import (
    category_totals,
    expense_events,
    group_by_date,
    round_half_up,
    top_label,
    total_amount,
)
from moodspend.insights.date_range import build_date_range, to_date
from moodspend.insights.thresholds import InsightThresholds, load_thresholds
from moodspend.models import (
    BucketSpend,
    CategoryAmount,
    FinanceEvent,
    MoodCategorySummary,
    StressBucket,
    StressEvent,
    StressSpendInsight,
)

logger = logging.getLogger(__name__)

PATTERN_COLLECTING = "최근 {period_days}일 동안 스트레스 구간별 지출 패턴을 더 쌓고 있어요."
PATTERN_HIGHER = (
    "최근 {period_days}일 동안 High 스트레스 날의 평균 지출이 Low보다 {ratio:.1f}배 높아요."
)
PATTERN_LOWER = (
    "최근 {period_days}일 동안 High 스트레스 날의 평균 지출이 Low의 {ratio:.1f}배로 더 낮아요."
)
TRIGGER_COLLECTING = "스트레스가 쌓이는 날의 소비 트리거를 찾는 중이에요."
TRIGGER_CATEGORY = "High 스트레스 날에 '{category}' 지출 비중이 커요."


@dataclass
class DayStats:
    """Same-day stress scores, moods and expense events for one window date."""

    date: str
    stress_scores: list[int] = field(default_factory=list)
    moods: list[str] = field(default_factory=list)
    expenses: list[FinanceEvent] = field(default_factory=list)

    @property
    def expense_total(self) -> int:
        return total_amount(self.expenses)

    def bucket_score(self, thresholds: InsightThresholds) -> float | None:
        """Average stress score, the neutral fallback for expense-only days, else None."""
        if self.stress_scores:
            return sum(self.stress_scores) / len(self.stress_scores)
        if self.expenses:
            return thresholds.finance_only_score
        return None


def stress_bucket(score: float, thresholds: InsightThresholds) -> StressBucket:
    if score >= thresholds.high_from:
        return StressBucket.HIGH
    if score >= thresholds.low_below:
        return StressBucket.MID
    return StressBucket.LOW


def collect_day_stats(
    dates: list[str],
    stress_events: Iterable[StressEvent],
    expenses: Iterable[FinanceEvent],
) -> list[DayStats]:
    stress_by_date = group_by_date(stress_events)
    expenses_by_date = group_by_date(expenses)
    return [
        DayStats(
            date=d,
            stress_scores=[e.score for e in stress_by_date.get(d, [])],
            moods=[e.mood for e in stress_by_date.get(d, [])],
            expenses=list(expenses_by_date.get(d, [])),
        )
        for d in dates
    ]


def summarize_bucket(bucket: StressBucket, days: list[DayStats]) -> BucketSpend:
    total = sum(day.expense_total for day in days)
    count = len(days)
    return BucketSpend(
        bucket=bucket,
        day_count=count,
        avg_daily_expense=round_half_up(total / count) if count else 0,
    )


def build_mood_category_top(days: list[DayStats], limit: int) -> list[MoodCategorySummary]:
    """Pool expenses of days sharing a top mood; rank moods by pooled spend."""
    pooled: dict[str, list[FinanceEvent]] = {}
    for day in days:
        mood = top_label(day.moods)
        if not mood:
            continue
        pooled.setdefault(mood, []).extend(day.expenses)

    summaries = [
        MoodCategorySummary(
            mood=mood,
            top_categories=category_totals(events)[:limit],
            total_expense=total_amount(events),
        )
        for mood, events in pooled.items()
    ]
    summaries.sort(key=lambda s: s.total_expense, reverse=True)
    return summaries


def build_pattern_summary(ratio: float | None, period_days: int) -> str:
    if not ratio:
        return PATTERN_COLLECTING.format(period_days=period_days)
    template = PATTERN_HIGHER if ratio >= 1 else PATTERN_LOWER
    return template.format(period_days=period_days, ratio=ratio)


def build_trigger_summary(high_categories: list[CategoryAmount], high_days: int) -> str:
    """Name the top category across High-bucket days, not the whole window."""
    if not high_categories or high_days == 0:
        return TRIGGER_COLLECTING
    return TRIGGER_CATEGORY.format(category=high_categories[0].category)


def build_stress_spend_insight(
    stress_events: Iterable[StressEvent],
    finance_events: Iterable[FinanceEvent],
    period_days: int,
    end_date: date | datetime | str | None = None,
    focus_date: date | datetime | str | None = None,
    thresholds: InsightThresholds | None = None,
) -> StressSpendInsight:
    """
    Build the stress-vs-spend report for the `period_days` window ending at
    `end_date` (today by default).

    `focus_date` selects the day reported as `daily_expense` and tested for a
    spend spike; it defaults to the last day of the window. The window average
    is taken over calendar days, so days without events count as zero spend.
    """
    thresholds = thresholds or load_thresholds()
    stress_events = list(stress_events)
    expenses = expense_events(finance_events)

    dates = build_date_range(period_days, end_date)
    days = collect_day_stats(dates, stress_events, expenses)
    window_expenses = [e for day in days for e in day.expenses]

    window_total = sum(day.expense_total for day in days)
    avg_expense = round_half_up(window_total / period_days) if period_days > 0 else 0

    if focus_date is not None:
        focus = to_date(focus_date).isoformat()
    elif dates:
        focus = dates[-1]
    else:
        focus = to_date(end_date).isoformat()
    daily_expense = total_amount(e for e in expenses if e.date == focus)
    spend_spike = avg_expense > 0 and daily_expense >= avg_expense * thresholds.spike_multiplier

    bucket_days: dict[StressBucket, list[DayStats]] = {b: [] for b in StressBucket}
    for day in days:
        score = day.bucket_score(thresholds)
        if score is not None:
            bucket_days[stress_bucket(score, thresholds)].append(day)

    low = summarize_bucket(StressBucket.LOW, bucket_days[StressBucket.LOW])
    mid = summarize_bucket(StressBucket.MID, bucket_days[StressBucket.MID])
    high = summarize_bucket(StressBucket.HIGH, bucket_days[StressBucket.HIGH])
    ratio_high_low = (
        high.avg_daily_expense / low.avg_daily_expense if low.avg_daily_expense > 0 else None
    )

    high_categories = category_totals(e for day in bucket_days[StressBucket.HIGH] for e in day.expenses)

    insight = StressSpendInsight(
        period_days=period_days,
        daily_expense=daily_expense,
        avg_expense=avg_expense,
        spend_spike=spend_spike,
        bucket_summaries=[low, mid, high],
        mood_category_top=build_mood_category_top(days, thresholds.mood_top_categories),
        top_spend_categories=category_totals(window_expenses)[: thresholds.top_spend_categories],
        high_stress_days=high.day_count,
        low_stress_days=low.day_count,
        ratio_high_low=ratio_high_low,
        pattern_summary=build_pattern_summary(ratio_high_low, period_days),
        trigger_summary=build_trigger_summary(high_categories, high.day_count),
    )
    logger.debug(
        "Built %d-day insight ending %s: avg=%d focus=%s spike=%s",
        period_days,
        dates[-1] if dates else focus,
        avg_expense,
        focus,
        spend_spike,
    )
    return insight
