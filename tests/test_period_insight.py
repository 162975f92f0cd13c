"""
Tests for build_stress_spend_insight.

The main fixture is a 7-day window (2024-06-01..07):

    06-01  불안 80          배달 30000            High
    06-02  행복 20          카페 10000            Low
    06-03  불안 80, 피곤 60  배달 20000, 쇼핑 10000 High
    06-04  -               income only          no bucket
    06-05  -               카페 7000             Mid (expense-only)
    06-06  평온 30          -                    Low
    06-07  보통 50          편의점 14000           Mid

Window spend 91000, average 13000. A 999999 expense on 05-31 sits outside.
"""

import json

import pytest

from moodspend.insights.period_insight import (
    PATTERN_COLLECTING,
    TRIGGER_COLLECTING,
    build_pattern_summary,
    build_stress_spend_insight,
    build_trigger_summary,
)
from moodspend.insights.thresholds import InsightThresholds
from moodspend.models import CategoryAmount, StressBucket
from tests.fixtures import expense, income, stress

END = "2024-06-07"


@pytest.fixture
def week():
    stress_events = [
        stress("2024-06-01", "불안", 80),
        stress("2024-06-02", "행복", 20),
        stress("2024-06-03", "불안", 80),
        stress("2024-06-03", "피곤", 60),
        stress("2024-06-06", "평온", 30),
        stress("2024-06-07", "보통", 50),
    ]
    finance_events = [
        expense("2024-05-31", 999999, "여행"),
        expense("2024-06-01", 30000, "배달"),
        expense("2024-06-02", 10000, "카페"),
        expense("2024-06-03", 20000, "배달"),
        expense("2024-06-03", 10000, "쇼핑"),
        income("2024-06-04", 500000),
        expense("2024-06-05", 7000, "카페"),
        expense("2024-06-07", 14000, "편의점"),
    ]
    return stress_events, finance_events


def build(events, **kwargs):
    stress_events, finance_events = events
    kwargs.setdefault("end_date", END)
    return build_stress_spend_insight(stress_events, finance_events, 7, **kwargs)


class TestSpendBaseline:
    def test_average_over_calendar_days(self, week):
        insight = build(week)
        assert insight.period_days == 7
        assert insight.avg_expense == 13000

    def test_focus_defaults_to_last_day(self, week):
        insight = build(week)
        assert insight.daily_expense == 14000
        assert insight.spend_spike is False

    def test_focus_day_spike(self, week):
        insight = build(week, focus_date="2024-06-01")
        assert insight.daily_expense == 30000
        assert insight.spend_spike is True

    def test_focus_outside_window_uses_all_events(self, week):
        insight = build(week, focus_date="2024-05-31")
        assert insight.daily_expense == 999999
        assert insight.avg_expense == 13000

    def test_spike_boundary_is_inclusive(self):
        insight = build_stress_spend_insight(
            [], [expense("2024-06-06", 5000), expense("2024-06-07", 15000)], 2, end_date=END
        )
        assert insight.avg_expense == 10000
        assert insight.spend_spike is True

    def test_just_below_spike_boundary(self):
        insight = build_stress_spend_insight(
            [], [expense("2024-06-06", 5000), expense("2024-06-07", 14999)], 2, end_date=END
        )
        # 19999 / 2 rounds half up to 10000
        assert insight.avg_expense == 10000
        assert insight.spend_spike is False

    def test_no_spike_without_spend(self):
        insight = build_stress_spend_insight([stress(END, "불안", 80)], [], 7, end_date=END)
        assert insight.avg_expense == 0
        assert insight.daily_expense == 0
        assert insight.spend_spike is False


class TestBuckets:
    def test_bucket_averages(self, week):
        insight = build(week)
        assert [b.bucket for b in insight.bucket_summaries] == [
            StressBucket.LOW,
            StressBucket.MID,
            StressBucket.HIGH,
        ]
        assert insight.bucket(StressBucket.HIGH).day_count == 2
        assert insight.bucket(StressBucket.HIGH).avg_daily_expense == 30000
        assert insight.bucket(StressBucket.LOW).day_count == 2
        assert insight.bucket(StressBucket.LOW).avg_daily_expense == 5000
        assert insight.bucket(StressBucket.MID).day_count == 2
        assert insight.bucket(StressBucket.MID).avg_daily_expense == 10500

    def test_day_counts(self, week):
        insight = build(week)
        assert insight.high_stress_days == 2
        assert insight.low_stress_days == 2
        # 06-04 has only income and joins no bucket
        assert sum(b.day_count for b in insight.bucket_summaries) == 6

    def test_ratio_high_low(self, week):
        assert build(week).ratio_high_low == pytest.approx(6.0)

    def test_expense_only_day_follows_configured_score(self, week):
        insight = build(week, thresholds=InsightThresholds(finance_only_score=20.0))
        assert insight.bucket(StressBucket.LOW).day_count == 3
        assert insight.bucket(StressBucket.MID).day_count == 1

    def test_bucket_boundaries(self):
        stress_events = [
            stress("2024-06-05", score=39),
            stress("2024-06-06", score=40),
            stress("2024-06-07", score=70),
        ]
        insight = build_stress_spend_insight(stress_events, [], 3, end_date=END)
        assert insight.bucket(StressBucket.LOW).day_count == 1
        assert insight.bucket(StressBucket.MID).day_count == 1
        assert insight.bucket(StressBucket.HIGH).day_count == 1

    def test_ratio_none_when_low_days_spend_nothing(self):
        stress_events = [stress("2024-06-06", "평온", 20), stress("2024-06-07", "불안", 80)]
        insight = build_stress_spend_insight(
            stress_events, [expense("2024-06-07", 8000)], 7, end_date=END
        )
        assert insight.low_stress_days == 1
        assert insight.ratio_high_low is None
        assert insight.pattern_summary == PATTERN_COLLECTING.format(period_days=7)

    def test_ratio_none_without_low_days(self):
        insight = build_stress_spend_insight(
            [stress(END, "불안", 80)], [expense(END, 8000)], 7, end_date=END
        )
        assert insight.low_stress_days == 0
        assert insight.ratio_high_low is None


class TestCategories:
    def test_mood_category_top(self, week):
        insight = build(week)
        assert [m.mood for m in insight.mood_category_top] == ["불안", "보통", "행복", "평온"]

        anxious = insight.mood_category_top[0]
        assert anxious.total_expense == 60000
        assert anxious.top_categories == [
            CategoryAmount("배달", 50000),
            CategoryAmount("쇼핑", 10000),
        ]
        assert insight.mood_category_top[-1].total_expense == 0

    def test_mood_categories_capped(self):
        finance_events = [expense(END, 1000 * (i + 1), f"c{i}") for i in range(5)]
        insight = build_stress_spend_insight([stress(END, "불안", 80)], finance_events, 1, end_date=END)
        assert [c.category for c in insight.mood_category_top[0].top_categories] == ["c4", "c3", "c2"]

    def test_top_spend_categories_window_only(self, week):
        insight = build(week)
        assert insight.top_spend_categories == [
            CategoryAmount("배달", 50000),
            CategoryAmount("카페", 17000),
            CategoryAmount("편의점", 14000),
            CategoryAmount("쇼핑", 10000),
        ]

    def test_top_spend_categories_capped_at_five(self):
        finance_events = [expense(END, 100 * (i + 1), f"c{i}") for i in range(8)]
        insight = build_stress_spend_insight([], finance_events, 1, end_date=END)
        assert [c.category for c in insight.top_spend_categories] == ["c7", "c6", "c5", "c4", "c3"]


class TestTemplates:
    def test_pattern_and_trigger(self, week):
        insight = build(week)
        assert insight.pattern_summary == "최근 7일 동안 High 스트레스 날의 평균 지출이 Low보다 6.0배 높아요."
        assert insight.trigger_summary == "High 스트레스 날에 '배달' 지출 비중이 커요."

    def test_pattern_when_high_spends_less(self):
        assert "더 낮아요" in build_pattern_summary(0.5, 14)

    def test_pattern_collecting(self):
        assert build_pattern_summary(None, 14) == PATTERN_COLLECTING.format(period_days=14)

    def test_trigger_collecting(self):
        assert build_trigger_summary([], 0) == TRIGGER_COLLECTING
        assert build_trigger_summary([CategoryAmount("배달", 1)], 0) == TRIGGER_COLLECTING


class TestEmptyHistory:
    def test_no_events(self):
        insight = build_stress_spend_insight([], [], 14, end_date=END)
        assert insight.avg_expense == 0
        assert insight.spend_spike is False
        assert all(b.day_count == 0 and b.avg_daily_expense == 0 for b in insight.bucket_summaries)
        assert insight.mood_category_top == []
        assert insight.top_spend_categories == []
        assert insight.ratio_high_low is None
        assert insight.pattern_summary == PATTERN_COLLECTING.format(period_days=14)
        assert insight.trigger_summary == TRIGGER_COLLECTING
        assert insight.has_data is False

    def test_unlabelled_mid_day_counts_as_data(self):
        insight = build_stress_spend_insight([stress(END, "", 55)], [], 7, end_date=END)
        assert insight.bucket(StressBucket.MID).day_count == 1
        assert insight.mood_category_top == []
        assert insight.avg_expense == 0
        assert insight.has_data is True

    def test_zero_day_period(self, week):
        insight = build_stress_spend_insight(*week, 0, end_date=END)
        assert insight.avg_expense == 0
        assert insight.spend_spike is False
        assert insight.daily_expense == 14000

    def test_serializable(self, week):
        data = build(week).to_dict()
        decoded = json.loads(json.dumps(data, ensure_ascii=False))
        assert decoded["ratio_high_low"] == 6.0
        assert decoded["bucket_summaries"][2] == {
            "bucket": "High",
            "day_count": 2,
            "avg_daily_expense": 30000,
        }
