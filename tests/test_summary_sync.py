"""
Tests for daily summary sync.
"""

import sqlite3
from collections import Counter

import pytest

from moodspend.errors import StoreError, SummarySyncError
from moodspend.insights.date_range import build_date_range
from moodspend.store import DAILY_SCOPE, SQLiteStore
from moodspend.sync import (
    load_stress_spend_insight,
    sync_daily_summaries_for_range,
    update_daily_summary_for_date,
)
from tests.fixtures import OWNER, expense, income, seed, stress

DAY = "2024-06-10"

COACHING = {
    "summary": "오늘은 불안이 높았어요.",
    "pattern": "불안한 날 배달 지출이 늘어요.",
    "recommendations": [
        {"title": "심호흡", "duration": "3분", "type": "Quick", "steps": [], "reason": "불안↑"}
    ],
    "model": "gpt-4o-mini",
    "generated_at": "2024-06-10T12:00:00+00:00",
}


class CountingStore:
    """Wraps a store and counts method calls."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = Counter()

    def __getattr__(self, name):
        attr = getattr(self.inner, name)
        if not callable(attr):
            return attr

        def wrapper(*args, **kwargs):
            self.calls[name] += 1
            return attr(*args, **kwargs)

        return wrapper


class FailingStore(SQLiteStore):
    """Fails the Nth summary upsert (1-based)."""

    def __init__(self, db_path, fail_on: int):
        super().__init__(db_path)
        self.fail_on = fail_on
        self.upserts = 0

    def upsert_summary(self, owner_id, key, fields, scope=DAILY_SCOPE):
        self.upserts += 1
        if self.upserts == self.fail_on:
            raise StoreError("disk full")
        return super().upsert_summary(owner_id, key, fields, scope=scope)


def summary_rows(db_path):
    conn = sqlite3.connect(str(db_path))
    try:
        return conn.execute(
            "SELECT owner_id, scope, key, doc_json, updated_at FROM summaries ORDER BY key"
        ).fetchall()
    finally:
        conn.close()


@pytest.fixture
def seeded(store):
    seed(
        store,
        [
            stress(DAY, "불안", 80),
            stress(DAY, "불안", 60),
            expense(DAY, 20000, "배달"),
            stress("2024-06-11", "행복", 20),
            income("2024-06-11", 100000),
        ],
    )
    return store


class TestSyncRange:
    def test_writes_one_document_per_date(self, seeded):
        dates = build_date_range(3, "2024-06-11")
        summaries = sync_daily_summaries_for_range(seeded, OWNER, dates)

        assert [s.date for s in summaries] == dates
        for summary in summaries:
            assert seeded.read_summary(OWNER, summary.date) == summary.to_fields()

        anxious = seeded.read_summary(OWNER, DAY)
        assert anxious["stress_score_avg"] == 70
        assert anxious["top_categories"] == [{"category": "배달", "amount": 20000}]

    def test_empty_dates_still_written(self, seeded):
        [summary] = sync_daily_summaries_for_range(seeded, OWNER, ["2024-06-09"])
        assert summary.has_data is False
        assert seeded.read_summary(OWNER, "2024-06-09")["stress_count"] == 0

    def test_events_loaded_once(self, seeded):
        counting = CountingStore(seeded)
        sync_daily_summaries_for_range(counting, OWNER, build_date_range(14, DAY))

        assert counting.calls["fetch_all_stress_events"] == 1
        assert counting.calls["fetch_all_finance_events"] == 1
        assert counting.calls["upsert_summary"] == 14

    def test_rerun_is_byte_identical(self, seeded, db_path):
        dates = build_date_range(7, "2024-06-11")
        sync_daily_summaries_for_range(seeded, OWNER, dates)
        first = summary_rows(db_path)

        sync_daily_summaries_for_range(seeded, OWNER, dates)
        assert summary_rows(db_path) == first

    def test_recomputes_after_event_change(self, seeded):
        sync_daily_summaries_for_range(seeded, OWNER, [DAY])
        event = seeded.fetch_all_finance_events(OWNER)[0]
        seeded.delete_finance_event(OWNER, event.id)

        [summary] = sync_daily_summaries_for_range(seeded, OWNER, [DAY])
        assert summary.daily_expense == 0
        assert seeded.read_summary(OWNER, DAY)["top_categories"] == []

    def test_other_dates_untouched(self, seeded):
        seeded.upsert_summary(OWNER, "2024-01-01", {"daily_expense": 999})
        sync_daily_summaries_for_range(seeded, OWNER, [DAY])
        assert seeded.read_summary(OWNER, "2024-01-01") == {"daily_expense": 999}

    def test_owners_isolated(self, seeded):
        seed(seeded, [expense(DAY, 777, owner="user-2")])
        [summary] = sync_daily_summaries_for_range(seeded, OWNER, [DAY])
        assert summary.daily_expense == 20000
        assert seeded.read_summary("user-2", DAY) is None

    def test_no_dates(self, seeded):
        assert sync_daily_summaries_for_range(seeded, OWNER, []) == []


class TestCachedCoaching:
    def test_coaching_survives_resync(self, seeded):
        seeded.upsert_summary(OWNER, DAY, {"ai": COACHING, "ai_version": 1})

        [summary] = sync_daily_summaries_for_range(seeded, OWNER, [DAY])

        assert summary.ai is not None
        assert summary.ai.summary == COACHING["summary"]
        assert summary.ai_version == 1
        doc = seeded.read_summary(OWNER, DAY)
        assert doc["ai"] == COACHING
        assert doc["stress_score_avg"] == 70

    def test_stale_version_not_returned_but_kept(self, seeded):
        seeded.upsert_summary(OWNER, DAY, {"ai": COACHING, "ai_version": 0})

        [summary] = sync_daily_summaries_for_range(seeded, OWNER, [DAY])

        assert summary.ai is None
        assert summary.ai_version == 0
        assert seeded.read_summary(OWNER, DAY)["ai"] == COACHING

    def test_invalid_cached_payload_not_returned(self, seeded):
        seeded.upsert_summary(OWNER, DAY, {"ai": {"summary": "only"}, "ai_version": 1})
        [summary] = sync_daily_summaries_for_range(seeded, OWNER, [DAY])
        assert summary.ai is None


class TestFailures:
    def test_store_error_wrapped(self, db_path):
        store = FailingStore(db_path, fail_on=1)
        with pytest.raises(SummarySyncError) as exc_info:
            sync_daily_summaries_for_range(store, OWNER, [DAY])
        assert isinstance(exc_info.value, StoreError)
        assert isinstance(exc_info.value.__cause__, StoreError)

    def test_partial_failure_is_rerunnable(self, db_path):
        seed(SQLiteStore(db_path), [expense(DAY, 1000), expense("2024-06-11", 2000)])
        failing = FailingStore(db_path, fail_on=2)

        with pytest.raises(SummarySyncError):
            sync_daily_summaries_for_range(failing, OWNER, [DAY, "2024-06-11"])
        assert failing.read_summary(OWNER, DAY)["daily_expense"] == 1000
        assert failing.read_summary(OWNER, "2024-06-11") is None

        summaries = sync_daily_summaries_for_range(SQLiteStore(db_path), OWNER, [DAY, "2024-06-11"])
        assert [s.daily_expense for s in summaries] == [1000, 2000]


class TestSingleDate:
    def test_update_single_date(self, seeded):
        summary = update_daily_summary_for_date(seeded, OWNER, DAY)
        assert summary.stress_count == 2
        assert seeded.read_summary(OWNER, DAY) == summary.to_fields()

    def test_malformed_date_rejected(self, seeded):
        with pytest.raises(ValueError):
            update_daily_summary_for_date(seeded, OWNER, "not-a-date")
        assert seeded.read_summary(OWNER, "not-a-date") is None

    def test_datetime_string_normalized(self, seeded):
        summary = update_daily_summary_for_date(seeded, OWNER, f"{DAY}T08:30:00")
        assert summary.date == DAY
        assert seeded.read_summary(OWNER, DAY)["stress_count"] == 2


class TestLoadInsight:
    def test_builds_from_store(self, seeded):
        insight = load_stress_spend_insight(seeded, OWNER, 7, end_date="2024-06-11")
        assert insight.high_stress_days == 1
        assert insight.low_stress_days == 1
        assert insight.avg_expense == round(20000 / 7)
        assert insight.daily_expense == 0
