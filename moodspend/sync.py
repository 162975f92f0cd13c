"""
Summary persistence / sync.

Computes DailySummary documents from the event store and merge-upserts them
back, keyed by (owner, date). Events are loaded once per call no matter how
many dates are synced. Every date's write is independent and idempotent, so
a partially failed sync is safe to re-run.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime

from moodspend import config
from moodspend.coaching.normalizer import read_cached_payload
from moodspend.errors import StoreError, SummarySyncError
from moodspend.insights.daily_summary import compute_daily_summary
from moodspend.insights.date_range import to_date
from moodspend.insights.period_insight import build_stress_spend_insight
from moodspend.models import DailySummary, StressSpendInsight
from moodspend.store import DAILY_SCOPE, EventStore

logger = logging.getLogger(__name__)


def sync_daily_summaries_for_range(
    store: EventStore, owner_id: str, dates: Iterable[str]
) -> list[DailySummary]:
    """
    Recompute and persist the summaries for `dates`.

    Returned summaries carry the coaching payload already cached for each
    date (if still valid), so re-syncing never hides a stored recommendation.
    Derived fields are always rewritten from events; the cached `ai` field
    is never touched here.

    Raises:
        SummarySyncError: a store read or write failed. Dates written before
            the failure stay written.
    """
    dates = list(dates)
    written = 0
    try:
        stress_events = store.fetch_all_stress_events(owner_id)
        finance_events = store.fetch_all_finance_events(owner_id)

        summaries = []
        for day in dates:
            summary = compute_daily_summary(owner_id, day, stress_events, finance_events)
            cached = store.read_summary(owner_id, day, scope=DAILY_SCOPE)
            summary.ai, summary.ai_version = read_cached_payload(cached, config.DAILY_AI_VERSION)
            if store.upsert_summary(owner_id, day, summary.to_fields(), scope=DAILY_SCOPE):
                written += 1
            summaries.append(summary)
    except StoreError as e:
        logger.error(
            "Summary sync failed for %s after %d/%d dates: %s", owner_id, written, len(dates), e
        )
        raise SummarySyncError(f"summary sync failed for {owner_id}: {e}") from e

    logger.info(
        "Synced %d daily summaries for %s (%d changed)",
        len(summaries),
        owner_id,
        written,
        extra={"owner_id": owner_id, "dates": len(summaries), "changed": written},
    )
    return summaries


def update_daily_summary_for_date(store: EventStore, owner_id: str, day: str) -> DailySummary:
    """
    Refresh one date's summary after an event create/edit/delete.

    Raises:
        ValueError: `day` is not an ISO date; nothing is written.
    """
    return sync_daily_summaries_for_range(store, owner_id, [to_date(day).isoformat()])[0]


def load_stress_spend_insight(
    store: EventStore,
    owner_id: str,
    period_days: int,
    end_date: date | datetime | str | None = None,
    focus_date: date | datetime | str | None = None,
) -> StressSpendInsight:
    """Fetch an owner's events once and build the period insight over them."""
    stress_events = store.fetch_all_stress_events(owner_id)
    finance_events = store.fetch_all_finance_events(owner_id)
    return build_stress_spend_insight(
        stress_events,
        finance_events,
        period_days,
        end_date=end_date,
        focus_date=focus_date,
    )
