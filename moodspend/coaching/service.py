"""
Coaching orchestration.

Turns a DailySummary or StressSpendInsight into a cached coaching payload:
reuse what is stored when it is still valid, otherwise build the request,
call the completion collaborator, normalize the answer and merge it into
the summary document. Coaching is best-effort; `ensure_*` never lets a
CoachingError escape.
"""

import logging
from datetime import UTC, datetime
from typing import Protocol

from moodspend import config
from moodspend.coaching.normalizer import normalize_coaching_payload, read_cached_payload
from moodspend.coaching.prompts import (
    DailyCoachingContext,
    build_daily_coaching_messages,
    build_period_coaching_messages,
)
from moodspend.errors import CoachingError, CompletionError, NormalizationRejection
from moodspend.models import CoachingPayload, DailySummary, StressSpendInsight
from moodspend.store import DAILY_SCOPE, PERIOD_SCOPE, EventStore

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    """
    Text-completion collaborator.

    `complete` raises CompletionError when the call fails, times out or
    returns no content.
    """

    def complete(self, messages: list[dict]) -> str: ...


def period_key(days: int) -> str:
    return f"last-{days}d"


class CoachingService:
    def __init__(self, store: EventStore, client: CompletionClient, model: str | None = None):
        self.store = store
        self.client = client
        self.model = model or config.AI_MODEL

    def _complete(self, messages: list[dict]) -> CoachingPayload:
        content = self.client.complete(messages)
        if not isinstance(content, str) or not content.strip():
            raise CompletionError("completion returned empty content")
        payload = normalize_coaching_payload(raw_text=content, default_model=self.model)
        if payload is None:
            raise NormalizationRejection("completion did not contain a valid coaching payload")
        payload.model = self.model
        payload.generated_at = datetime.now(UTC).isoformat()
        return payload

    # -------------------------------------------------------------------------
    # Daily
    # -------------------------------------------------------------------------

    def generate_daily(
        self,
        owner_id: str,
        summary: DailySummary,
        context: DailyCoachingContext | None = None,
        force: bool = False,
    ) -> CoachingPayload | None:
        """
        Coaching for one day. Returns None for a day with no data.

        Raises:
            CompletionError, NormalizationRejection: nothing is cached.
            StoreError: reading or writing the summary document failed.
        """
        if not force:
            if summary.ai is not None:
                return summary.ai
            cached, _ = read_cached_payload(
                self.store.read_summary(owner_id, summary.date, scope=DAILY_SCOPE),
                config.DAILY_AI_VERSION,
            )
            if cached is not None:
                return cached
        if not summary.has_data:
            return None

        payload = self._complete(build_daily_coaching_messages(summary, context))
        self.store.upsert_summary(
            owner_id,
            summary.date,
            {"ai": payload.to_dict(), "ai_version": config.DAILY_AI_VERSION},
            scope=DAILY_SCOPE,
        )
        summary.ai = payload
        summary.ai_version = config.DAILY_AI_VERSION
        logger.info("Cached daily coaching for %s on %s", owner_id, summary.date)
        return payload

    def ensure_daily(
        self,
        owner_id: str,
        summary: DailySummary,
        context: DailyCoachingContext | None = None,
        force: bool = False,
    ) -> CoachingPayload | None:
        """generate_daily, with coaching failures logged and turned into None."""
        try:
            return self.generate_daily(owner_id, summary, context, force=force)
        except CoachingError as e:
            logger.warning("Daily coaching skipped for %s on %s: %s", owner_id, summary.date, e)
            return None

    # -------------------------------------------------------------------------
    # Period
    # -------------------------------------------------------------------------

    def generate_period(
        self,
        owner_id: str,
        insight: StressSpendInsight,
        key: str | None = None,
        force: bool = False,
    ) -> CoachingPayload | None:
        """
        Coaching for a window, cached under `key` (default "last-{N}d").
        Returns None when the window has no data.
        """
        key = key or period_key(insight.period_days)
        if not force:
            cached, _ = read_cached_payload(
                self.store.read_summary(owner_id, key, scope=PERIOD_SCOPE),
                config.PERIOD_AI_VERSION,
            )
            if cached is not None:
                return cached
        if not insight.has_data:
            return None

        payload = self._complete(build_period_coaching_messages(insight))
        self.store.upsert_summary(
            owner_id,
            key,
            {
                "period_days": insight.period_days,
                "ai": payload.to_dict(),
                "ai_version": config.PERIOD_AI_VERSION,
            },
            scope=PERIOD_SCOPE,
        )
        logger.info("Cached period coaching for %s under %s", owner_id, key)
        return payload

    def ensure_period(
        self,
        owner_id: str,
        insight: StressSpendInsight,
        key: str | None = None,
        force: bool = False,
    ) -> CoachingPayload | None:
        try:
            return self.generate_period(owner_id, insight, key, force=force)
        except CoachingError as e:
            logger.warning("Period coaching skipped for %s: %s", owner_id, e)
            return None
