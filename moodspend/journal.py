"""
Event journal: validated create/edit/delete of stress and finance entries.

Every write recomputes the stress score from mood text (stress entries) and
then refreshes the affected date's summary, so summaries never lag the log.
When an edit moves an entry to another date, both dates are refreshed.
"""

import logging
import uuid
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from moodspend.errors import EventNotFoundError, EventValidationError
from moodspend.insights.mood_score import compute_stress_score
from moodspend.models import DailySummary, FinanceEvent, StressEvent
from moodspend.schemas import FinanceEventInput, StressEventInput
from moodspend.store import SQLiteStore
from moodspend.sync import sync_daily_summaries_for_range

logger = logging.getLogger(__name__)


def _validate(schema: type[BaseModel], data: dict[str, Any]) -> BaseModel:
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        fields = ", ".join(err["field"] for err in errors)
        raise EventValidationError(f"invalid {schema.__name__}: {fields}", errors) from e


def _new_id() -> str:
    return uuid.uuid4().hex


class Journal:
    """Write path for one store. Summary refresh failures raise SummarySyncError."""

    def __init__(self, store: SQLiteStore):
        self.store = store

    def _refresh(self, owner_id: str, *dates: str) -> list[DailySummary]:
        unique = list(dict.fromkeys(dates))
        return sync_daily_summaries_for_range(self.store, owner_id, unique)

    # -------------------------------------------------------------------------
    # Stress
    # -------------------------------------------------------------------------

    def record_stress(self, owner_id: str, data: dict[str, Any]) -> StressEvent:
        entry = _validate(StressEventInput, data)
        event = StressEvent(
            id=_new_id(),
            owner_id=owner_id,
            date=entry.date,
            mood=entry.mood,
            context=entry.context,
            memo=entry.memo,
            score=compute_stress_score(entry.mood),
        )
        self.store.add_stress_event(event)
        logger.info("Recorded stress event %s for %s on %s", event.id, owner_id, event.date)
        self._refresh(owner_id, event.date)
        return event

    def edit_stress(self, owner_id: str, event_id: str, changes: dict[str, Any]) -> StressEvent:
        current = self.store.get_stress_event(owner_id, event_id)
        if current is None:
            raise EventNotFoundError(f"stress event {event_id} not found")
        merged = {**current.to_dict(), **changes}
        entry = _validate(StressEventInput, merged)
        event = StressEvent(
            id=current.id,
            owner_id=owner_id,
            date=entry.date,
            mood=entry.mood,
            context=entry.context,
            memo=entry.memo,
            score=compute_stress_score(entry.mood),
        )
        if not self.store.update_stress_event(event):
            raise EventNotFoundError(f"stress event {event_id} not found")
        logger.info("Edited stress event %s for %s", event.id, owner_id)
        self._refresh(owner_id, current.date, event.date)
        return event

    def delete_stress(self, owner_id: str, event_id: str) -> None:
        current = self.store.get_stress_event(owner_id, event_id)
        if current is None or not self.store.delete_stress_event(owner_id, event_id):
            raise EventNotFoundError(f"stress event {event_id} not found")
        logger.info("Deleted stress event %s for %s", event_id, owner_id)
        self._refresh(owner_id, current.date)

    # -------------------------------------------------------------------------
    # Finance
    # -------------------------------------------------------------------------

    def record_expense(self, owner_id: str, data: dict[str, Any]) -> FinanceEvent:
        entry = _validate(FinanceEventInput, data)
        event = FinanceEvent(
            id=_new_id(),
            owner_id=owner_id,
            date=entry.date,
            category=entry.category,
            amount=entry.amount,
            type=entry.type,
            memo=entry.memo,
        )
        self.store.add_finance_event(event)
        logger.info("Recorded %s event %s for %s on %s", event.type, event.id, owner_id, event.date)
        self._refresh(owner_id, event.date)
        return event

    def edit_expense(self, owner_id: str, event_id: str, changes: dict[str, Any]) -> FinanceEvent:
        current = self.store.get_finance_event(owner_id, event_id)
        if current is None:
            raise EventNotFoundError(f"finance event {event_id} not found")
        merged = {**current.to_dict(), **changes}
        entry = _validate(FinanceEventInput, merged)
        event = FinanceEvent(
            id=current.id,
            owner_id=owner_id,
            date=entry.date,
            category=entry.category,
            amount=entry.amount,
            type=entry.type,
            memo=entry.memo,
        )
        if not self.store.update_finance_event(event):
            raise EventNotFoundError(f"finance event {event_id} not found")
        logger.info("Edited finance event %s for %s", event.id, owner_id)
        self._refresh(owner_id, current.date, event.date)
        return event

    def delete_expense(self, owner_id: str, event_id: str) -> None:
        current = self.store.get_finance_event(owner_id, event_id)
        if current is None or not self.store.delete_finance_event(owner_id, event_id):
            raise EventNotFoundError(f"finance event {event_id} not found")
        logger.info("Deleted finance event %s for %s", event_id, owner_id)
        self._refresh(owner_id, current.date)
