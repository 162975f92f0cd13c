"""
Grouping and ranking helpers shared by the daily and period calculators.
"""

import math
from collections import defaultdict
from collections.abc import Iterable

from moodspend import config
from moodspend.models import CategoryAmount, FinanceEvent


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negatives."""
    return int(math.floor(value + 0.5))


def top_label(values: Iterable[str | None]) -> str | None:
    """
    Most frequent non-empty trimmed label, or None.

    Ties go to the label first encountered in input order.
    """
    counts: dict[str, int] = {}
    for value in values:
        key = (value or "").strip()
        if not key:
            continue
        counts[key] = counts.get(key, 0) + 1
    if not counts:
        return None
    best = max(counts.values())
    for key, count in counts.items():
        if count == best:
            return key
    return None


def expense_events(events: Iterable[FinanceEvent]) -> list[FinanceEvent]:
    return [e for e in events if e.is_expense]


def category_totals(events: Iterable[FinanceEvent]) -> list[CategoryAmount]:
    """
    Sum amounts per trimmed category, sorted by amount descending.

    Blank categories fold into config.OTHER_CATEGORY. Ties keep
    first-encountered order.
    """
    totals: dict[str, int] = {}
    for event in events:
        key = (event.category or "").strip() or config.OTHER_CATEGORY
        totals[key] = totals.get(key, 0) + max(event.amount or 0, 0)
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryAmount(category=k, amount=v) for k, v in ranked]


def total_amount(events: Iterable[FinanceEvent]) -> int:
    return sum(max(e.amount or 0, 0) for e in events)


def group_by_date(events: Iterable) -> dict[str, list]:
    grouped: dict[str, list] = defaultdict(list)
    for event in events:
        grouped[event.date].append(event)
    return grouped
