"""
Records shared by the journal, the insight engine and the summary store.

Event records mirror rows in the event store. Summary and insight records
are derived and never hand-edited.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class StressBucket(StrEnum):
    LOW = "Low"
    MID = "Mid"
    HIGH = "High"


class FinanceType(StrEnum):
    EXPENSE = "expense"
    INCOME = "income"


class RecommendationType(StrEnum):
    """Closed set of coaching recommendation types."""

    QUICK = "Quick"  # 1-5 minutes
    RULE = "Rule"  # spending rule
    SITUATIONAL = "Situational"  # 10-30 minutes
    RECOVERY = "Recovery"


# =============================================================================
# EVENTS
# =============================================================================


@dataclass
class StressEvent:
    """A mood/stress log entry. `score` is always derived from `mood`."""

    id: str
    owner_id: str
    date: str  # YYYY-MM-DD
    mood: str
    context: str = ""
    memo: str = ""
    score: int = 50

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "date": self.date,
            "mood": self.mood,
            "context": self.context,
            "memo": self.memo,
            "score": self.score,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StressEvent":
        return cls(
            id=str(data["id"]),
            owner_id=str(data["owner_id"]),
            date=str(data["date"]),
            mood=data.get("mood") or "",
            context=data.get("context") or "",
            memo=data.get("memo") or "",
            score=int(data.get("score") or 0),
        )


@dataclass
class FinanceEvent:
    """An expense or income log entry. Missing `type` reads as expense."""

    id: str
    owner_id: str
    date: str  # YYYY-MM-DD
    category: str
    amount: int
    type: str = FinanceType.EXPENSE.value
    memo: str = ""

    @property
    def is_expense(self) -> bool:
        return (self.type or FinanceType.EXPENSE.value) == FinanceType.EXPENSE.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "date": self.date,
            "category": self.category,
            "type": self.type,
            "amount": self.amount,
            "memo": self.memo,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FinanceEvent":
        return cls(
            id=str(data["id"]),
            owner_id=str(data["owner_id"]),
            date=str(data["date"]),
            category=data.get("category") or "",
            amount=int(data.get("amount") or 0),
            type=data.get("type") or FinanceType.EXPENSE.value,
            memo=data.get("memo") or "",
        )


# =============================================================================
# COACHING
# =============================================================================


@dataclass
class Recommendation:
    title: str
    duration: str
    type: RecommendationType
    reason: str
    steps: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "duration": self.duration,
            "type": self.type.value,
            "steps": list(self.steps),
            "reason": self.reason,
        }


@dataclass
class CoachingPayload:
    """A normalized coaching result. Only the normalizer constructs these."""

    summary: str
    pattern: str
    recommendations: list[Recommendation]
    model: str
    generated_at: str
    goal: str | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "summary": self.summary,
            "pattern": self.pattern,
            "recommendations": [r.to_dict() for r in self.recommendations],
            "model": self.model,
            "generated_at": self.generated_at,
        }
        if self.goal:
            data["goal"] = self.goal
        return data


# =============================================================================
# DERIVED SUMMARIES
# =============================================================================


@dataclass
class CategoryAmount:
    category: str
    amount: int

    def to_dict(self) -> dict:
        return {"category": self.category, "amount": self.amount}


@dataclass
class DailySummary:
    """Per-(owner, date) rollup of stress and expense events."""

    owner_id: str
    date: str
    stress_score_avg: int = 0
    stress_score_max: int = 0
    stress_count: int = 0
    top_mood: str | None = None
    top_context: str | None = None
    daily_expense: int = 0
    top_categories: list[CategoryAmount] = field(default_factory=list)
    ai: CoachingPayload | None = None
    ai_version: int | None = None

    @property
    def has_data(self) -> bool:
        return self.stress_count > 0 or self.daily_expense > 0

    def to_fields(self) -> dict:
        """Derived fields only, as written to the summary store."""
        return {
            "owner_id": self.owner_id,
            "date": self.date,
            "stress_score_avg": self.stress_score_avg,
            "stress_score_max": self.stress_score_max,
            "stress_count": self.stress_count,
            "top_mood": self.top_mood,
            "top_context": self.top_context,
            "daily_expense": self.daily_expense,
            "top_categories": [c.to_dict() for c in self.top_categories],
        }

    def to_dict(self) -> dict:
        data = self.to_fields()
        data["ai"] = self.ai.to_dict() if self.ai else None
        data["ai_version"] = self.ai_version
        return data


@dataclass
class BucketSpend:
    bucket: StressBucket
    day_count: int
    avg_daily_expense: int

    def to_dict(self) -> dict:
        return {
            "bucket": self.bucket.value,
            "day_count": self.day_count,
            "avg_daily_expense": self.avg_daily_expense,
        }


@dataclass
class MoodCategorySummary:
    mood: str
    top_categories: list[CategoryAmount]
    total_expense: int

    def to_dict(self) -> dict:
        return {
            "mood": self.mood,
            "top_categories": [c.to_dict() for c in self.top_categories],
            "total_expense": self.total_expense,
        }


@dataclass
class StressSpendInsight:
    """Period-level stress vs. spend report. Recomputed on read, never stored."""

    period_days: int
    daily_expense: int
    avg_expense: int
    spend_spike: bool
    bucket_summaries: list[BucketSpend]
    mood_category_top: list[MoodCategorySummary]
    top_spend_categories: list[CategoryAmount]
    high_stress_days: int
    low_stress_days: int
    ratio_high_low: float | None
    pattern_summary: str
    trigger_summary: str

    def bucket(self, bucket: StressBucket) -> BucketSpend:
        for summary in self.bucket_summaries:
            if summary.bucket == bucket:
                return summary
        return BucketSpend(bucket=bucket, day_count=0, avg_daily_expense=0)

    @property
    def has_data(self) -> bool:
        return self.avg_expense > 0 or sum(b.day_count for b in self.bucket_summaries) > 0

    def to_dict(self) -> dict:
        return {
            "period_days": self.period_days,
            "daily_expense": self.daily_expense,
            "avg_expense": self.avg_expense,
            "spend_spike": self.spend_spike,
            "bucket_summaries": [b.to_dict() for b in self.bucket_summaries],
            "mood_category_top": [m.to_dict() for m in self.mood_category_top],
            "top_spend_categories": [c.to_dict() for c in self.top_spend_categories],
            "high_stress_days": self.high_stress_days,
            "low_stress_days": self.low_stress_days,
            "ratio_high_low": (
                round(self.ratio_high_low, 4) if self.ratio_high_low is not None else None
            ),
            "pattern_summary": self.pattern_summary,
            "trigger_summary": self.trigger_summary,
        }
