"""
Coaching request construction.

Builds chat messages for the completion collaborator: a fixed system
preamble that pins the output contract, and a user message carrying the
facts as strict JSON. No model call happens here.
"""

import json
from dataclasses import dataclass, field

from moodspend.models import DailySummary, RecommendationType, StressBucket, StressSpendInsight

_TYPES = ", ".join(t.value for t in RecommendationType)

DAILY_SYSTEM_PROMPT = (
    "너는 공감적이고 실용적인 행동·재정 코치야. "
    "반드시 한국어로만 응답해. "
    "Return ONLY valid JSON with keys: summary, pattern, recommendations. "
    "recommendations must be 3 to 5 items. "
    "Each recommendation has: title, duration, type, steps, reason. "
    f"type must be one of {_TYPES}. "
    "Quick=1~5 minutes, Rule=spending rule, Situational=10~30 minutes, "
    "Recovery=rest or recovery routine. "
    "Keep durations short and actionable (1-30 minutes). "
    "No markdown, no extra text."
)

PERIOD_SYSTEM_PROMPT = (
    "너는 감정-소비 패턴을 설명하고 행동을 제안하는 코치야. "
    "반드시 한국어로만 응답해. "
    "Return ONLY valid JSON with keys: summary, pattern, goal, recommendations. "
    "summary, pattern and goal are one line each; goal is a behavioral target. "
    "recommendations must be 3 to 5 items: at least two Quick (1~5 minutes), "
    "one Rule (spending rule) and one Situational (10~30 minutes). "
    f"type must be one of {_TYPES}. "
    "Each recommendation has: title, duration, type, steps, reason. "
    "reason cites the evidence in one line, e.g. '스트레스↑ + 지출↑(카테고리)'. "
    "No markdown, no extra text."
)


@dataclass
class DailyCoachingContext:
    """Window facts that give a single day's numbers their meaning."""

    avg_expense: int = 0
    spend_spike: bool = False
    top_categories: list[str] = field(default_factory=list)

    @classmethod
    def from_insight(cls, insight: StressSpendInsight) -> "DailyCoachingContext":
        return cls(
            avg_expense=insight.avg_expense,
            spend_spike=insight.spend_spike,
            top_categories=[c.category for c in insight.top_spend_categories],
        )


def _dumps(payload: dict) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True)


def daily_facts(summary: DailySummary, context: DailyCoachingContext) -> dict:
    return {
        "date": summary.date,
        "stress_score_avg": summary.stress_score_avg,
        "stress_score_max": summary.stress_score_max,
        "stress_count": summary.stress_count,
        "top_mood": summary.top_mood,
        "top_context": summary.top_context,
        "daily_expense": summary.daily_expense,
        "day_top_categories": [c.to_dict() for c in summary.top_categories[:3]],
        "avg_expense": context.avg_expense,
        "spend_spike": context.spend_spike,
        "top_categories": context.top_categories[:3],
    }


def period_facts(insight: StressSpendInsight) -> dict:
    return {
        "period_days": insight.period_days,
        "avg_expense": insight.avg_expense,
        "high_avg": insight.bucket(StressBucket.HIGH).avg_daily_expense,
        "mid_avg": insight.bucket(StressBucket.MID).avg_daily_expense,
        "low_avg": insight.bucket(StressBucket.LOW).avg_daily_expense,
        "ratio_high_low": (
            round(insight.ratio_high_low, 2) if insight.ratio_high_low is not None else None
        ),
        "high_stress_days": insight.high_stress_days,
        "low_stress_days": insight.low_stress_days,
        "spend_spike": insight.spend_spike,
        "top_spend_categories": [c.to_dict() for c in insight.top_spend_categories[:3]],
        "mood_category_top": [m.to_dict() for m in insight.mood_category_top[:3]],
        "pattern_summary": insight.pattern_summary,
        "trigger_summary": insight.trigger_summary,
    }


def build_daily_coaching_messages(
    summary: DailySummary, context: DailyCoachingContext | None = None
) -> list[dict]:
    facts = daily_facts(summary, context or DailyCoachingContext())
    return [
        {"role": "system", "content": DAILY_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                "다음 데이터를 기반으로 스트레스-지출 인사이트를 만들어줘.\n"
                "JSON만 반환해줘.\n"
                f"data: {_dumps(facts)}"
            ),
        },
    ]


def build_period_coaching_messages(insight: StressSpendInsight) -> list[dict]:
    return [
        {"role": "system", "content": PERIOD_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                "아래 데이터를 기반으로 감정-소비 패턴 요약과 실행 루틴을 만들어줘.\n"
                "JSON만 반환.\n"
                f"data: {_dumps(period_facts(insight))}"
            ),
        },
    ]
