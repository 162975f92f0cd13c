# moodspend - stress x spending insight engine
"""
Public surface for app and CLI consumers.
"""

from .coaching.normalizer import normalize_coaching_payload
from .insights.daily_summary import compute_daily_summary
from .insights.date_range import build_date_range
from .insights.period_insight import build_stress_spend_insight
from .sync import sync_daily_summaries_for_range, update_daily_summary_for_date

__all__ = [
    "compute_daily_summary",
    "build_date_range",
    "sync_daily_summaries_for_range",
    "update_daily_summary_for_date",
    "build_stress_spend_insight",
    "normalize_coaching_payload",
]
