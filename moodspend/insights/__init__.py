"""
Pure insight calculators: date ranges, daily summaries, period insights and
mood scoring. Nothing in this package performs I/O except reading
thresholds.yaml.
"""

from .daily_summary import compute_daily_summary
from .date_range import build_date_range
from .mood_score import compute_stress_score
from .period_insight import build_stress_spend_insight
from .thresholds import InsightThresholds, load_thresholds

__all__ = [
    "build_date_range",
    "compute_daily_summary",
    "build_stress_spend_insight",
    "compute_stress_score",
    "InsightThresholds",
    "load_thresholds",
]
