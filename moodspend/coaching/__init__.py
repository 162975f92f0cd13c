"""
Coaching: request construction, payload normalization, and cached generation
on top of an injected text-completion client.
"""

from .normalizer import normalize_coaching_payload
from .prompts import DailyCoachingContext, build_daily_coaching_messages, build_period_coaching_messages
from .service import CoachingService, CompletionClient, period_key

__all__ = [
    "normalize_coaching_payload",
    "DailyCoachingContext",
    "build_daily_coaching_messages",
    "build_period_coaching_messages",
    "CoachingService",
    "CompletionClient",
    "period_key",
]
