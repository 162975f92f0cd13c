"""
Coaching payload normalizer.

The trust boundary for completion output: an arbitrary decoded JSON value
(or the raw completion text) goes in, a CoachingPayload or None comes out.
Nothing downstream consumes a payload that did not pass through here.
Never raises.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Any

from moodspend import config
from moodspend.models import CoachingPayload, Recommendation, RecommendationType

logger = logging.getLogger(__name__)

# Checked in order; first table with a keyword contained in the value wins.
RECOMMENDATION_TYPE_SYNONYMS: tuple[tuple[RecommendationType, tuple[str, ...]], ...] = (
    (RecommendationType.QUICK, ("즉시", "immediate", "quick")),
    (RecommendationType.RULE, ("규칙", "보류", "rule")),
    (RecommendationType.SITUATIONAL, ("상황", "situational", "context")),
    (RecommendationType.RECOVERY, ("회복", "recovery")),
    (RecommendationType.QUICK, ("대체", "alternative", "replacement")),
)


def extract_json_object(text: str | None) -> Any:
    """
    Parse the span from the first '{' to the last '}' of `text`.

    Tolerates prose before and after the object. Returns None when there is
    no such span or it is not valid JSON.
    """
    if not isinstance(text, str):
        return None
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end <= start:
        return None
    try:
        return json.loads(text[start : end + 1])
    except ValueError:
        return None


def normalize_recommendation_type(value: Any) -> RecommendationType | None:
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    if not key:
        return None
    for rec_type, synonyms in RECOMMENDATION_TYPE_SYNONYMS:
        if any(s in key for s in synonyms):
            return rec_type
    return None


def _clean_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def normalize_recommendation(item: Any) -> Recommendation | None:
    if not isinstance(item, dict):
        return None
    title = _clean_text(item.get("title"))
    duration = _clean_text(item.get("duration"))
    reason = _clean_text(item.get("reason"))
    rec_type = normalize_recommendation_type(item.get("type"))
    if not (title and duration and reason and rec_type):
        return None

    raw_steps = item.get("steps")
    steps = []
    if isinstance(raw_steps, list):
        steps = [s.strip() for s in raw_steps if isinstance(s, str) and s.strip()]

    return Recommendation(title=title, duration=duration, type=rec_type, reason=reason, steps=steps)


def normalize_recommendations(value: Any) -> list[Recommendation]:
    if not isinstance(value, list):
        return []
    recommendations = [r for r in (normalize_recommendation(item) for item in value) if r]
    return recommendations[: config.MAX_RECOMMENDATIONS]


def normalize_coaching_payload(
    value: Any = None,
    raw_text: str | None = None,
    *,
    default_model: str | None = None,
    now: datetime | None = None,
) -> CoachingPayload | None:
    """
    Validate and canonicalize a coaching payload.

    Args:
        value: Decoded JSON value. When None, `raw_text` is parsed instead.
        raw_text: Raw completion text, possibly wrapped in prose.
        default_model: Model stamped when the payload names none
            (config.AI_MODEL if not given).
        now: Timestamp stamped when `generated_at` is missing.

    Returns:
        The normalized payload, or None if `summary`/`pattern` are not
        non-empty strings or no recommendation survives validation.
    """
    if value is None and raw_text is not None:
        value = extract_json_object(raw_text)
    if not isinstance(value, dict):
        return None

    summary = _clean_text(value.get("summary"))
    pattern = _clean_text(value.get("pattern"))
    if not summary or not pattern:
        logger.debug("Rejected coaching payload: missing summary or pattern")
        return None

    recommendations = normalize_recommendations(value.get("recommendations"))
    if not recommendations:
        logger.debug("Rejected coaching payload: no valid recommendations")
        return None

    model = _clean_text(value.get("model")) or default_model or config.AI_MODEL
    generated_at = _clean_text(value.get("generated_at") or value.get("generatedAt"))
    if not generated_at:
        generated_at = (now or datetime.now(UTC)).isoformat()

    return CoachingPayload(
        summary=summary,
        pattern=pattern,
        recommendations=recommendations,
        model=model,
        generated_at=generated_at,
        goal=_clean_text(value.get("goal")) or None,
    )


def read_cached_payload(
    doc: dict | None, expected_version: int
) -> tuple[CoachingPayload | None, int | None]:
    """
    Pull the cached coaching payload and its schema version out of a stored
    summary document.

    The payload is re-normalized on the way out, and dropped when it was
    written under a different schema version than `expected_version`.
    """
    if not doc:
        return None, None
    raw_version = doc.get("ai_version")
    version = raw_version if isinstance(raw_version, int) and not isinstance(raw_version, bool) else None
    payload = normalize_coaching_payload(doc.get("ai"))
    if payload is not None and version != expected_version:
        logger.info(
            "Ignoring cached coaching payload with schema v%s (expected v%s)",
            version,
            expected_version,
        )
        payload = None
    return payload, version
