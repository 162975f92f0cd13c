"""
Threshold configuration for the period insight engine.

Loaded from thresholds.yaml next to this module. Missing or malformed
values fall back to the defaults below.
"""

import logging
from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

THRESHOLDS_PATH = Path(__file__).parent / "thresholds.yaml"


@dataclass(frozen=True)
class InsightThresholds:
    low_below: float = 40.0
    high_from: float = 70.0
    finance_only_score: float = 50.0
    spike_multiplier: float = 1.5
    mood_top_categories: int = 3
    top_spend_categories: int = 5


DEFAULT_THRESHOLDS = InsightThresholds()

# yaml section -> {yaml key: dataclass field}
_FIELD_MAP = {
    "buckets": {
        "low_below": "low_below",
        "high_from": "high_from",
        "finance_only_score": "finance_only_score",
    },
    "spend_spike": {"multiplier": "spike_multiplier"},
    "ranking": {
        "mood_top_categories": "mood_top_categories",
        "top_spend_categories": "top_spend_categories",
    },
}


def parse_thresholds(config: dict | None) -> InsightThresholds:
    """Overlay a parsed YAML mapping onto the defaults, skipping bad values."""
    overrides = {}
    for section, keys in _FIELD_MAP.items():
        values = (config or {}).get(section) or {}
        if not isinstance(values, dict):
            logger.warning("Ignoring thresholds section %r: not a mapping", section)
            continue
        for yaml_key, attr in keys.items():
            if yaml_key not in values:
                continue
            raw = values[yaml_key]
            default = getattr(DEFAULT_THRESHOLDS, attr)
            if isinstance(raw, bool) or not isinstance(raw, int | float):
                logger.warning("Ignoring threshold %s.%s=%r", section, yaml_key, raw)
                continue
            overrides[attr] = type(default)(raw)
    return replace(DEFAULT_THRESHOLDS, **overrides)


def load_thresholds_file(path: Path) -> InsightThresholds:
    if not path.exists():
        logger.warning("Thresholds config not found at %s, using defaults", path)
        return DEFAULT_THRESHOLDS
    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed to load thresholds config %s: %s", path, exc)
        return DEFAULT_THRESHOLDS
    if not isinstance(config, dict):
        logger.warning("Thresholds config %s is not a mapping, using defaults", path)
        return DEFAULT_THRESHOLDS
    return parse_thresholds(config)


@lru_cache(maxsize=1)
def load_thresholds() -> InsightThresholds:
    return load_thresholds_file(THRESHOLDS_PATH)


def reload_thresholds() -> InsightThresholds:
    """Drop the cached thresholds (call after editing thresholds.yaml)."""
    load_thresholds.cache_clear()
    return load_thresholds()
