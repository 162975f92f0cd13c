"""
Centralized configuration for moodspend.

Values that vary by deployment belong here.
Override via environment variables where marked.
"""

import os

# ============================================================
# Coaching
# ============================================================

AI_MODEL: str = os.environ.get("MOODSPEND_AI_MODEL", "gpt-4o-mini")
"""Model identifier stamped on coaching payloads that do not carry one."""

DAILY_AI_VERSION: int = 1
"""Schema version of cached daily coaching payloads. Bump when the shape changes."""

PERIOD_AI_VERSION: int = 2
"""Schema version of cached period coaching payloads (adds `goal`)."""

MAX_RECOMMENDATIONS: int = 5
"""Recommendations kept after normalization."""

# ============================================================
# Insights
# ============================================================

DEFAULT_PERIOD_DAYS: int = int(os.environ.get("MOODSPEND_PERIOD_DAYS", "14"))
"""Window length used by the CLI and period coaching when none is given."""

OTHER_CATEGORY: str = "Other"
"""Category label for expenses recorded without one."""

# ============================================================
# Logging
# ============================================================

LOG_LEVEL: str = os.environ.get("MOODSPEND_LOG_LEVEL", "INFO")
"""Root log level for the CLI."""

LOG_JSON: bool | None = (
    None
    if os.environ.get("MOODSPEND_LOG_JSON") is None
    else os.environ["MOODSPEND_LOG_JSON"].lower() in ("1", "true", "yes")
)
"""Force JSON (true) or human (false) log output. Unset: JSON when stderr is not a TTY."""
