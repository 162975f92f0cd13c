"""
Observability: structured logging and run IDs.

Usage:
    from moodspend.observability import configure_logging, get_logger, RunContext

    configure_logging("INFO")
    logger = get_logger(__name__)

    with RunContext():
        logger.info("Syncing", extra={"owner_id": "u1"})
"""

from .context import RunContext, get_run_id, set_run_id
from .logging import HumanFormatter, JSONFormatter, configure_logging, get_logger

__all__ = [
    "get_logger",
    "configure_logging",
    "JSONFormatter",
    "HumanFormatter",
    "RunContext",
    "get_run_id",
    "set_run_id",
]
