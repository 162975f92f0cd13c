"""
Error taxonomy for moodspend.

Pure computations (date ranges, daily summaries, period insights, payload
normalization, mood scoring) never raise. Everything touching the store or
the coaching collaborator raises one of these.
"""


class MoodspendError(Exception):
    """Base class for all moodspend errors."""


class EventValidationError(MoodspendError):
    """Event create/edit input is malformed or incomplete."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class EventNotFoundError(MoodspendError):
    """Event does not exist or belongs to another owner."""


class StoreError(MoodspendError):
    """Event or summary store read/write failed. Safe to retry."""


class SummarySyncError(StoreError):
    """Computing and persisting daily summaries failed."""


class CoachingError(MoodspendError):
    """Coaching could not be produced. Never blocks summaries or insights."""


class CompletionError(CoachingError):
    """Completion collaborator failed, timed out, or returned empty content."""


class NormalizationRejection(CoachingError):
    """Completion text parsed but failed coaching payload validation."""
