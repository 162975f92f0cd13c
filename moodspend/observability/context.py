"""
Run context: tags every log line of one CLI command or sync run with a run id.
"""

import contextvars
import uuid

_run_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)


def get_run_id() -> str | None:
    """Get the current run ID from context."""
    return _run_id_var.get()


def set_run_id(run_id: str) -> contextvars.Token:
    """Set the run ID in context. Returns token for reset."""
    return _run_id_var.set(run_id)


def generate_run_id() -> str:
    return f"run-{uuid.uuid4().hex[:16]}"


class RunContext:
    """
    Context manager for run-scoped operations.

    Usage:
        with RunContext() as ctx:
            sync_daily_summaries_for_range(store, owner_id, dates)
            # every log line inside carries ctx.run_id
    """

    def __init__(self, run_id: str | None = None):
        self.run_id = run_id or generate_run_id()
        self._token: contextvars.Token | None = None

    def __enter__(self) -> "RunContext":
        self._token = set_run_id(self.run_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _run_id_var.reset(self._token)
