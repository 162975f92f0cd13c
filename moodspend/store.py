"""
Event and summary store.

`EventStore` is the contract the engine consumes; `SQLiteStore` is the
bundled implementation. Summary documents live in one table keyed by
(owner_id, scope, key) where scope is "daily" (key = date) or "summary"
(key = period key such as "last-14d"). Writes to them are merge-upserts:
given fields are patched in, all other fields are left untouched.
"""

import json
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

from moodspend import paths
from moodspend.errors import StoreError
from moodspend.models import FinanceEvent, StressEvent

logger = logging.getLogger(__name__)

DAILY_SCOPE = "daily"
PERIOD_SCOPE = "summary"

SCHEMA = """
CREATE TABLE IF NOT EXISTS stress_events (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    date TEXT NOT NULL,
    mood TEXT NOT NULL,
    context TEXT NOT NULL DEFAULT '',
    memo TEXT NOT NULL DEFAULT '',
    score INTEGER NOT NULL CHECK (score BETWEEN 0 AND 100),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

-- type may be NULL on rows written before income tracking; NULL reads as expense
CREATE TABLE IF NOT EXISTS finance_events (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    date TEXT NOT NULL,
    category TEXT NOT NULL,
    type TEXT CHECK (type IS NULL OR type IN ('expense', 'income')),
    amount INTEGER NOT NULL CHECK (amount >= 0),
    memo TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS summaries (
    owner_id TEXT NOT NULL,
    scope TEXT NOT NULL CHECK (scope IN ('daily', 'summary')),
    key TEXT NOT NULL,
    doc_json TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    PRIMARY KEY (owner_id, scope, key)
);

CREATE INDEX IF NOT EXISTS idx_stress_owner_date ON stress_events(owner_id, date);
CREATE INDEX IF NOT EXISTS idx_finance_owner_date ON finance_events(owner_id, date);
"""


class EventStore(Protocol):
    """What the insight engine needs from storage."""

    def fetch_all_stress_events(self, owner_id: str) -> list[StressEvent]: ...

    def fetch_all_finance_events(self, owner_id: str) -> list[FinanceEvent]: ...

    def upsert_summary(
        self, owner_id: str, key: str, fields: dict[str, Any], scope: str = DAILY_SCOPE
    ) -> bool: ...

    def read_summary(
        self, owner_id: str, key: str, scope: str = DAILY_SCOPE
    ) -> dict[str, Any] | None: ...


def now_iso() -> str:
    return datetime.now(UTC).isoformat()


def encode_document(doc: dict[str, Any]) -> str:
    """Canonical JSON so identical documents are byte-identical."""
    return json.dumps(doc, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def decode_document(raw: str, scope: str, key: str) -> dict[str, Any]:
    try:
        doc = json.loads(raw)
    except ValueError as e:
        raise StoreError(f"corrupt {scope} summary {key}: {e}") from e
    if not isinstance(doc, dict):
        raise StoreError(f"corrupt {scope} summary {key}: not an object")
    return doc


class SQLiteStore:
    """SQLite-backed EventStore plus the event CRUD used by the journal."""

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = Path(db_path) if db_path else paths.db_path()
        self.init_schema()

    @contextmanager
    def _connection(self, immediate: bool = False) -> Iterator[sqlite3.Connection]:
        """Connection with commit on success, rollback + StoreError on failure."""
        try:
            conn = sqlite3.connect(str(self.db_path), timeout=30.0)
        except sqlite3.Error as e:
            logger.error("Cannot open store %s: %s", self.db_path, e)
            raise StoreError(f"cannot open store: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            if immediate:
                conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error("Store error: %s", e)
            raise StoreError(str(e)) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create tables. Safe to call multiple times."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connection() as conn:
            conn.executescript(SCHEMA)

    # -------------------------------------------------------------------------
    # Stress events
    # -------------------------------------------------------------------------

    def fetch_all_stress_events(self, owner_id: str) -> list[StressEvent]:
        with self._connection() as conn:
            rows = conn.execute(
                """SELECT * FROM stress_events WHERE owner_id = ?
                   ORDER BY date, created_at, rowid""",
                (owner_id,),
            ).fetchall()
        return [StressEvent.from_dict(dict(row)) for row in rows]

    def get_stress_event(self, owner_id: str, event_id: str) -> StressEvent | None:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM stress_events WHERE id = ? AND owner_id = ?",
                (event_id, owner_id),
            ).fetchone()
        return StressEvent.from_dict(dict(row)) if row else None

    def add_stress_event(self, event: StressEvent) -> StressEvent:
        ts = now_iso()
        with self._connection() as conn:
            conn.execute(
                """INSERT INTO stress_events
                   (id, owner_id, date, mood, context, memo, score, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    event.id,
                    event.owner_id,
                    event.date,
                    event.mood,
                    event.context,
                    event.memo,
                    event.score,
                    ts,
                    ts,
                ),
            )
        return event

    def update_stress_event(self, event: StressEvent) -> bool:
        with self._connection() as conn:
            cur = conn.execute(
                """UPDATE stress_events
                   SET date = ?, mood = ?, context = ?, memo = ?, score = ?, updated_at = ?
                   WHERE id = ? AND owner_id = ?""",
                (
                    event.date,
                    event.mood,
                    event.context,
                    event.memo,
                    event.score,
                    now_iso(),
                    event.id,
                    event.owner_id,
                ),
            )
            return cur.rowcount > 0

    def delete_stress_event(self, owner_id: str, event_id: str) -> bool:
        with self._connection() as conn:
            cur = conn.execute(
                "DELETE FROM stress_events WHERE id = ? AND owner_id = ?",
                (event_id, owner_id),
            )
            return cur.rowcount > 0

    # -------------------------------------------------------------------------
    # Finance events
    # -------------------------------------------------------------------------

    def fetch_all_finance_events(self, owner_id: str) -> list[FinanceEvent]:
        with self._connection() as conn:
            rows = conn.execute(
                """SELECT * FROM finance_events WHERE owner_id = ?
                   ORDER BY date, created_at, rowid""",
                (owner_id,),
            ).fetchall()
        return [FinanceEvent.from_dict(dict(row)) for row in rows]

    def get_finance_event(self, owner_id: str, event_id: str) -> FinanceEvent | None:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM finance_events WHERE id = ? AND owner_id = ?",
                (event_id, owner_id),
            ).fetchone()
        return FinanceEvent.from_dict(dict(row)) if row else None

    def add_finance_event(self, event: FinanceEvent) -> FinanceEvent:
        ts = now_iso()
        with self._connection() as conn:
            conn.execute(
                """INSERT INTO finance_events
                   (id, owner_id, date, category, type, amount, memo, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    event.id,
                    event.owner_id,
                    event.date,
                    event.category,
                    event.type,
                    event.amount,
                    event.memo,
                    ts,
                    ts,
                ),
            )
        return event

    def update_finance_event(self, event: FinanceEvent) -> bool:
        with self._connection() as conn:
            cur = conn.execute(
                """UPDATE finance_events
                   SET date = ?, category = ?, type = ?, amount = ?, memo = ?, updated_at = ?
                   WHERE id = ? AND owner_id = ?""",
                (
                    event.date,
                    event.category,
                    event.type,
                    event.amount,
                    event.memo,
                    now_iso(),
                    event.id,
                    event.owner_id,
                ),
            )
            return cur.rowcount > 0

    def delete_finance_event(self, owner_id: str, event_id: str) -> bool:
        with self._connection() as conn:
            cur = conn.execute(
                "DELETE FROM finance_events WHERE id = ? AND owner_id = ?",
                (event_id, owner_id),
            )
            return cur.rowcount > 0

    # -------------------------------------------------------------------------
    # Summary documents
    # -------------------------------------------------------------------------

    def upsert_summary(
        self, owner_id: str, key: str, fields: dict[str, Any], scope: str = DAILY_SCOPE
    ) -> bool:
        """
        Merge `fields` into the (owner_id, scope, key) document, creating it if absent.

        Returns False without writing when the merged document equals the
        stored one, so re-running with identical input changes nothing,
        `updated_at` included.
        """
        with self._connection(immediate=True) as conn:
            row = conn.execute(
                "SELECT doc_json FROM summaries WHERE owner_id = ? AND scope = ? AND key = ?",
                (owner_id, scope, key),
            ).fetchone()
            current = decode_document(row["doc_json"], scope, key) if row else {}
            encoded = encode_document({**current, **fields})
            if row and encoded == row["doc_json"]:
                return False
            conn.execute(
                """INSERT INTO summaries (owner_id, scope, key, doc_json, updated_at)
                   VALUES (?, ?, ?, ?, ?)
                   ON CONFLICT(owner_id, scope, key)
                   DO UPDATE SET doc_json = excluded.doc_json, updated_at = excluded.updated_at""",
                (owner_id, scope, key, encoded, now_iso()),
            )
        logger.debug("Upserted %s summary %s for %s", scope, key, owner_id)
        return True

    def read_summary(
        self, owner_id: str, key: str, scope: str = DAILY_SCOPE
    ) -> dict[str, Any] | None:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT doc_json FROM summaries WHERE owner_id = ? AND scope = ? AND key = ?",
                (owner_id, scope, key),
            ).fetchone()
        if row is None:
            return None
        return decode_document(row["doc_json"], scope, key)
