"""SQLite storage adapter.

Implements the core StatePort using a simple SQLite database.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Optional

# Single row key; the bot polls exactly one feed.
CURSOR_KEY = "updates"


class SQLiteStorage:
    """Thin SQLite wrapper that satisfies the StatePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - poller_state: last fully processed update_id
        - replies: ledger of corrections already sent
        """

        with self._connect() as conn:
            # poller_state keeps the cursor so a restart resumes after the
            # last processed update instead of the feed's default start.
            # Fields:
            # - name: cursor key (PRIMARY KEY)
            # - cursor: highest update_id fully processed
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS poller_state (
                    name TEXT PRIMARY KEY,
                    cursor INTEGER NOT NULL
                )
                """
            )
            # replies makes corrections idempotent under re-delivery.
            # Fields:
            # - chat_id, message_id: the message we replied to (PRIMARY KEY)
            # - update_id: update that carried the message, for tracing
            # - sent_at: timestamp used for TTL cleanup
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS replies (
                    chat_id INTEGER NOT NULL,
                    message_id INTEGER NOT NULL,
                    update_id INTEGER NOT NULL,
                    sent_at TIMESTAMP NOT NULL,
                    PRIMARY KEY (chat_id, message_id)
                )
                """
            )

    def get_cursor(self) -> Optional[int]:
        """Return the persisted cursor, if any."""

        with self._connect() as conn:
            row = conn.execute(
                "SELECT cursor FROM poller_state WHERE name = ?",
                (CURSOR_KEY,),
            ).fetchone()
        return int(row["cursor"]) if row else None

    def set_cursor(self, cursor: int) -> None:
        """Upsert the cursor."""

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO poller_state (name, cursor)
                VALUES (?, ?)
                ON CONFLICT(name) DO UPDATE SET cursor = excluded.cursor
                """,
                (CURSOR_KEY, cursor),
            )

    def is_replied(self, chat_id: int, message_id: int) -> bool:
        """Check if a correction was already sent for this message."""

        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM replies WHERE chat_id = ? AND message_id = ?",
                (chat_id, message_id),
            ).fetchone()
        return row is not None

    def mark_replied(self, chat_id: int, message_id: int, update_id: int) -> None:
        """Record a sent correction if it is not recorded yet."""

        now = datetime.now(timezone.utc)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR IGNORE INTO replies (chat_id, message_id, update_id, sent_at)
                VALUES (?, ?, ?, ?)
                """,
                (chat_id, message_id, update_id, now.isoformat()),
            )

    def cleanup_replies(self, ttl_days: int) -> int:
        """Delete old ledger rows and return the number removed."""

        cutoff = datetime.now(timezone.utc) - timedelta(days=ttl_days)
        with self._connect() as conn:
            cur = conn.execute(
                "DELETE FROM replies WHERE sent_at < ?",
                (cutoff.isoformat(),),
            )
            return cur.rowcount
