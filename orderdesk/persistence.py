"""SQLite persistence for the signed-in session (token and user)."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from orderdesk.config import SESSION_DB_PATH
from orderdesk.models import User


@dataclass(frozen=True)
class SavedSession:
    """Stored bearer token and the user it belongs to."""

    token: str
    user: User
    saved_at: str


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _connect(db_path: str | None = None) -> sqlite3.Connection:
    db_file = Path(db_path or SESSION_DB_PATH)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(db_file)


def bootstrap_schema(db_path: str | None = None) -> None:
    """Create persistence schema if it does not already exist."""
    with _connect(db_path) as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS session (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                token TEXT NOT NULL,
                user_id TEXT NOT NULL,
                name TEXT NOT NULL,
                email TEXT NOT NULL,
                role TEXT NOT NULL DEFAULT 'customer',
                saved_at TEXT NOT NULL
            );
            """
        )


def save_session(token: str, user: User, db_path: str | None = None) -> SavedSession:
    """Replace the stored session with `token` for `user`."""
    if not token:
        raise ValueError("Cannot save a session without a token")

    saved_at = _utc_now_iso()
    with _connect(db_path) as conn:
        with conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO session (id, token, user_id, name, email, role, saved_at)
                VALUES (1, ?, ?, ?, ?, ?, ?)
                """,
                (token, user.user_id, user.name, user.email, user.role, saved_at),
            )
    return SavedSession(token=token, user=user, saved_at=saved_at)


def load_session(db_path: str | None = None) -> SavedSession | None:
    with _connect(db_path) as conn:
        row = conn.execute(
            "SELECT token, user_id, name, email, role, saved_at FROM session WHERE id = 1"
        ).fetchone()
    if row is None:
        return None
    token, user_id, name, email, role, saved_at = row
    return SavedSession(token=token, user=User(user_id=user_id, name=name, email=email, role=role), saved_at=saved_at)


def clear_session(db_path: str | None = None) -> None:
    with _connect(db_path) as conn:
        with conn:
            conn.execute("DELETE FROM session")
