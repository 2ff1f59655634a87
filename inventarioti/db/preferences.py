"""Named key-value preference stores kept in one SQLite table."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from .schema import ensure_schema


class PreferencesDB:
    """A flat string/bool store scoped by name (e.g. ``app_prefs``).

    Several stores can share one database file; each is a slice of the
    ``preferences`` table keyed by ``store``. Every write is its own
    transaction, so a value is either fully replaced or untouched.
    """

    def __init__(
        self,
        name: str,
        db_path: str | Path = "~/.local/share/inventarioti/prefs.db",
    ) -> None:
        self._name = name
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    @property
    def name(self) -> str:
        return self._name

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get_string(self, key: str, default: str | None = None) -> str | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT value FROM preferences WHERE store = ? AND key = ?",
            (self._name, key),
        ).fetchone()
        if row is None or row["value"] is None:
            return default
        return row["value"]

    def put_string(self, key: str, value: str) -> None:
        conn = self._get_conn()
        with conn:
            conn.execute(
                """INSERT INTO preferences (store, key, value)
                   VALUES (?, ?, ?)
                   ON CONFLICT(store, key) DO UPDATE SET
                     value=excluded.value,
                     updated_at=datetime('now', 'localtime')""",
                (self._name, key, value),
            )

    def get_bool(self, key: str, default: bool = False) -> bool:
        raw = self.get_string(key)
        if raw is None:
            return default
        return raw == "true"

    def put_bool(self, key: str, value: bool) -> None:
        self.put_string(key, "true" if value else "false")

    def contains(self, key: str) -> bool:
        return self.get_string(key) is not None

    def remove(self, key: str) -> None:
        conn = self._get_conn()
        with conn:
            conn.execute(
                "DELETE FROM preferences WHERE store = ? AND key = ?",
                (self._name, key),
            )

    def get_all(self) -> dict[str, str]:
        """Return every key in this store."""
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT key, value FROM preferences WHERE store = ? ORDER BY key",
            (self._name,),
        ).fetchall()
        return {r["key"]: r["value"] for r in rows}
