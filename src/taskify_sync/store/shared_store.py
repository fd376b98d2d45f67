# src/taskify_sync/store/shared_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from ..errors import StoreError

logger = logging.getLogger(__name__)


class SharedStore:
    """
    SQLite-backed string key/value store shared by every execution context.

    Layout:
    - one table keyed by (namespace, key); the namespace mirrors the platform's
      preferences file name so several stores can live in one database file

    Consistency model:
    - each method opens its own SQLite connection, so no context needs another
      one to be alive
    - put_string replaces the whole value in a single committed statement;
      concurrent writers are last-writer-wins and one write can silently
      overwrite another (there is no cross-context lock to take)
    """

    def __init__(
        self,
        db_path: str | Path = "shared_prefs.sqlite3",
        *,
        namespace: str = "FlutterSharedPreferences",
    ) -> None:
        self._db_path = Path(db_path)
        self._namespace = namespace
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SharedStore ready db=%s namespace=%s", self._db_path, self._namespace)

    @property
    def namespace(self) -> str:
        return self._namespace

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=5.0)
        except sqlite3.Error as e:
            raise StoreError(f"cannot open {self._db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS prefs (
                    namespace TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL,
                    PRIMARY KEY (namespace, key)
                )
                """
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"schema setup failed: {e}") from e
        finally:
            conn.close()

    # ---- public API ----

    def get_string(self, key: str, default: str | None = None) -> str | None:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "SELECT value FROM prefs WHERE namespace = ? AND key = ?",
                (self._namespace, key),
            )
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"read failed key={key}: {e}") from e
        finally:
            conn.close()
        if row is None:
            return default
        return str(row["value"])

    def put_string(self, key: str, value: str) -> None:
        """Atomically replace the whole value stored under key."""
        if not isinstance(value, str):
            raise TypeError("value must be a str")

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO prefs(namespace, key, value, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(namespace, key)
                DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (self._namespace, key, value, time.time()),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"write failed key={key}: {e}") from e
        finally:
            conn.close()
        logger.debug("SharedStore put key=%s len=%d", key, len(value))

    def remove(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "DELETE FROM prefs WHERE namespace = ? AND key = ?",
                (self._namespace, key),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"delete failed key={key}: {e}") from e
        finally:
            conn.close()

    def contains(self, key: str) -> bool:
        return self.get_string(key) is not None

    def keys(self) -> list[str]:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "SELECT key FROM prefs WHERE namespace = ? ORDER BY key ASC",
                (self._namespace,),
            )
            return [str(r["key"]) for r in cur.fetchall()]
        except sqlite3.Error as e:
            raise StoreError(f"key listing failed: {e}") from e
        finally:
            conn.close()
