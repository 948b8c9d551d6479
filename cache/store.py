"""
cache/store.py -- SQLite-backed TTL cache for authentication sessions.

Maps an opaque token to the identity record issued for it. Every entry has
its own expiry timestamp; an expired entry reads as absent and is deleted
on access. Sessions are written by whoever issues tokens (the CLI in
main.py, or an external login service sharing the same file) and read by
the API on every request.

Usage:
    cache = SessionCache()
    cache.set(token, {"user_id": 1, "client_id": "abc", "admin": False}, ttl=3600)
    record = cache.get(token)       # returns dict or None
    cache.expire(token, 60)         # shorten or extend the lifetime
    cache.purge_expired()           # call periodically to trim old entries
"""

import json
import sqlite3
import threading
import time
from pathlib import Path
from typing import Optional, Union

_DEFAULT_DB = Path(__file__).parent / "sessions.db"
_DEFAULT_TTL = 60 * 60  # 1 hour in seconds

_DDL = """
CREATE TABLE IF NOT EXISTS sessions (
    token       TEXT PRIMARY KEY,
    data        TEXT NOT NULL,
    expires_at  REAL NOT NULL
);
"""


class SessionCache:
    def __init__(self, db_path: Union[Path, str] = _DEFAULT_DB, ttl: int = _DEFAULT_TTL) -> None:
        self.ttl = ttl
        # One connection shared by the request thread pool; the lock keeps
        # statement + commit pairs from interleaving.
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute(_DDL)
        self._conn.commit()

    def get(self, token: str) -> Optional[dict]:
        """Return the record stored for token if it exists and hasn't expired."""
        with self._lock:
            row = self._conn.execute(
                "SELECT data, expires_at FROM sessions WHERE token = ?",
                (token,),
            ).fetchone()
            if row is None:
                return None
            data, expires_at = row
            if time.time() >= expires_at:
                self._conn.execute("DELETE FROM sessions WHERE token = ?", (token,))
                self._conn.commit()
                return None
        return json.loads(data)

    def set(self, token: str, record: dict, ttl: Optional[int] = None) -> None:
        """Store record for token, replacing any existing entry."""
        lifetime = ttl if ttl is not None else self.ttl
        with self._lock:
            self._conn.execute(
                "INSERT OR REPLACE INTO sessions (token, data, expires_at) VALUES (?, ?, ?)",
                (token, json.dumps(record), time.time() + lifetime),
            )
            self._conn.commit()

    def expire(self, token: str, seconds: int) -> bool:
        """Reset the lifetime of an existing entry. Returns False if token is unknown."""
        with self._lock:
            cursor = self._conn.execute(
                "UPDATE sessions SET expires_at = ? WHERE token = ?",
                (time.time() + seconds, token),
            )
            self._conn.commit()
        return cursor.rowcount > 0

    def delete(self, token: str) -> bool:
        with self._lock:
            cursor = self._conn.execute("DELETE FROM sessions WHERE token = ?", (token,))
            self._conn.commit()
        return cursor.rowcount > 0

    def purge_expired(self) -> int:
        """Delete all expired entries. Returns number of rows removed."""
        with self._lock:
            cursor = self._conn.execute("DELETE FROM sessions WHERE expires_at <= ?", (time.time(),))
            self._conn.commit()
        return cursor.rowcount

    def close(self) -> None:
        self._conn.close()
