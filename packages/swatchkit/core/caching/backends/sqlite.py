"""SQLite storage for the persistent cache.

Two tables: ``entries`` (one row per stored key) and ``cache_stats`` (one
aggregate row per scope). Every entry mutation and the matching stats
adjustment commit in the same transaction, and aggregates are only ever
changed with ``SET x = x + ?``.

Usage::

    storage = SQLiteCacheStorage(Path("cache.db"))
    storage.open()
    try:
        storage.ensure_scope("abc123")
        storage.put(entry)
    finally:
        storage.close()
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from swatchkit.core.caching.models import (
    CacheEntry,
    CacheEntryInfo,
    CacheEntryMetadata,
    CacheStats,
)
from swatchkit.core.errors import CacheIOError

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS entries (
    key TEXT PRIMARY KEY,
    scope TEXT NOT NULL,
    data BLOB NOT NULL,
    metadata_json TEXT NOT NULL,
    created_at REAL NOT NULL,
    last_accessed_at REAL NOT NULL,
    access_count INTEGER NOT NULL DEFAULT 0,
    size_bytes INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_entries_scope ON entries (scope);
CREATE INDEX IF NOT EXISTS idx_entries_created ON entries (scope, created_at);
CREATE TABLE IF NOT EXISTS cache_stats (
    scope TEXT PRIMARY KEY,
    hits INTEGER NOT NULL DEFAULT 0,
    misses INTEGER NOT NULL DEFAULT 0,
    total_size INTEGER NOT NULL DEFAULT 0,
    item_count INTEGER NOT NULL DEFAULT 0
);
"""


class SQLiteCacheStorage:
    """Synchronous, thread-safe SQLite store.

    All methods raise CacheIOError on database failure. One connection is
    shared and guarded by a lock, so calls from ``asyncio.to_thread`` workers
    are serialized.

    Args:
        db_path: Database file, or None for an in-memory database.
        enable_wal: Enable WAL journal mode (file databases only).
    """

    def __init__(self, db_path: Path | None = None, enable_wal: bool = True) -> None:
        self._db_path = db_path
        self._enable_wal = enable_wal
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Open the connection and create the schema. Safe to call twice."""
        with self._lock:
            if self._conn is not None:
                return
            try:
                if self._db_path is None:
                    conn = sqlite3.connect(":memory:", check_same_thread=False)
                else:
                    self._db_path.parent.mkdir(parents=True, exist_ok=True)
                    conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
                    if self._enable_wal:
                        conn.execute("PRAGMA journal_mode=WAL")
                conn.row_factory = sqlite3.Row
                conn.execute("PRAGMA synchronous=NORMAL")
                conn.executescript(SCHEMA)
            except (sqlite3.Error, OSError) as exc:
                raise CacheIOError(f"Failed to open cache database {self._db_path}: {exc}") from exc
            self._conn = conn
        logger.debug("Opened cache database %s", self._db_path or ":memory:")

    def close(self) -> None:
        """Close the connection. Safe to call multiple times."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise CacheIOError("Cache database is not open")
        return self._conn

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def ensure_scope(self, scope: str) -> None:
        with self._lock:
            conn = self._connection()
            try:
                with conn:
                    conn.execute("INSERT OR IGNORE INTO cache_stats (scope) VALUES (?)", (scope,))
            except sqlite3.Error as exc:
                raise CacheIOError(f"Failed to register scope {scope}: {exc}") from exc

    def load_stats(self, scope: str) -> CacheStats:
        with self._lock:
            conn = self._connection()
            try:
                row = conn.execute(
                    "SELECT hits, misses, total_size, item_count FROM cache_stats WHERE scope = ?",
                    (scope,),
                ).fetchone()
            except sqlite3.Error as exc:
                raise CacheIOError(f"Failed to load stats for {scope}: {exc}") from exc
        if row is None:
            return CacheStats()
        return CacheStats(
            hits=row["hits"],
            misses=row["misses"],
            total_size=max(0, row["total_size"]),
            item_count=max(0, row["item_count"]),
        )

    def record_lookups(self, scope: str, hits: int = 0, misses: int = 0) -> None:
        with self._lock:
            conn = self._connection()
            try:
                with conn:
                    conn.execute(
                        "UPDATE cache_stats SET hits = hits + ?, misses = misses + ? WHERE scope = ?",
                        (hits, misses, scope),
                    )
            except sqlite3.Error as exc:
                raise CacheIOError(f"Failed to record lookups for {scope}: {exc}") from exc

    @staticmethod
    def _adjust(conn: sqlite3.Connection, scope: str, size_delta: int, count_delta: int) -> None:
        conn.execute(
            "UPDATE cache_stats SET total_size = total_size + ?, item_count = item_count + ? "
            "WHERE scope = ?",
            (size_delta, count_delta, scope),
        )

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            conn = self._connection()
            try:
                row = conn.execute("SELECT * FROM entries WHERE key = ?", (key,)).fetchone()
            except sqlite3.Error as exc:
                raise CacheIOError(f"Failed to read {key}: {exc}") from exc
        if row is None:
            return None
        try:
            metadata = CacheEntryMetadata.model_validate(json.loads(row["metadata_json"]))
        except (ValueError, ValidationError) as exc:
            raise CacheIOError(f"Corrupt metadata for {key}: {exc}") from exc
        return CacheEntry(
            key=row["key"],
            scope=row["scope"],
            data=bytes(row["data"]),
            metadata=metadata,
            created_at=row["created_at"],
            last_accessed_at=row["last_accessed_at"],
            access_count=row["access_count"],
            size_bytes=row["size_bytes"],
        )

    def put(self, entry: CacheEntry) -> tuple[int, int]:
        """Insert or replace an entry.

        Returns:
            ``(size_delta, count_delta)`` applied to the scope aggregate.
        """
        with self._lock:
            conn = self._connection()
            try:
                with conn:
                    old = conn.execute(
                        "SELECT size_bytes FROM entries WHERE key = ?", (entry.key,)
                    ).fetchone()
                    conn.execute(
                        "INSERT OR REPLACE INTO entries (key, scope, data, metadata_json, "
                        "created_at, last_accessed_at, access_count, size_bytes) "
                        "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                        (
                            entry.key,
                            entry.scope,
                            sqlite3.Binary(entry.data),
                            entry.metadata.model_dump_json(),
                            entry.created_at,
                            entry.last_accessed_at,
                            entry.access_count,
                            entry.size_bytes,
                        ),
                    )
                    size_delta = entry.size_bytes - (old["size_bytes"] if old else 0)
                    count_delta = 0 if old else 1
                    self._adjust(conn, entry.scope, size_delta, count_delta)
            except sqlite3.Error as exc:
                raise CacheIOError(f"Failed to write {entry.key}: {exc}") from exc
        return size_delta, count_delta

    def touch(self, key: str, now: float) -> None:
        """Record an access: bump the counter and last-accessed time in place."""
        with self._lock:
            conn = self._connection()
            try:
                with conn:
                    conn.execute(
                        "UPDATE entries SET access_count = access_count + 1, last_accessed_at = ? "
                        "WHERE key = ?",
                        (now, key),
                    )
            except sqlite3.Error as exc:
                raise CacheIOError(f"Failed to update access for {key}: {exc}") from exc

    def delete(self, key: str) -> int | None:
        """Delete an entry.

        Returns:
            Size of the removed entry, or None if it did not exist.
        """
        with self._lock:
            conn = self._connection()
            try:
                with conn:
                    row = conn.execute(
                        "SELECT scope, size_bytes FROM entries WHERE key = ?", (key,)
                    ).fetchone()
                    if row is None:
                        return None
                    conn.execute("DELETE FROM entries WHERE key = ?", (key,))
                    self._adjust(conn, row["scope"], -row["size_bytes"], -1)
            except sqlite3.Error as exc:
                raise CacheIOError(f"Failed to delete {key}: {exc}") from exc
        return row["size_bytes"]

    def list_entries(self, scope: str) -> list[CacheEntryInfo]:
        """Bookkeeping for every entry in a scope, payloads excluded."""
        with self._lock:
            conn = self._connection()
            try:
                rows = conn.execute(
                    "SELECT key, created_at, last_accessed_at, access_count, size_bytes "
                    "FROM entries WHERE scope = ? ORDER BY created_at",
                    (scope,),
                ).fetchall()
            except sqlite3.Error as exc:
                raise CacheIOError(f"Failed to list entries for {scope}: {exc}") from exc
        return [
            CacheEntryInfo(
                key=r["key"],
                created_at=r["created_at"],
                last_accessed_at=r["last_accessed_at"],
                access_count=r["access_count"],
                size_bytes=r["size_bytes"],
            )
            for r in rows
        ]

    def clear_scope(self, scope: str) -> int:
        """Delete every entry of a scope and zero its aggregate."""
        with self._lock:
            conn = self._connection()
            try:
                with conn:
                    cursor = conn.execute("DELETE FROM entries WHERE scope = ?", (scope,))
                    conn.execute(
                        "UPDATE cache_stats SET hits = 0, misses = 0, total_size = 0, "
                        "item_count = 0 WHERE scope = ?",
                        (scope,),
                    )
            except sqlite3.Error as exc:
                raise CacheIOError(f"Failed to clear scope {scope}: {exc}") from exc
        return cursor.rowcount

    def scopes(self) -> list[str]:
        with self._lock:
            conn = self._connection()
            try:
                rows = conn.execute("SELECT scope FROM cache_stats ORDER BY scope").fetchall()
            except sqlite3.Error as exc:
                raise CacheIOError(f"Failed to list scopes: {exc}") from exc
        return [r["scope"] for r in rows]

    def delete_many(self, keys: Iterable[str]) -> int:
        """Delete several entries; returns how many existed."""
        return sum(1 for key in keys if self.delete(key) is not None)


__all__ = [
    "SCHEMA",
    "SQLiteCacheStorage",
]
