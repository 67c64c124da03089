import sqlite3
import threading
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

from openbid.core.storage.base import Storage, WriteOp
from openbid.utils.logger import get_logger

logger = get_logger("storage.sqlite")


class SQLiteStorage(Storage):
    """
    SQLite backend for persistent storage.

    Keys are stored as BLOBs, which SQLite compares with memcmp, so
    ``ORDER BY key`` yields the same ascending byte order as the
    in-memory backend.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._conn_local = threading.local()

        # Ensure directory exists
        if not self.db_path.parent.exists():
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_schema()
        logger.debug(f"SQLite storage opened at {self.db_path}")

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create connection for current thread."""
        if not hasattr(self._conn_local, "conn"):
            self._conn_local.conn = sqlite3.connect(
                self.db_path,
                timeout=30.0,
                check_same_thread=False
            )
            self._conn_local.conn.row_factory = sqlite3.Row
            # Enable WAL mode for better concurrency
            self._conn_local.conn.execute("PRAGMA journal_mode=WAL;")
            self._conn_local.conn.execute("PRAGMA synchronous=NORMAL;")
        return self._conn_local.conn

    def _init_schema(self):
        """Initialize database schema."""
        conn = self._get_conn()
        with conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key BLOB PRIMARY KEY,
                    value BLOB NOT NULL
                )
            """)

    # =========================================================================
    # Key-Value Operations
    # =========================================================================

    def get(self, key: bytes) -> Optional[bytes]:
        conn = self._get_conn()
        cursor = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = cursor.fetchone()
        return bytes(row['value']) if row else None

    def set(self, key: bytes, value: bytes) -> None:
        conn = self._get_conn()
        with conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                (key, value)
            )

    def remove(self, key: bytes) -> None:
        conn = self._get_conn()
        with conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def range(
        self,
        start: Optional[bytes] = None,
        end: Optional[bytes] = None,
    ) -> Iterator[Tuple[bytes, bytes]]:
        clauses = []
        params = []
        if start is not None:
            clauses.append("key >= ?")
            params.append(start)
        if end is not None:
            clauses.append("key < ?")
            params.append(end)

        query = "SELECT key, value FROM kv_store"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY key ASC"

        conn = self._get_conn()
        rows = conn.execute(query, params).fetchall()
        for row in rows:
            yield bytes(row['key']), bytes(row['value'])

    def write_batch(self, ops: Iterable[WriteOp]) -> None:
        """Atomically apply a batch of writes."""
        conn = self._get_conn()
        with conn:
            for key, value in ops:
                if value is None:
                    conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                else:
                    conn.execute(
                        "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                        (key, value)
                    )

    def close(self) -> None:
        """Close the connection of the current thread."""
        conn = getattr(self._conn_local, "conn", None)
        if conn is not None:
            conn.close()
            del self._conn_local.conn
