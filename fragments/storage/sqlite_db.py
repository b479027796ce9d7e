"""SQLite-backed key/value store with the same contract as MemoryDB."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, List, Optional

from common.logging_config import get_logger
from fragments.exceptions import StorageError

logger = get_logger(__name__)


class SqliteDB:
    """
    Durable owner-partitioned store, one row per (owner_id, item_id).

    A new connection is opened per call, so one instance is safe to share
    across request threads.
    """

    def __init__(self, database_path: str, table: str = "fragments") -> None:
        self._database_path = database_path
        self._table = table
        self.init_database()

    @contextmanager
    def get_db_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database connections.
        """
        conn = sqlite3.connect(self._database_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def init_database(self) -> None:
        """
        Create the database file and table if they don't exist.
        """
        Path(self._database_path).parent.mkdir(parents=True, exist_ok=True)

        with self._execute() as conn:
            cursor = conn.cursor()
            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    owner_id TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    value BLOB,
                    PRIMARY KEY(owner_id, item_id)
                )
            """)
            conn.commit()

    @contextmanager
    def _execute(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            with self.get_db_connection() as conn:
                yield conn
        except sqlite3.Error as e:
            logger.error(f"SQLite operation failed on {self._database_path}: {e}", exc_info=True)
            raise StorageError("metadata store operation failed") from e

    def put(self, owner_id: str, item_id: str, value: Any) -> None:
        with self._execute() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO {self._table} (owner_id, item_id, value) VALUES (?, ?, ?)",
                (owner_id, item_id, value)
            )
            conn.commit()

    def get(self, owner_id: str, item_id: str) -> Optional[Any]:
        with self._execute() as conn:
            row = conn.execute(
                f"SELECT value FROM {self._table} WHERE owner_id = ? AND item_id = ?",
                (owner_id, item_id)
            ).fetchone()
        return None if row is None else row["value"]

    def query(self, owner_id: str) -> List[Any]:
        with self._execute() as conn:
            rows = conn.execute(
                f"SELECT value FROM {self._table} WHERE owner_id = ?",
                (owner_id,)
            ).fetchall()
        return [row["value"] for row in rows]

    def delete(self, owner_id: str, item_id: str) -> None:
        with self._execute() as conn:
            conn.execute(
                f"DELETE FROM {self._table} WHERE owner_id = ? AND item_id = ?",
                (owner_id, item_id)
            )
            conn.commit()
