"""Database module for URL Shortener Service.

This module owns the SQLite connection used by the relational repository.
A single connection is shared between request threads and the background
delete batcher, so every statement runs under one lock.
"""

import sqlite3
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from .config import settings

logger = logging.getLogger(__name__)


class Database:
    """Database class for managing a thread-safe SQLite connection."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Use ":memory:" for in-memory database.
        """
        if db_path:
            self.db_path = db_path
        else:
            self.db_path = settings.database_dsn
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    def _get_connection(self) -> sqlite3.Connection:
        """Create or return the database connection.

        The connection is opened with check_same_thread disabled; callers
        must hold the lock while using it.

        Returns:
            SQLite connection.
        """
        if self._connection is None:
            self._connection = sqlite3.connect(
                self.db_path,
                check_same_thread=False
            )
            self._connection.row_factory = sqlite3.Row
        return self._connection

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    def init_db(self) -> None:
        """Initialize database tables."""
        create_table_sql = """
        CREATE TABLE IF NOT EXISTS urls (
            id TEXT NOT NULL,
            short_url TEXT NOT NULL UNIQUE,
            original_url TEXT NOT NULL UNIQUE,
            user_id TEXT NOT NULL DEFAULT '',
            is_deleted INTEGER NOT NULL DEFAULT 0
        )
        """
        create_index_sql = "CREATE INDEX IF NOT EXISTS idx_user_id ON urls(user_id)"
        with self.transaction() as cursor:
            cursor.execute(create_table_sql)
            cursor.execute(create_index_sql)
        logger.info("Database initialized successfully")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """Run several statements atomically.

        Yields:
            A cursor bound to the shared connection. The transaction is
            committed on exit and rolled back if the block raises.
        """
        with self._lock:
            conn = self._get_connection()
            cursor = conn.cursor()
            try:
                yield cursor
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                logger.error(f"Transaction failed: {e}")
                raise
            finally:
                cursor.close()

    def execute(
        self, query: str, params: tuple = (), fetch: bool = False
    ) -> Optional[list[dict]]:
        """Execute a SQL query.

        Args:
            query: SQL query string.
            params: Query parameters.
            fetch: Whether to fetch results.

        Returns:
            Query results if fetch=True, None otherwise.
        """
        with self.transaction() as cursor:
            cursor.execute(query, params)
            if fetch:
                return [dict(row) for row in cursor.fetchall()]
            return None

    def ping(self) -> None:
        """Check that the database answers a trivial query."""
        self.execute("SELECT 1", fetch=True)
