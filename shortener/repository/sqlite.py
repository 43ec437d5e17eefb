"""Relational URL repository backed by SQLite."""

import sqlite3
import logging
from typing import Iterable

from ..core.database import Database
from ..models import URL
from .base import URLRepository
from .exceptions import RepositoryError, ShortCodeCollisionError, URLNotFoundError

logger = logging.getLogger(__name__)

_COLUMNS = "id, short_url, original_url, user_id, is_deleted"
_MAX_PARAMS = 500


def _row_to_url(row: sqlite3.Row) -> URL:
    return URL(
        id=row["id"],
        short_url=row["short_url"],
        original_url=row["original_url"],
        user_id=row["user_id"],
        is_deleted=bool(row["is_deleted"]),
    )


class SQLiteURLRepository(URLRepository):
    """Repository storing records in the ``urls`` table."""

    def __init__(self, db: Database):
        """Initialize repository.

        Args:
            db: Database helper owning the connection. The schema is created
                if missing.
        """
        self.db = db
        try:
            self.db.init_db()
        except sqlite3.Error as e:
            raise RepositoryError(f"failed to initialize database: {e}") from e

    def save(self, url: URL) -> tuple[URL, bool]:
        insert_sql = """
        INSERT INTO urls (id, short_url, original_url, user_id)
        VALUES (?, ?, ?, ?)
        ON CONFLICT (original_url) DO NOTHING
        """
        select_sql = f"SELECT {_COLUMNS} FROM urls WHERE original_url = ?"
        try:
            with self.db.transaction() as cursor:
                cursor.execute(insert_sql, (url.id, url.short_url, url.original_url, url.user_id))
                if cursor.rowcount > 0:
                    logger.info(f"Created short URL: {url.short_url}")
                    return url.model_copy(), True
                cursor.execute(select_sql, (url.original_url,))
                row = cursor.fetchone()
        except sqlite3.IntegrityError as e:
            if "short_url" in str(e):
                raise ShortCodeCollisionError(f"short url already taken: {url.short_url}") from e
            raise RepositoryError(f"failed to save url: {e}") from e
        except sqlite3.Error as e:
            raise RepositoryError(f"failed to save url: {e}") from e

        if row is None:
            raise RepositoryError(f"conflicting url vanished: {url.original_url}")
        return _row_to_url(row), False

    def get_by_short_url(self, short_url: str) -> URL:
        query = f"SELECT {_COLUMNS} FROM urls WHERE short_url = ?"
        try:
            with self.db.transaction() as cursor:
                cursor.execute(query, (short_url,))
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise RepositoryError(f"failed to get url: {e}") from e
        if row is None:
            raise URLNotFoundError(short_url)
        return _row_to_url(row)

    def get_by_user_id(self, user_id: str) -> list[URL]:
        query = f"SELECT {_COLUMNS} FROM urls WHERE user_id = ? AND is_deleted = 0 ORDER BY rowid"
        try:
            with self.db.transaction() as cursor:
                cursor.execute(query, (user_id,))
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise RepositoryError(f"failed to query user urls: {e}") from e
        return [_row_to_url(row) for row in rows]

    def batch_delete(self, short_urls: Iterable[str], user_id: str) -> None:
        codes = list(short_urls)
        if not codes:
            return
        deleted = 0
        try:
            with self.db.transaction() as cursor:
                # SQLite caps the number of bound parameters per statement
                for start in range(0, len(codes), _MAX_PARAMS):
                    chunk = codes[start:start + _MAX_PARAMS]
                    placeholders = ", ".join("?" for _ in chunk)
                    cursor.execute(
                        f"UPDATE urls SET is_deleted = 1 "
                        f"WHERE short_url IN ({placeholders}) AND user_id = ? AND is_deleted = 0",
                        (*chunk, user_id),
                    )
                    deleted += cursor.rowcount
        except sqlite3.Error as e:
            raise RepositoryError(f"failed to delete urls: {e}") from e
        logger.info(f"Soft deleted {deleted} URLs for user {user_id!r}")

    def ping(self) -> None:
        try:
            self.db.ping()
        except sqlite3.Error as e:
            raise RepositoryError(f"database unavailable: {e}") from e

    def close(self) -> None:
        self.db.close()
