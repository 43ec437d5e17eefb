"""In-memory URL repository."""

import logging
import threading
from typing import Iterable

from ..models import URL
from .base import URLRepository
from .exceptions import ShortCodeCollisionError, URLNotFoundError

logger = logging.getLogger(__name__)


class MemoryURLRepository(URLRepository):
    """Repository keeping records in process memory.

    Records are indexed by short code and by original URL. Both indexes are
    updated under a single lock so that two concurrent saves of the same
    original URL create exactly one record.
    """

    def __init__(self):
        self._by_short: dict[str, URL] = {}
        self._by_original: dict[str, str] = {}
        self._lock = threading.RLock()

    def save(self, url: URL) -> tuple[URL, bool]:
        with self._lock:
            existing_short = self._by_original.get(url.original_url)
            if existing_short is not None:
                return self._by_short[existing_short].model_copy(), False

            if url.short_url in self._by_short:
                raise ShortCodeCollisionError(f"short url already taken: {url.short_url}")

            stored = url.model_copy()
            self._by_short[stored.short_url] = stored
            self._by_original[stored.original_url] = stored.short_url
            logger.debug(f"Saved short URL: {stored.short_url}")
            return stored.model_copy(), True

    def get_by_short_url(self, short_url: str) -> URL:
        with self._lock:
            url = self._by_short.get(short_url)
            if url is None:
                raise URLNotFoundError(short_url)
            return url.model_copy()

    def get_by_user_id(self, user_id: str) -> list[URL]:
        with self._lock:
            return [
                url.model_copy()
                for url in self._by_short.values()
                if url.user_id == user_id and not url.is_deleted
            ]

    def batch_delete(self, short_urls: Iterable[str], user_id: str) -> None:
        deleted = 0
        with self._lock:
            for short_url in short_urls:
                url = self._by_short.get(short_url)
                if url is not None and url.user_id == user_id and not url.is_deleted:
                    url.is_deleted = True
                    deleted += 1
        logger.debug(f"Soft deleted {deleted} URLs for user {user_id!r}")
