"""Business logic service for URL shortener."""

import logging
import uuid
from typing import Iterable, Optional

from ..models import URL, DeleteRequest
from ..repository import URLRepository
from ..utils.shortener import generate_short_code
from .batcher import DeleteBatcher

logger = logging.getLogger(__name__)


class URLService:
    """Service layer for URL shortening and ownership.

    Reads and writes go straight to the repository. Deletions are queued and
    applied asynchronously by a DeleteBatcher started with the service.
    The service is safe to share between request threads.
    """

    def __init__(
        self,
        repository: URLRepository,
        short_code_length: int = 6,
        queue_size: int = 100,
        batch_size: int = 50,
        flush_interval: float = 0.1,
    ):
        """Initialize URL service and start its delete batcher.

        Args:
            repository: Persistence backend
            short_code_length: Length of generated short codes
            queue_size: Capacity of the pending delete queue
            batch_size: Pending deletes that trigger an immediate flush
            flush_interval: Idle seconds before pending deletes are flushed
        """
        self.repository = repository
        self.short_code_length = short_code_length
        self.batcher = DeleteBatcher(
            repository,
            queue_size=queue_size,
            batch_size=batch_size,
            flush_interval=flush_interval,
        )
        self.batcher.start()

    def __enter__(self) -> "URLService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def shorten(self, original_url: str, url_id: str = "", user_id: str = "") -> tuple[URL, bool]:
        """Create a short URL for an original URL.

        Args:
            original_url: The original long URL
            url_id: Record id to use; a UUID4 is generated when empty
            user_id: Owner of the new record, empty for anonymous callers

        Returns:
            The record and whether it was created. When the original URL is
            already known, the existing record (with its original owner) is
            returned with False.

        Raises:
            RepositoryError: If the repository fails
        """
        url = URL(
            id=url_id or str(uuid.uuid4()),
            original_url=original_url,
            short_url=generate_short_code(self.short_code_length),
            user_id=user_id,
        )
        url, created = self.repository.save(url)
        if not created:
            logger.info(f"URL already shortened: {original_url} -> {url.short_url}")
        return url, created

    def resolve(self, short_url: str) -> URL:
        """Get the record for a short code, deleted or not.

        Raises:
            URLNotFoundError: If the short code does not exist
        """
        return self.repository.get_by_short_url(short_url)

    def get_user_urls(self, user_id: str) -> list[URL]:
        """Get the live records created by a user; empty when there are none."""
        return self.repository.get_by_user_id(user_id)

    def batch_delete(self, short_urls: Iterable[str], user_id: str) -> None:
        """Schedule the user's short URLs for soft deletion.

        Returns as soon as the request is queued; blocks only while the queue
        is full. Whether any code existed or belonged to the user is never
        reported back.

        Raises:
            ServiceClosedError: If the service has been closed
        """
        self.batcher.submit(DeleteRequest(short_urls=tuple(short_urls), user_id=user_id))

    def ping(self) -> None:
        """Check the repository is reachable."""
        self.repository.ping()

    def close(self, timeout: Optional[float] = None) -> None:
        """Flush pending deletions and release the repository."""
        self.batcher.stop(timeout)
        self.repository.close()
        logger.info("URL service closed")
