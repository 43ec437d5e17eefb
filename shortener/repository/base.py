"""Abstract base class for URL repositories.

This class establishes the contract every persistence backend follows,
regardless of where records live (process memory, SQLite, ...).

Responsibilities:
    - Store URL records and detect an already-known original URL.
    - Look records up by short code and by owner.
    - Soft delete records on behalf of their owner.

Implementations must be safe for concurrent use: request threads call
``save``/``get_*`` while the delete batcher thread calls ``batch_delete``.

Example:
    >>> from shortener.models import URL
    >>> from shortener.repository import MemoryURLRepository

    >>> repo = MemoryURLRepository()
    >>> url, created = repo.save(URL(id="1", original_url="https://example.com", short_url="abc123"))
    >>> created
    True
    >>> repo.get_by_short_url("abc123").original_url
    'https://example.com'
"""

from abc import ABC, abstractmethod
from typing import Iterable

from ..models import URL


class URLRepository(ABC):
    """Interface for URL persistence backends.

    Methods:
        save(url) -> tuple[URL, bool]:
            Store a record. Returns the stored record and True, or the record
            already holding the same original URL and False.
            Raises RepositoryError on storage failure.

        get_by_short_url(short_url) -> URL:
            Raises URLNotFoundError if the short code is unknown.

        get_by_user_id(user_id) -> list[URL]:
            Records owned by the user, soft-deleted ones excluded.

        batch_delete(short_urls, user_id) -> None:
            Soft delete the records owned by the user. Unknown codes, codes
            owned by someone else and already deleted records are ignored.
    """

    @abstractmethod
    def save(self, url: URL) -> tuple[URL, bool]:
        """Store a URL record unless its original URL is already known.

        Args:
            url (URL):
                Candidate record.

        Returns:
            tuple[URL, bool]: The persisted record and whether it was created.
            When the original URL already exists, the existing record is
            returned unchanged (ownership is not transferred) with False.

        Raises:
            ShortCodeCollisionError:
                If the short code is taken by a different original URL.

            RepositoryError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get_by_short_url(self, short_url: str) -> URL:
        """Retrieve a record, including its deleted flag, by short code.

        Raises:
            URLNotFoundError:
                If no record with the given short code exists.

            RepositoryError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get_by_user_id(self, user_id: str) -> list[URL]:
        """Retrieve all records created by a user.

        Returns:
            list[URL]: Records that are not soft deleted; empty when none.

        Raises:
            RepositoryError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def batch_delete(self, short_urls: Iterable[str], user_id: str) -> None:
        """Mark the user's records with the given short codes as deleted.

        Raises:
            RepositoryError:
                If there is an error in the data store.
        """
        pass

    def ping(self) -> None:
        """Check that the backend is reachable.

        Raises:
            RepositoryError: If the backend cannot be reached.
        """

    def close(self) -> None:
        """Release backend resources."""
