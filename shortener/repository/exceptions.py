"""Exceptions raised by URL repositories.

Classes:
    RepositoryError:
        Storage failure (connection issues, constraint violations, I/O errors).

    URLNotFoundError:
        Raised when no record matches the requested short code.

    ShortCodeCollisionError:
        Raised when a generated short code is already mapped to another URL.
"""


class RepositoryError(Exception):
    """Generic base class for storage failures."""

    pass


class URLNotFoundError(Exception):
    """Exception raised when a short code is not present in the repository."""

    def __init__(self, short_url: str):
        super().__init__(f"url not found: {short_url}")
        self.short_url = short_url


class ShortCodeCollisionError(RepositoryError):
    """Exception raised when a short code is already taken by a different URL."""

    pass
