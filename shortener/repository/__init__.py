"""Repository package - URL persistence backends."""

from .base import URLRepository
from .exceptions import RepositoryError, URLNotFoundError, ShortCodeCollisionError
from .file import FileStorage
from .memory import MemoryURLRepository
from .sqlite import SQLiteURLRepository

__all__ = [
    "URLRepository",
    "RepositoryError",
    "URLNotFoundError",
    "ShortCodeCollisionError",
    "FileStorage",
    "MemoryURLRepository",
    "SQLiteURLRepository",
]
