"""File-backed mirror for URL records.

Records are stored as a pretty-printed JSON array. The mirror is replayed
into a repository at start-up and appended to whenever a new short URL is
created.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Union

from pydantic import TypeAdapter, ValidationError

from ..models import URL
from .base import URLRepository
from .exceptions import RepositoryError

logger = logging.getLogger(__name__)

_URL_LIST = TypeAdapter(list[URL])


class FileStorage:
    """Thread-safe JSON file mirror of created URL records."""

    def __init__(self, file_path: Union[str, Path]):
        """Initialize file storage.

        Args:
            file_path: Path to the JSON file. It is created on first append.
        """
        self.file_path = Path(file_path)
        self._lock = threading.Lock()

    def _read(self) -> list[URL]:
        try:
            data = self.file_path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise RepositoryError(f"failed to read {self.file_path}: {e}") from e
        if not data.strip():
            return []
        try:
            return _URL_LIST.validate_json(data)
        except ValidationError as e:
            raise RepositoryError(f"malformed storage file {self.file_path}: {e}") from e

    def load(self, repository: URLRepository) -> int:
        """Replay every stored record into a repository.

        Args:
            repository: Target repository.

        Returns:
            Number of records loaded. A missing or empty file loads nothing.
        """
        with self._lock:
            urls = self._read()
        for url in urls:
            repository.save(url)
        logger.info(f"Loaded {len(urls)} URLs from {self.file_path}")
        return len(urls)

    def append(self, url: URL) -> None:
        """Add a record to the file, creating it if needed.

        Args:
            url: Record to persist.
        """
        with self._lock:
            urls = self._read()
            urls.append(url)
            payload = [
                item.model_dump(by_alias=True, exclude={"is_deleted"})
                for item in urls
            ]
            try:
                self.file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            except OSError as e:
                raise RepositoryError(f"failed to write {self.file_path}: {e}") from e
