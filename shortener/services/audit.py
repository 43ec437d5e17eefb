"""Audit trail of user actions.

Events are fanned out to every registered writer. Writers never raise:
an audit failure is logged and must not affect the request that caused it.
The HTTP layer runs ``AuditManager.log_event`` as a background task.
"""

import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

import httpx
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class AuditEvent(BaseModel):
    """A single audited action."""

    ts: int = Field(default_factory=lambda: int(time.time()), description="Unix timestamp")
    action: str
    user_id: str
    url: str


class AuditWriter(ABC):
    """Destination for audit events."""

    @abstractmethod
    def write(self, event: AuditEvent) -> None:
        pass

    def close(self) -> None:
        """Release writer resources."""


class FileAuditWriter(AuditWriter):
    """Append audit events to a file, one JSON object per line."""

    def __init__(self, file_path: Union[str, Path]):
        self.file_path = Path(file_path)
        self._lock = threading.Lock()

    def write(self, event: AuditEvent) -> None:
        line = event.model_dump_json() + "\n"
        with self._lock:
            try:
                with self.file_path.open("a", encoding="utf-8") as f:
                    f.write(line)
            except OSError as e:
                logger.error(f"Failed to write audit event to {self.file_path}: {e}")


class RemoteAuditWriter(AuditWriter):
    """POST audit events as JSON to a remote endpoint."""

    def __init__(self, url: str, timeout: float = 5.0, client: Optional[httpx.Client] = None):
        self.url = url
        self._client = client or httpx.Client(timeout=timeout)

    def write(self, event: AuditEvent) -> None:
        try:
            response = self._client.post(
                self.url,
                content=event.model_dump_json(),
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to send audit event to {self.url}: {e}")

    def close(self) -> None:
        self._client.close()


class AuditManager:
    """Dispatch audit events to the registered writers."""

    def __init__(self):
        self._writers: list[AuditWriter] = []
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        with self._lock:
            return bool(self._writers)

    def register(self, writer: AuditWriter) -> None:
        with self._lock:
            self._writers.append(writer)

    def log_event(self, action: str, user_id: str, url: str) -> AuditEvent:
        """Build an event and hand it to every writer.

        Args:
            action: Audited action, e.g. "shorten" or "follow".
            user_id: User performing the action.
            url: Original URL involved.

        Returns:
            The dispatched event.
        """
        event = AuditEvent(action=action, user_id=user_id, url=url)
        with self._lock:
            writers = list(self._writers)
        for writer in writers:
            writer.write(event)
        return event

    def close(self) -> None:
        with self._lock:
            writers, self._writers = self._writers, []
        for writer in writers:
            writer.close()


def build_audit_manager(audit_file: str = "", audit_url: str = "") -> AuditManager:
    """Create an AuditManager with the writers enabled by configuration."""
    manager = AuditManager()
    if audit_file:
        manager.register(FileAuditWriter(audit_file))
        logger.info(f"File audit enabled: {audit_file}")
    if audit_url:
        manager.register(RemoteAuditWriter(audit_url))
        logger.info(f"Remote audit enabled: {audit_url}")
    return manager
