"""Shared fixtures for URL Shortener Service tests."""

import sys
import threading
import time
from contextlib import asynccontextmanager
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shortener.api.dependencies import get_audit_manager, get_file_storage, get_url_service
from shortener.core.database import Database
from shortener.main import app
from shortener.repository import MemoryURLRepository, SQLiteURLRepository
from shortener.services import AuditManager, AuditWriter, URLService


class RecordingRepository(MemoryURLRepository):
    """Memory repository that records batch_delete calls."""

    def __init__(self):
        super().__init__()
        self.delete_calls: list[tuple[list[str], str]] = []
        self.deleted = threading.Event()

    def batch_delete(self, short_urls, user_id):
        codes = list(short_urls)
        self.delete_calls.append((codes, user_id))
        super().batch_delete(codes, user_id)
        self.deleted.set()


class RecordingAuditWriter(AuditWriter):
    """Audit writer keeping events in memory."""

    def __init__(self):
        self.events = []

    def write(self, event):
        self.events.append(event)


def wait_until(predicate, timeout: float = 2.0, interval: float = 0.01) -> bool:
    """Poll predicate until it is true or the timeout elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def wait_for():
    """Polling helper for asynchronous effects."""
    return wait_until


@pytest.fixture
def recording_repo():
    """Create a repository that records deletions."""
    return RecordingRepository()


@pytest.fixture(params=["memory", "sqlite"])
def repository(request):
    """Create each repository backend in turn."""
    if request.param == "memory":
        repo = MemoryURLRepository()
    else:
        repo = SQLiteURLRepository(Database(":memory:"))
    yield repo
    repo.close()


@pytest.fixture
def url_service(repository):
    """Create a URL service with a fast idle flush."""
    service = URLService(repository, flush_interval=0.05)
    yield service
    service.close()


@pytest.fixture
def audit_writer():
    return RecordingAuditWriter()


@pytest.fixture
def client(audit_writer):
    """Create a test client backed by an in-memory service."""
    service = URLService(MemoryURLRepository(), flush_interval=0.05)
    audit_manager = AuditManager()
    audit_manager.register(audit_writer)

    # Set the dependency overrides BEFORE creating TestClient
    app.dependency_overrides[get_url_service] = lambda: service
    app.dependency_overrides[get_file_storage] = lambda: None
    app.dependency_overrides[get_audit_manager] = lambda: audit_manager

    # Replace the lifespan so the configured storage is never opened
    original_lifespan = app.router.lifespan_context

    @asynccontextmanager
    async def test_lifespan(app):
        yield

    app.router.lifespan_context = test_lifespan

    with TestClient(app, raise_server_exceptions=False) as client:
        client.url_service = service
        yield client

    # Restore original lifespan
    app.router.lifespan_context = original_lifespan
    app.dependency_overrides.clear()
    service.close()
