"""Tests for URL repositories and the file mirror."""

import json
import threading

import pytest

from shortener.core.database import Database
from shortener.models import URL
from shortener.repository import (
    FileStorage,
    MemoryURLRepository,
    RepositoryError,
    ShortCodeCollisionError,
    SQLiteURLRepository,
    URLNotFoundError,
)


def make_url(short_url: str, original_url: str, user_id: str = "user1", url_id: str = "") -> URL:
    return URL(id=url_id or f"id-{short_url}", short_url=short_url, original_url=original_url, user_id=user_id)


class TestRepositoryContract:
    """Behaviour shared by every repository backend."""

    def test_save_and_get(self, repository):
        """A saved record can be looked up by short code."""
        url, created = repository.save(make_url("abc123", "https://example.com"))
        assert created is True
        assert url.short_url == "abc123"

        found = repository.get_by_short_url("abc123")
        assert found.original_url == "https://example.com"
        assert found.user_id == "user1"
        assert found.is_deleted is False

    def test_get_unknown_short_url(self, repository):
        """Looking up an unknown code raises URLNotFoundError."""
        with pytest.raises(URLNotFoundError):
            repository.get_by_short_url("nope00")

    def test_save_existing_original_returns_existing(self, repository):
        """Saving a known original returns the first record unchanged."""
        first, _ = repository.save(make_url("first1", "https://example.com", user_id="u1"))
        second, created = repository.save(make_url("secnd2", "https://example.com", user_id="u2"))

        assert created is False
        assert second.short_url == first.short_url
        assert second.user_id == "u1"
        with pytest.raises(URLNotFoundError):
            repository.get_by_short_url("secnd2")

    def test_record_id_may_repeat(self, repository):
        """Client-chosen ids such as batch correlation ids need not be unique."""
        repository.save(make_url("aaa111", "https://a.example", user_id="u1", url_id="1"))
        url, created = repository.save(make_url("bbb222", "https://b.example", user_id="u2", url_id="1"))

        assert created is True
        assert url.id == "1"
        assert repository.get_by_short_url("aaa111").id == "1"
        assert repository.get_by_short_url("bbb222").user_id == "u2"

    def test_short_code_collision(self, repository):
        """A short code mapped to another original is rejected."""
        repository.save(make_url("same11", "https://one.example"))
        with pytest.raises(ShortCodeCollisionError):
            repository.save(make_url("same11", "https://two.example", url_id="other"))

    def test_get_by_user_id(self, repository):
        """Listing returns only the user's records."""
        repository.save(make_url("aaa111", "https://a.example", user_id="u1"))
        repository.save(make_url("bbb222", "https://b.example", user_id="u1"))
        repository.save(make_url("ccc333", "https://c.example", user_id="u2"))

        codes = sorted(url.short_url for url in repository.get_by_user_id("u1"))
        assert codes == ["aaa111", "bbb222"]

    def test_get_by_user_id_empty(self, repository):
        """A user without records gets an empty list."""
        assert repository.get_by_user_id("nobody") == []

    def test_batch_delete_scoped_to_owner(self, repository):
        """Only records owned by the user are deleted."""
        repository.save(make_url("mine01", "https://mine.example", user_id="u1"))
        repository.save(make_url("them01", "https://theirs.example", user_id="u2"))

        repository.batch_delete(["mine01", "them01", "ghost1"], "u1")

        assert repository.get_by_short_url("mine01").is_deleted is True
        assert repository.get_by_short_url("them01").is_deleted is False

    def test_batch_delete_is_idempotent(self, repository):
        """Deleting twice keeps the record deleted."""
        repository.save(make_url("twice1", "https://twice.example"))
        repository.batch_delete(["twice1"], "user1")
        repository.batch_delete(["twice1"], "user1")
        assert repository.get_by_short_url("twice1").is_deleted is True

    def test_batch_delete_empty(self, repository):
        """An empty batch is a no-op."""
        repository.batch_delete([], "user1")

    def test_deleted_excluded_from_listing(self, repository):
        """Soft-deleted records are not listed but still resolve."""
        repository.save(make_url("keep01", "https://keep.example"))
        repository.save(make_url("drop01", "https://drop.example"))
        repository.batch_delete(["drop01"], "user1")

        assert [url.short_url for url in repository.get_by_user_id("user1")] == ["keep01"]
        assert repository.get_by_short_url("drop01").is_deleted is True

    def test_returned_records_are_copies(self, repository):
        """Mutating a returned record does not change stored state."""
        repository.save(make_url("copy01", "https://copy.example"))
        url = repository.get_by_short_url("copy01")
        url.is_deleted = True
        assert repository.get_by_short_url("copy01").is_deleted is False

    def test_concurrent_saves_of_same_original(self, repository):
        """Concurrent saves of one original create exactly one record."""
        barrier = threading.Barrier(8)
        results = []
        lock = threading.Lock()

        def worker(i):
            barrier.wait()
            result = repository.save(make_url(f"race{i:02d}", "https://race.example", user_id=f"u{i}"))
            with lock:
                results.append(result)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        created = [url for url, was_created in results if was_created]
        assert len(created) == 1
        assert {url.short_url for url, _ in results} == {created[0].short_url}

    def test_ping(self, repository):
        """A healthy backend answers ping."""
        repository.ping()


class TestSQLiteURLRepository:
    """SQLite specific behaviour."""

    def test_persists_across_connections(self, tmp_path):
        """Records survive reopening the database file."""
        path = str(tmp_path / "urls.db")
        repo = SQLiteURLRepository(Database(path))
        repo.save(make_url("persist", "https://persist.example"))
        repo.batch_delete(["persist"], "user1")
        repo.close()

        reopened = SQLiteURLRepository(Database(path))
        assert reopened.get_by_short_url("persist").is_deleted is True
        reopened.close()

    def test_large_batch_delete(self):
        """Batches larger than the bound-parameter limit are applied."""
        repo = SQLiteURLRepository(Database(":memory:"))
        codes = [f"c{i:05d}" for i in range(1200)]
        for code in codes:
            repo.save(make_url(code, f"https://example.com/{code}"))

        repo.batch_delete(codes, "user1")

        assert repo.get_by_user_id("user1") == []
        repo.close()

    def test_ping_after_close_reopens(self):
        """The connection is reopened lazily after close."""
        repo = SQLiteURLRepository(Database(":memory:"))
        repo.close()
        repo.ping()
        repo.close()

    def test_storage_failure_is_wrapped(self, tmp_path):
        """SQLite errors surface as RepositoryError."""
        repo = SQLiteURLRepository(Database(str(tmp_path / "urls.db")))
        repo.db.execute("DROP TABLE urls")
        with pytest.raises(RepositoryError):
            repo.get_by_user_id("user1")
        repo.close()


class TestFileStorage:
    """Tests for the JSON file mirror."""

    def test_load_missing_file(self, tmp_path):
        """A missing file loads nothing."""
        storage = FileStorage(tmp_path / "missing.json")
        assert storage.load(MemoryURLRepository()) == 0

    def test_load_empty_file(self, tmp_path):
        """An empty file loads nothing."""
        path = tmp_path / "empty.json"
        path.write_text("")
        assert FileStorage(path).load(MemoryURLRepository()) == 0

    def test_append_then_load(self, tmp_path):
        """Appended records are replayed into a fresh repository."""
        path = tmp_path / "storage.json"
        storage = FileStorage(path)
        storage.append(make_url("file01", "https://one.example", url_id="uuid-1"))
        storage.append(make_url("file02", "https://two.example", user_id="u2", url_id="uuid-2"))

        repo = MemoryURLRepository()
        assert FileStorage(path).load(repo) == 2
        assert repo.get_by_short_url("file02").user_id == "u2"
        assert repo.get_by_short_url("file01").id == "uuid-1"

    def test_file_format(self, tmp_path):
        """Records are stored as a JSON array keyed like the public model."""
        path = tmp_path / "storage.json"
        FileStorage(path).append(make_url("fmt001", "https://fmt.example", url_id="uuid-1"))

        data = json.loads(path.read_text())
        assert data == [
            {
                "uuid": "uuid-1",
                "original_url": "https://fmt.example",
                "short_url": "fmt001",
                "user_id": "user1",
            }
        ]

    def test_malformed_file(self, tmp_path):
        """A corrupt file raises RepositoryError."""
        path = tmp_path / "storage.json"
        path.write_text("{not json")
        with pytest.raises(RepositoryError):
            FileStorage(path).load(MemoryURLRepository())
