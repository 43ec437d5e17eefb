"""Background batching of soft-delete requests.

Delete requests are pushed onto a bounded queue and drained by a single
worker thread. The worker accumulates requests and flushes them to the
repository when either:

- the accumulated batch reaches ``batch_size`` requests, or
- the queue runs dry while requests are pending, after waiting
  ``flush_interval`` seconds.

A flush merges all pending requests per owner and issues one
``batch_delete`` call per owner. Flush errors are logged and the affected
requests are dropped; the worker keeps running.
"""

import logging
import queue
import threading
from typing import Optional

from ..models import DeleteRequest
from ..repository import URLRepository
from .exceptions import ServiceClosedError

logger = logging.getLogger(__name__)

# Upper bound on how long an idle worker blocks before checking for stop
_POLL_INTERVAL = 0.1


class DeleteBatcher:
    """Single-consumer queue that coalesces delete requests per owner."""

    def __init__(
        self,
        repository: URLRepository,
        queue_size: int = 100,
        batch_size: int = 50,
        flush_interval: float = 0.1,
    ):
        """Initialize the batcher.

        Args:
            repository: Repository receiving the coalesced deletions.
            queue_size: Maximum number of pending requests before submit blocks.
            batch_size: Number of accumulated requests that forces a flush.
            flush_interval: Seconds to wait on an idle queue before flushing.
        """
        if queue_size < 1 or batch_size < 1:
            raise ValueError("queue_size and batch_size must be positive")
        if flush_interval < 0:
            raise ValueError("flush_interval must not be negative")
        self.repository = repository
        self.batch_size = batch_size
        self.flush_interval = flush_interval
        self._queue: "queue.Queue[DeleteRequest]" = queue.Queue(maxsize=queue_size)
        self._stopping = threading.Event()
        # set once no submitter can still put into the queue
        self._closed = threading.Event()
        self._submitters = threading.Condition()
        self._in_flight = 0
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the worker thread."""
        if self._thread is not None:
            raise RuntimeError("delete batcher already started")
        self._thread = threading.Thread(target=self._run, name="delete-batcher", daemon=True)
        self._thread.start()
        logger.debug("Delete batcher started")

    def submit(self, request: DeleteRequest) -> None:
        """Enqueue a request, blocking while the queue is full.

        Raises:
            ServiceClosedError: If the batcher has been stopped.
        """
        with self._submitters:
            if self._stopping.is_set():
                raise ServiceClosedError("delete batcher is stopped")
            self._in_flight += 1
        try:
            self._queue.put(request)
        finally:
            with self._submitters:
                self._in_flight -= 1
                self._submitters.notify_all()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the worker and flush every request still pending.

        New submissions are rejected at once. Submitters already blocked on a
        full queue are let through and their requests are flushed too.

        Args:
            timeout: Seconds to wait for the worker thread to finish.
        """
        with self._submitters:
            if self._stopping.is_set():
                return
            self._stopping.set()
        self._wait_for_submitters()
        self._closed.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning(f"Delete batcher did not stop within {timeout} seconds")
                return
        # Requests left over when no worker was started
        self._flush(self._drain())
        logger.debug("Delete batcher stopped")

    def _wait_for_submitters(self) -> None:
        while True:
            with self._submitters:
                if self._in_flight == 0:
                    return
                self._submitters.wait(_POLL_INTERVAL)
            # make room for submitters blocked on a full queue
            self._flush(self._drain())

    def _drain(self) -> list[DeleteRequest]:
        pending = []
        while True:
            try:
                pending.append(self._queue.get_nowait())
            except queue.Empty:
                return pending

    def _run(self) -> None:
        batch: list[DeleteRequest] = []
        while True:
            try:
                if batch:
                    request = self._queue.get_nowait()
                else:
                    request = self._queue.get(timeout=min(self.flush_interval, _POLL_INTERVAL))
            except queue.Empty:
                if self._closed.is_set():
                    break
                if batch:
                    # idle wait; stop() cuts it short
                    self._stopping.wait(self.flush_interval)
                    self._flush(batch)
                    batch = []
                continue

            batch.append(request)
            if len(batch) >= self.batch_size:
                self._flush(batch)
                batch = []

        self._flush(batch)

    def _flush(self, batch: list[DeleteRequest]) -> None:
        if not batch:
            return

        by_user: dict[str, dict[str, None]] = {}
        for request in batch:
            codes = by_user.setdefault(request.user_id, {})
            codes.update(dict.fromkeys(request.short_urls))

        logger.debug(f"Flushing {len(batch)} delete requests for {len(by_user)} users")
        for user_id, codes in by_user.items():
            try:
                self.repository.batch_delete(list(codes), user_id)
            except Exception:
                logger.exception(f"Batch delete failed for user {user_id!r}, dropping {len(codes)} short URLs")
