"""Report lifecycle tracking the current result of each test context."""

import logging
import threading
import time
from collections.abc import Callable
from contextvars import ContextVar
from dataclasses import dataclass, field

from result_listener.models.result import TestResult
from result_listener.writers.base import ResultWriter

log = logging.getLogger(__name__)


class LifecycleError(Exception):
    """Raised when a lifecycle call does not match any result in progress."""


def current_millis() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True, kw_only=True)
class ResultLifecycle:
    """Holds results in progress and hands finalized ones to a writer.

    Each registered result becomes "current" for the calling thread or task
    until it is persisted.
    """

    writer: ResultWriter
    clock: Callable[[], int] = current_millis
    _results: dict[str, TestResult] = field(default_factory=dict, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)
    _current: ContextVar[str | None] = field(
        default_factory=lambda: ContextVar("current_result", default=None),
        init=False,
        repr=False,
    )

    def register_result(self, result: TestResult) -> None:
        """Store a result by uuid and mark it current for this context."""
        update: dict[str, object] = {"stage": "running"}
        if result.start is None:
            update["start"] = self.clock()
        with self._lock:
            self._results[result.uuid] = result.model_copy(update=update)
        self._current.set(result.uuid)

    def mutate_current(self, fn: Callable[[TestResult], TestResult]) -> None:
        """Replace the current result with `fn(current)`."""
        uuid = self._require_current()
        with self._lock:
            self._results[uuid] = fn(self._results[uuid])

    def finalize_timing(self) -> None:
        """Stamp the completion time of the current result."""
        update = {"stop": self.clock(), "stage": "finished"}
        self.mutate_current(lambda result: result.model_copy(update=update))

    def persist(self, uuid: str) -> None:
        """Write a result out and drop it from working memory."""
        with self._lock:
            result = self._results.pop(uuid, None)
        if result is None:
            raise LifecycleError(f"No result in progress with uuid {uuid}")
        if self._current.get() == uuid:
            self._current.set(None)
        self.writer.write(result)
        log.debug("Persisted result %s with status=%s", uuid, result.status)

    def current(self) -> TestResult | None:
        """Return the current result of this context, if any."""
        uuid = self._current.get()
        if uuid is None:
            return None
        with self._lock:
            return self._results.get(uuid)

    def _require_current(self) -> str:
        uuid = self._current.get()
        if uuid is None:
            raise LifecycleError("No current result in this context")
        with self._lock:
            if uuid not in self._results:
                raise LifecycleError(f"Current result {uuid} is no longer in progress")
        return uuid
