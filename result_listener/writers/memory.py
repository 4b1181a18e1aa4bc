"""In-memory result writer."""

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field

from result_listener.config import ListenerConfig
from result_listener.models.result import TestResult
from result_listener.writers.base import ResultWriter
from result_listener.writers.manifest import WriterManifest


@dataclass(frozen=True, kw_only=True)
class InMemoryResultWriter(ResultWriter):
    """Keeps written results in a list, in write order."""

    _results: list[TestResult] = field(default_factory=list, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    @classmethod
    def from_config(cls, config: ListenerConfig) -> "InMemoryResultWriter":
        return cls()

    @property
    def results(self) -> Sequence[TestResult]:
        with self._lock:
            return list(self._results)

    def write(self, result: TestResult) -> None:
        with self._lock:
            self._results.append(result)


memory_manifest = WriterManifest(writer_factory=InMemoryResultWriter.from_config)
