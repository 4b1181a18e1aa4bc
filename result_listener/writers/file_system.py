"""Result writer storing one JSON file per result."""

import logging
from dataclasses import dataclass
from pathlib import Path

from result_listener.config import ListenerConfig
from result_listener.models.result import TestResult
from result_listener.writers.base import ResultWriter
from result_listener.writers.manifest import WriterManifest

log = logging.getLogger(__name__)

RESULT_FILE_SUFFIX = "-result.json"


@dataclass(frozen=True, kw_only=True)
class FileSystemResultWriter(ResultWriter):
    """Writes each result to `<results_dir>/<uuid>-result.json`."""

    results_dir: Path

    @classmethod
    def from_config(cls, config: ListenerConfig) -> "FileSystemResultWriter":
        return cls(results_dir=config.results_dir)

    def write(self, result: TestResult) -> None:
        self.results_dir.mkdir(parents=True, exist_ok=True)
        path = self.results_dir / f"{result.uuid}{RESULT_FILE_SUFFIX}"
        path.write_text(
            result.model_dump_json(by_alias=True, exclude_none=True),
            encoding="utf-8",
        )
        log.info(
            "Wrote result: name=%s status=%s path=%s", result.name, result.status, path
        )


file_system_manifest = WriterManifest(writer_factory=FileSystemResultWriter.from_config)
