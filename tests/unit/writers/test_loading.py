"""Tests for writer resolution."""

from importlib.metadata import EntryPoint
from pathlib import Path
from unittest.mock import patch

import pytest

from result_listener.config import ListenerConfig
from result_listener.writers import (
    FileSystemResultWriter,
    InMemoryResultWriter,
    file_system_manifest,
    memory_manifest,
)
from result_listener.writers.loading import (
    InvalidWriterError,
    WriterNotFoundError,
    create_writer,
    load_writer_manifest,
)


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("file-system", file_system_manifest),
        ("memory", memory_manifest),
    ],
)
def test_load_writer_manifest_returns_manifest(key: str, expected: object) -> None:
    """Resolves the registered manifest by key."""
    assert load_writer_manifest(key) is expected


def test_unknown_writer_lists_known_writers() -> None:
    """The error names the missing key and the registered ones."""
    with pytest.raises(WriterNotFoundError) as exc_info:
        load_writer_manifest("unknown-writer")

    message = str(exc_info.value)
    assert "'unknown-writer'" in message
    assert "file-system" in message
    assert "memory" in message


def test_entry_point_must_be_a_manifest() -> None:
    """An entry point resolving to anything else is rejected."""
    entry = EntryPoint(
        name="broken",
        value="result_listener.writers.memory:InMemoryResultWriter",
        group="result_listener.writers",
    )

    with patch(
        "result_listener.writers.loading.registered_writers",
        return_value={"broken": entry},
    ):
        with pytest.raises(InvalidWriterError, match="not a WriterManifest"):
            load_writer_manifest("broken")


def test_create_writer_builds_configured_writer(tmp_path: Path) -> None:
    """The manifest factory receives the listener configuration."""
    writer = create_writer(ListenerConfig(writer="file-system", results_dir=tmp_path))

    assert isinstance(writer, FileSystemResultWriter)
    assert writer.results_dir == tmp_path


def test_create_writer_memory() -> None:
    """Memory writers start empty."""
    writer = create_writer(ListenerConfig(writer="memory"))

    assert isinstance(writer, InMemoryResultWriter)
    assert writer.results == []
