"""Tests for the file-system writer."""

import json
from pathlib import Path

from result_listener.config import ListenerConfig
from result_listener.models.result import Label
from result_listener.testing.factories import TestResultFactory
from result_listener.writers.file_system import FileSystemResultWriter


def test_writes_one_file_per_result(tmp_path: Path) -> None:
    """Writes <uuid>-result.json into a created results directory."""
    results_dir = tmp_path / "nested" / "results"
    writer = FileSystemResultWriter(results_dir=results_dir)
    result = TestResultFactory.build(
        status="passed", labels=[Label(name="tag", value="smoke")]
    )

    writer.write(result)

    path = results_dir / f"{result.uuid}-result.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["uuid"] == result.uuid
    assert data["fullName"] == result.full_name
    assert data["status"] == "passed"
    assert data["labels"] == [{"name": "tag", "value": "smoke"}]
    assert "statusTrace" not in data


def test_from_config_uses_results_dir(tmp_path: Path) -> None:
    """Takes the results directory from configuration."""
    writer = FileSystemResultWriter.from_config(ListenerConfig(results_dir=tmp_path))

    assert writer.results_dir == tmp_path
