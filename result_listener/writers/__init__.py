"""Result writers."""

from result_listener.writers.base import ResultWriter
from result_listener.writers.file_system import (
    FileSystemResultWriter,
    file_system_manifest,
)
from result_listener.writers.memory import InMemoryResultWriter, memory_manifest

__all__ = [
    "FileSystemResultWriter",
    "InMemoryResultWriter",
    "ResultWriter",
    "file_system_manifest",
    "memory_manifest",
]
