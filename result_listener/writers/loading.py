"""Resolution of the configured result writer.

Writers are registered under the ``result_listener.writers`` entry point
group, each pointing at a `WriterManifest`.
"""

import logging
from collections.abc import Mapping
from importlib.metadata import EntryPoint, entry_points

from result_listener.config import ListenerConfig
from result_listener.writers.base import ResultWriter
from result_listener.writers.manifest import WriterManifest

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "result_listener.writers"


class WriterNotFoundError(Exception):
    """Raised when no writer is registered under the configured key."""


class InvalidWriterError(Exception):
    """Raised when a registered writer does not resolve to a manifest."""


def registered_writers() -> Mapping[str, EntryPoint]:
    return {entry.name: entry for entry in entry_points(group=ENTRY_POINT_GROUP)}


def load_writer_manifest(key: str) -> WriterManifest:
    """Resolve the manifest registered under `key`.

    Raises:
        WriterNotFoundError: If nothing is registered under `key`
        InvalidWriterError: If the entry point is not a `WriterManifest`

    """
    writers = registered_writers()
    entry = writers.get(key)
    if entry is None:
        known = ", ".join(sorted(writers)) or "none"
        raise WriterNotFoundError(
            f"No result writer registered as '{key}' (known writers: {known})"
        )

    manifest = entry.load()
    if not isinstance(manifest, WriterManifest):
        raise InvalidWriterError(
            f"Result writer '{key}' points at {entry.value}, "
            f"which is not a WriterManifest"
        )
    return manifest


def create_writer(config: ListenerConfig) -> ResultWriter:
    """Create the writer named by `config.writer`."""
    writer = load_writer_manifest(config.writer).writer_factory(config)
    log.debug("Using result writer '%s' (%s)", config.writer, type(writer).__name__)
    return writer
