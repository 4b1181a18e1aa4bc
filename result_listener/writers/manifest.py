"""Writer manifest definition for the plugin system."""

from collections.abc import Callable
from dataclasses import dataclass

from result_listener.config import ListenerConfig
from result_listener.writers.base import ResultWriter


@dataclass(frozen=True, kw_only=True)
class WriterManifest:
    """Manifest describing a writer plugin.

    The factory receives the listener configuration so that writers can be
    created lazily from their key.
    """

    writer_factory: Callable[[ListenerConfig], ResultWriter]
