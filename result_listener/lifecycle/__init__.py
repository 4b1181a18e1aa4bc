"""Report lifecycle module."""

from result_listener.lifecycle.lifecycle import (
    LifecycleError,
    ResultLifecycle,
    current_millis,
)

__all__ = ["LifecycleError", "ResultLifecycle", "current_millis"]
