"""Per-context identity tokens for tests in progress."""

import contextvars
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from dataclasses import dataclass, field


@dataclass(frozen=True, kw_only=True)
class TestContext:
    """Identity of the test running in the current context."""

    __test__ = False

    uuid: str


@dataclass(frozen=True, kw_only=True)
class IdentityRegistry:
    """Tracks which test the calling thread or task is executing.

    Tokens live in a context variable, so each thread sees only its own
    binding. Asyncio tasks and work started through `fork` or `bind` get a
    copy of the parent's binding at fork time; later changes on either side
    do not propagate.

    A binding left behind on a pooled thread is seen by the next test that
    runs on it, so every terminal callback must call `release`.
    """

    _current: ContextVar[TestContext | None] = field(
        default_factory=lambda: ContextVar("test_identity", default=None),
        init=False,
        repr=False,
    )

    def current(self) -> TestContext:
        """Return the bound identity, creating one on first access."""
        context = self._current.get()
        if context is None:
            context = TestContext(uuid=str(uuid.uuid4()))
            self._current.set(context)
        return context

    def release(self) -> None:
        """Drop the identity bound to the calling context."""
        self._current.set(None)

    def fork(self) -> contextvars.Context:
        """Snapshot the calling context for sub-work of the current test."""
        return contextvars.copy_context()

    def bind[**P, R](self, fn: Callable[P, R]) -> Callable[P, R]:
        """Wrap `fn` to run inside a fork taken now.

        The wrapper may be handed to another thread or an executor; each call
        runs in its own copy of the snapshot.
        """
        snapshot = self.fork()

        def run(*args: P.args, **kwargs: P.kwargs) -> R:
            return snapshot.copy().run(fn, *args, **kwargs)

        return run
