"""Models for test execution results."""

from collections.abc import Sequence
from typing import Literal

from pydantic import Field

from result_listener.models.base import Model

type Status = Literal["passed", "failed", "broken", "skipped"]
type Stage = Literal["running", "finished"]


class Label(Model):
    """Name/value metadata pair attached to a result."""

    name: str
    value: str


class Link(Model):
    """Typed reference attached to a result."""

    name: str | None = None
    url: str | None = None
    type: str | None = None


class TestResult(Model):
    """Normalized record of a single test execution.

    Instances are immutable; the lifecycle replaces the stored record with an
    updated copy on every mutation.
    """

    __test__ = False

    uuid: str = Field(..., description="Identity token of the test")
    history_id: str | None = Field(
        default=None, description="Stable key grouping the test across runs"
    )
    name: str = Field(..., description="Display name")
    full_name: str = Field(..., description="Qualified class and method name")
    status: Status | None = Field(default=None, description="None while unset")
    status_message: str | None = None
    status_trace: str | None = None
    description: str | None = None
    stage: Stage | None = None
    links: frozenset[Link] = Field(default_factory=frozenset)
    labels: Sequence[Label] = Field(default_factory=tuple)
    start: int | None = Field(default=None, description="Epoch milliseconds")
    stop: int | None = Field(default=None, description="Epoch milliseconds")

    def labels_named(self, name: str) -> Sequence[str]:
        """Return values of all labels with the given name, in order."""
        return [label.value for label in self.labels if label.name == name]
