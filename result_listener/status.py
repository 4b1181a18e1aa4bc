"""Classification of test failures into result statuses."""

import traceback
from collections.abc import Sequence
from dataclasses import dataclass

from result_listener.models.result import Status

DEFAULT_FAILURE_TYPES: Sequence[type[BaseException]] = (AssertionError,)


@dataclass(frozen=True, kw_only=True)
class StatusDetails:
    """Status, message and formatted trace derived from an exception."""

    status: Status
    message: str | None
    trace: str


def classify(
    exception: BaseException,
    failure_types: Sequence[type[BaseException]] = DEFAULT_FAILURE_TYPES,
) -> StatusDetails:
    """Map an exception onto a result status.

    Assertion-style exceptions mean the test failed; anything else means the
    test is broken.
    """
    is_failure = isinstance(exception, tuple(failure_types))
    status: Status = "failed" if is_failure else "broken"
    return StatusDetails(
        status=status,
        message=str(exception) or None,
        trace=format_trace(exception),
    )


def format_trace(exception: BaseException) -> str:
    """Format an exception with its traceback and chained causes."""
    return "".join(traceback.format_exception(exception))
