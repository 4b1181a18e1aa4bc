"""Abstract base class for result writers."""

from abc import ABC, abstractmethod

from result_listener.models.result import TestResult


class ResultWriter(ABC):
    """Persists finalized test results."""

    @abstractmethod
    def write(self, result: TestResult) -> None:
        """Write a finalized result.

        Args:
            result: Result with status and timing set

        Raises:
            OSError: If the result cannot be stored

        """
