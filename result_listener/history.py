"""Stable history ids correlating the same test across runs."""

import hashlib
from dataclasses import dataclass

DEFAULT_ALGORITHM = "md5"


class DigestUnavailableError(Exception):
    """Raised when the configured digest algorithm cannot be used."""


@dataclass(frozen=True, kw_only=True)
class HistoryIdComputer:
    """Derives a fixed-length hex digest from a test's qualified name.

    The digest is a correlation key, not a security primitive. The algorithm
    is checked on construction so that a bad configuration fails at startup
    rather than in the middle of a run.
    """

    algorithm: str = DEFAULT_ALGORITHM

    def __post_init__(self) -> None:
        try:
            digest = hashlib.new(self.algorithm, usedforsecurity=False)
        except ValueError as e:
            raise DigestUnavailableError(
                f"Could not find {self.algorithm} hashing algorithm"
            ) from e
        if digest.digest_size == 0:
            raise DigestUnavailableError(
                f"Hashing algorithm {self.algorithm} has no fixed digest length"
            )

    def history_id(self, class_name: str, method_name: str | None) -> str:
        """Return the history id for a class and optional method name."""
        source = class_name + (method_name or "")
        digest = hashlib.new(self.algorithm, usedforsecurity=False)
        digest.update(source.encode("utf-8"))
        return digest.hexdigest()
