"""Configuration for the result listener."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

ENV_PREFIX = "RESULT_LISTENER_"
LINK_PATTERN_PREFIX = f"{ENV_PREFIX}LINK_"
LINK_PATTERN_SUFFIX = "_PATTERN"

ENV_FIELDS: Mapping[str, str] = {
    "RESULTS_DIR": "results_dir",
    "WRITER": "writer",
    "DIGEST_ALGORITHM": "digest_algorithm",
    "HOST_NAME": "host_name",
    "THREAD_NAME": "thread_name",
}


class ListenerConfig(BaseModel):
    """Configuration for the result listener."""

    results_dir: Path = Path("test-results")
    writer: str = "file-system"
    digest_algorithm: str = "md5"
    # Keyed by link type, e.g. {"issue": "https://tracker.example.com/{}"}
    link_patterns: Mapping[str, str] = Field(default_factory=dict)
    host_name: str | None = None
    thread_name: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "ListenerConfig":
        """Build configuration from RESULT_LISTENER_* environment variables."""
        values: dict[str, Any] = {
            field_name: environ[ENV_PREFIX + key]
            for key, field_name in ENV_FIELDS.items()
            if environ.get(ENV_PREFIX + key)
        }

        link_patterns = {
            key.removeprefix(LINK_PATTERN_PREFIX)
            .removesuffix(LINK_PATTERN_SUFFIX)
            .lower(): value
            for key, value in environ.items()
            if key.startswith(LINK_PATTERN_PREFIX)
            and key.endswith(LINK_PATTERN_SUFFIX)
            and value
        }
        if link_patterns:
            values["link_patterns"] = link_patterns

        return cls(**values)
