"""Runtime configuration for package parsing and the inspection CLI."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping

DEFAULT_VERSION = 1.2
DEFAULT_LOG_LEVEL = "WARNING"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass(frozen=True, slots=True)
class ParserSettings:
    """Validated parser settings."""

    default_version: float = DEFAULT_VERSION
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ParserSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        version_raw = source.get("OPFKIT_DEFAULT_VERSION", str(DEFAULT_VERSION)).strip()
        log_level = source.get("OPFKIT_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()

        if not version_raw:
            raise ValueError("OPFKIT_DEFAULT_VERSION cannot be empty")
        try:
            default_version = float(version_raw)
        except ValueError as exc:
            raise ValueError(f"OPFKIT_DEFAULT_VERSION must be a number, got {version_raw!r}") from exc
        if default_version <= 0:
            raise ValueError("OPFKIT_DEFAULT_VERSION must be > 0")

        if log_level not in _LOG_LEVELS:
            allowed = ", ".join(sorted(_LOG_LEVELS))
            raise ValueError(f"OPFKIT_LOG_LEVEL must be one of: {allowed}")

        return cls(default_version=default_version, log_level=log_level)
