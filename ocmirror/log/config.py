"""
Configuration classes for the logging system.

This module provides immutable configuration for the primary logger and a
mutable flag set that applies string-valued settings to it, the way command
line flags are applied before logging starts.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Any

from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogConfigurationError


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable configuration for the primary logger.

    Attributes:
        verbosity: Verbosity numeral; ``lg.v(n)`` emits only when n <= verbosity
        stderr_threshold: Severity tier index (0-4) at or above which records
                          are mirrored to sys.stderr
        skip_headers: Emit bare messages without the level/time/location header
        log_to_stderr: Send output to sys.stderr instead of the configured output
        also_log_to_stderr: Send output to sys.stderr as well as the output
    """

    verbosity: int = 0
    stderr_threshold: int = 2
    skip_headers: bool = False
    log_to_stderr: bool = True
    also_log_to_stderr: bool = False

    @property
    def stderr_level(self) -> int:
        """Logging level corresponding to the stderr threshold tier."""
        return LogConstants.SEVERITY_TIERS[self.stderr_threshold]

    @staticmethod
    def _resolve_verbosity(value: Any) -> int:
        """Resolve verbosity to an int within the supported range."""
        try:
            level = int(value)
        except (TypeError, ValueError) as e:
            raise InvalidLogLevelError(value) from e
        if not LogConstants.MIN_VERBOSITY <= level <= LogConstants.MAX_VERBOSITY:
            raise InvalidLogLevelError(value)
        return level


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "t", "true"):
        return True
    if lowered in ("0", "f", "false"):
        return False
    raise ValueError(f"invalid boolean value {value!r}")


def _parse_threshold(value: str) -> int:
    tier = int(value)
    if not 0 <= tier < len(LogConstants.SEVERITY_TIERS):
        raise ValueError(f"invalid severity tier {value!r}")
    return tier


class LogFlags:
    """
    String-valued flag set for the primary logger.

    Flags are applied one at a time with ``set()``; each call validates its
    value and swaps in a new immutable LogConfig. Supported flags:
    ``v``, ``stderrthreshold``, ``skip_headers``, ``logtostderr`` and
    ``alsologtostderr``.

    Example:
        >>> flags = LogFlags()
        >>> flags.set("skip_headers", "true")
        >>> flags.set("v", "2")
        >>> flags.config.verbosity
        2
    """

    _FIELDS: dict[str, tuple[str, Any]] = {
        "v": ("verbosity", LogConfig._resolve_verbosity),
        "stderrthreshold": ("stderr_threshold", _parse_threshold),
        "skip_headers": ("skip_headers", _parse_bool),
        "logtostderr": ("log_to_stderr", _parse_bool),
        "alsologtostderr": ("also_log_to_stderr", _parse_bool),
    }

    def __init__(self, config: LogConfig | None = None) -> None:
        self._config = config or LogConfig()
        self._lock = threading.Lock()

    @property
    def config(self) -> LogConfig:
        return self._config

    def set(self, name: str, value: str) -> None:
        """
        Apply a single flag.

        Raises:
            LogConfigurationError: If the flag is unknown or its value is invalid
        """
        if name not in self._FIELDS:
            raise LogConfigurationError(f"no such flag -{name}")

        field, parse = self._FIELDS[name]
        try:
            parsed = parse(value)
        except (InvalidLogLevelError, ValueError) as e:
            raise LogConfigurationError(
                f'invalid value "{value}" for flag -{name}: {e}'
            ) from e

        with self._lock:
            self._config = replace(self._config, **{field: parsed})
