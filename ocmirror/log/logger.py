"""
Logger classes for the logging system.

This module provides the Logger class shared by both logging facilities. It
extends the standard Python logger with structured extra fields, a TRACE
level and klog-style verbosity gating through ``v()``.
"""

import collections
import logging
from typing import Any

from .constants import LogConstants
from .formatters import FIELDS_ATTR

TRACE = LogConstants.CUSTOM_LEVELS["TRACE"]


class Logger(logging.Logger):
    """
    Enhanced logger with structured fields and verbosity gating.

    Extends the standard Python logger with:
    - Extra fields attached to every record under a private attribute
    - A custom ``trace`` method (level 5)
    - ``v(level)`` returning a Verbose view that only emits when the
      logger's verbosity is at least ``level``
    """

    def __init__(
        self,
        name: str,
        level: int = logging.NOTSET,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
    ) -> None:
        super().__init__(name, level)
        self._extra = extra or {}
        self.verbosity = 0

        # Override makeRecord to handle extra fields
        self._original_makeRecord = self.makeRecord
        self.makeRecord = self._makeRecord  # type: ignore[assignment,method-assign]

    def _merge_extra(
        self, extra: dict[str, Any] | collections.OrderedDict | None
    ) -> dict[str, Any]:
        """Merge pre-populated extra fields with per-call extra fields."""
        merged = dict(self._extra)
        if extra:
            merged.update(extra)
        return merged

    def _makeRecord(
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: str,
        args: tuple,
        exc_info: Any | None,
        func: str | None = None,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        """Create log record and attach merged extra fields."""
        merged_extra = self._merge_extra(extra)
        record = self._original_makeRecord(
            name, level, fn, lno, msg, args, exc_info, func=func, sinfo=sinfo
        )
        # Use setattr to avoid Python name mangling with __ prefix
        setattr(record, FIELDS_ATTR, merged_extra)
        return record

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a TRACE level message."""
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    def v(self, level: int) -> "Verbose":
        """
        Return a verbosity-gated view of this logger.

        Example:
            >>> lg.v(2).info("resolved %d images", n)  # only when -v >= 2
        """
        return Verbose(self, level <= self.verbosity)

    def flush(self) -> None:
        """Flush all handlers attached to this logger."""
        for handler in self.handlers:
            handler.flush()


class Verbose:
    """Verbosity-gated logger view returned by Logger.v()."""

    def __init__(self, logger: Logger, enabled: bool) -> None:
        self._logger = logger
        self.enabled = enabled

    def __bool__(self) -> bool:
        return self.enabled

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.enabled:
            kwargs.setdefault("stacklevel", 2)
            self._logger.info(msg, *args, **kwargs)
