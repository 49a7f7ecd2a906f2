"""
Log formatters for the logging system.

This module provides the two line formats written to the shared sinks:

- HeaderFormatter for the primary logger: a klog-style header followed by the
  message, or the bare message when headers are skipped.
- TextFormatter for the secondary logger: logfmt ``key=value`` pairs with
  switches for timestamps, level truncation and value quoting.
"""

import logging
import os
import re
import time
from typing import Any

from .config import LogConfig
from .levels import level_name

FIELDS_ATTR = "__ocm__fields"

# Values containing any of these need quoting in logfmt output
_NEEDS_QUOTING = re.compile(r'[^a-zA-Z0-9\-._/@^+]')

_LEVEL_COLORS = {
    "panic": 31,
    "fatal": 31,
    "error": 31,
    "warning": 33,
    "info": 36,
    "debug": 37,
    "trace": 37,
}


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Structured fields attached to a record by Logger, if any."""
    return getattr(record, FIELDS_ATTR, None) or {}


def _header_char(levelno: int) -> str:
    if levelno >= logging.CRITICAL:
        return "F"
    if levelno >= logging.ERROR:
        return "E"
    if levelno >= logging.WARNING:
        return "W"
    return "I"


class HeaderFormatter(logging.Formatter):
    """
    Formatter for the primary logger.

    With headers:
        I1019 12:34:56.789012   12345 mirror.py:42] message key="value"
    Without headers:
        message key="value"
    """

    def __init__(self, config: LogConfig) -> None:
        super().__init__()
        self._config = config

    @property
    def config(self) -> LogConfig:
        return self._config

    @config.setter
    def config(self, value: LogConfig) -> None:
        self._config = value

    def format(self, record: logging.LogRecord) -> str:
        line = record.getMessage()
        fields = record_fields(record)
        if fields:
            line += "".join(f' {k}="{v}"' for k, v in fields.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        if self._config.skip_headers:
            return line
        return self._header(record) + line

    def _header(self, record: logging.LogRecord) -> str:
        t = time.localtime(record.created)
        micros = int((record.created % 1) * 1_000_000)
        return "%s%02d%02d %02d:%02d:%02d.%06d %7d %s:%d] " % (
            _header_char(record.levelno),
            t.tm_mon,
            t.tm_mday,
            t.tm_hour,
            t.tm_min,
            t.tm_sec,
            micros,
            record.process or os.getpid(),
            os.path.basename(record.pathname),
            record.lineno,
        )


class TextFormatter(logging.Formatter):
    """
    logfmt formatter for the secondary logger.

    Plain output looks like::

        time="2026-10-19T12:34:56+02:00" level=info msg="pulling image" ref=quay.io/x

    Args:
        disable_timestamp: Omit the ``time`` field
        disable_level_truncation: Keep full level names in colored output
            (otherwise truncated to four characters, e.g. ``DEBU``)
        disable_quote: Never quote values
        force_colors: Emit the colored layout even when not writing to a TTY
        timestamp_format: strftime format for the ``time`` field
    """

    def __init__(
        self,
        disable_timestamp: bool = False,
        disable_level_truncation: bool = False,
        disable_quote: bool = False,
        force_colors: bool = False,
        timestamp_format: str = "%Y-%m-%dT%H:%M:%S%z",
    ) -> None:
        super().__init__()
        self.disable_timestamp = disable_timestamp
        self.disable_level_truncation = disable_level_truncation
        self.disable_quote = disable_quote
        self.force_colors = force_colors
        self.timestamp_format = timestamp_format

    def format(self, record: logging.LogRecord) -> str:
        if self.force_colors:
            return self._format_colored(record)
        return self._format_plain(record)

    def _quote(self, value: Any) -> str:
        text = str(value)
        if self.disable_quote:
            return text
        if text and not _NEEDS_QUOTING.search(text):
            return text
        return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'

    def _timestamp(self, record: logging.LogRecord) -> str:
        return time.strftime(self.timestamp_format, time.localtime(record.created))

    def _message(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if record.exc_info:
            msg += "\n" + self.formatException(record.exc_info)
        return msg

    def _format_plain(self, record: logging.LogRecord) -> str:
        parts = []
        if not self.disable_timestamp:
            parts.append("time=" + self._quote(self._timestamp(record)))
        parts.append("level=" + level_name(record.levelno))
        msg = self._message(record)
        if msg:
            parts.append("msg=" + self._quote(msg))
        for key in sorted(record_fields(record)):
            parts.append(f"{key}={self._quote(record_fields(record)[key])}")
        return " ".join(parts)

    def _format_colored(self, record: logging.LogRecord) -> str:
        name = level_name(record.levelno)
        text = name.upper()
        if not self.disable_level_truncation:
            text = text[:4]
        color = _LEVEL_COLORS.get(name, 37)

        line = f"\x1b[{color}m{text}\x1b[0m"
        if not self.disable_timestamp:
            line += f"[{self._timestamp(record)}]"
        line += " " + self._message(record)
        fields = record_fields(record)
        for key in sorted(fields):
            line += f" \x1b[{color}m{key}\x1b[0m={self._quote(fields[key])}"
        return line
