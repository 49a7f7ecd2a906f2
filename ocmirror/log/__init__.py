"""
Logging module for the mirror CLI.

This module extends Python's standard logging with:
- A primary logger with klog-style flags (-v verbosity, stderr threshold,
  header skipping) and ``v(n)`` gating
- A secondary logger whose default output can be discarded and whose
  records are delivered through hooks
- A custom TRACE log level
- Structured logging with extra fields
- A thread-safe fan-out writer for teeing output to several sinks
- Pure mapping functions from the CLI verbosity to logger severities
"""

from .config import LogConfig, LogFlags
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogConfigurationError, LogError
from .factory import LoggerFactory
from .fatal import check_err, fatal
from .formatters import HeaderFormatter, TextFormatter
from .hooks import StreamHook, new_stream_hook_with_newline_truncate, setup_file_hook
from .levels import TRACE, primary_verbosity, secondary_level
from .logger import Logger
from .writer import Discard, LockedWriter, MultiWriter

__all__ = [
    "Discard",
    "HeaderFormatter",
    "InvalidLogLevelError",
    "LockedWriter",
    "LogConfig",
    "LogConfigurationError",
    "LogConstants",
    "LogError",
    "LogFlags",
    "Logger",
    "LoggerFactory",
    "MultiWriter",
    "StreamHook",
    "TRACE",
    "TextFormatter",
    "check_err",
    "fatal",
    "new_stream_hook_with_newline_truncate",
    "primary_verbosity",
    "secondary_level",
    "setup_file_hook",
]
