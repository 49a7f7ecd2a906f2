"""
Factory for the two process-wide loggers.

The primary logger carries the tool's own structured output and is configured
through LogFlags. The secondary logger is the one registry libraries write to;
its default output can be discarded and its records routed through hooks.
"""

import logging
import sys
import threading
from typing import Any, Optional

from .config import LogConfig
from .formatters import HeaderFormatter, TextFormatter
from .logger import Logger

PRIMARY_NAME = "/"
SECONDARY_NAME = "/registry"


class OutputHandler(logging.Handler):
    """
    Handler for the primary logger.

    Writes to the configured output, or to sys.stderr when ``log_to_stderr``
    is set. Records at or above the stderr threshold (and every record when
    ``also_log_to_stderr`` is set) are additionally mirrored to sys.stderr.
    """

    def __init__(self, config: LogConfig, output: Any | None = None) -> None:
        super().__init__(logging.NOTSET)
        self.output = output
        self.formatter: HeaderFormatter = HeaderFormatter(config)

    @property
    def config(self) -> LogConfig:
        return self.formatter.config

    @config.setter
    def config(self, value: LogConfig) -> None:
        self.formatter.config = value

    def _targets(self, levelno: int) -> list[Any]:
        config = self.config
        if config.log_to_stderr or self.output is None:
            return [sys.stderr]
        targets = [self.output]
        mirror = config.also_log_to_stderr or levelno >= config.stderr_level
        if mirror and self.output is not sys.stderr:
            targets.append(sys.stderr)
        return targets

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record) + "\n"
            for target in self._targets(record.levelno):
                target.write(line)
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        for target in (self.output, sys.stderr):
            flush = getattr(target, "flush", None)
            if flush is not None:
                flush()


class LoggerFactory:
    """
    Thread-safe holder of the primary and secondary loggers.

    Example:
        >>> lg = LoggerFactory.primary()
        >>> lg.v(1).info("mirroring", extra={"images": 12})
        >>> LoggerFactory.secondary().debug("resolved digest")
    """

    _lock = threading.RLock()
    _primary: Optional[Logger] = None
    _primary_handler: Optional[OutputHandler] = None
    _secondary: Optional[Logger] = None
    _secondary_output: Optional[logging.StreamHandler] = None

    @classmethod
    def primary(cls) -> Logger:
        """Get the primary logger, creating it with defaults on first use."""
        with cls._lock:
            if cls._primary is None:
                lg = Logger(PRIMARY_NAME, logging.DEBUG)
                lg.propagate = False
                handler = OutputHandler(LogConfig())
                lg.addHandler(handler)
                cls._primary, cls._primary_handler = lg, handler
            return cls._primary

    @classmethod
    def primary_config(cls) -> LogConfig:
        cls.primary()
        assert cls._primary_handler is not None
        return cls._primary_handler.config

    @classmethod
    def configure_primary(cls, config: LogConfig) -> None:
        """Apply a LogConfig to the primary logger."""
        lg = cls.primary()
        with cls._lock:
            assert cls._primary_handler is not None
            cls._primary_handler.config = config
            lg.verbosity = config.verbosity

    @classmethod
    def set_output(cls, writer: Any) -> None:
        """Redirect the primary logger's output to ``writer``."""
        cls.primary()
        with cls._lock:
            assert cls._primary_handler is not None
            cls._primary_handler.output = writer

    @classmethod
    def output(cls) -> Any:
        cls.primary()
        assert cls._primary_handler is not None
        return cls._primary_handler.output

    @classmethod
    def flush(cls) -> None:
        """Flush the primary logger's buffers."""
        cls.primary().flush()

    @classmethod
    def secondary(cls) -> Logger:
        """Get the secondary logger; defaults to info level on sys.stderr."""
        with cls._lock:
            if cls._secondary is None:
                lg = Logger(SECONDARY_NAME, logging.INFO)
                lg.propagate = False
                output = logging.StreamHandler(sys.stderr)
                output.setFormatter(TextFormatter())
                lg.addHandler(output)
                cls._secondary, cls._secondary_output = lg, output
            return cls._secondary

    @classmethod
    def set_secondary_output(cls, writer: Any) -> None:
        """Replace the secondary logger's default output stream."""
        cls.secondary()
        with cls._lock:
            assert cls._secondary_output is not None
            cls._secondary_output.setStream(writer)

    @classmethod
    def set_secondary_level(cls, level: int) -> None:
        cls.secondary().setLevel(level)

    @classmethod
    def add_hook(cls, hook: logging.Handler) -> None:
        """Attach a hook handler to the secondary logger."""
        cls.secondary().addHandler(hook)

    @classmethod
    def remove_hook(cls, hook: logging.Handler) -> None:
        cls.secondary().removeHandler(hook)

    @classmethod
    def reset(cls) -> None:
        """
        Drop both loggers (for testing only).

        The next call to primary()/secondary() recreates them with defaults.
        """
        with cls._lock:
            for lg in (cls._primary, cls._secondary):
                if lg is None:
                    continue
                for handler in lg.handlers[:]:
                    lg.removeHandler(handler)
            cls._primary = None
            cls._primary_handler = None
            cls._secondary = None
            cls._secondary_output = None
