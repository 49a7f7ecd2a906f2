"""
Hooks for the secondary logger.

A hook is a logging handler bound to a writer, a minimum level and a
formatter. The secondary logger's own output is discarded; everything it
emits reaches users only through hooks.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from .formatters import TextFormatter
from .levels import TRACE


class StreamHook(logging.Handler):
    """
    Handler writing formatted records to a text writer.

    Trailing newlines in messages are truncated so each record renders as a
    single line terminated by exactly one newline.
    """

    def __init__(
        self, writer: Any, level: int, formatter: logging.Formatter | None = None
    ) -> None:
        super().__init__(level)
        self.writer = writer
        self.setFormatter(formatter or TextFormatter())
        self._closed = False
        self._write_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        if self._closed:
            return
        try:
            if isinstance(record.msg, str):
                record.msg = record.msg.rstrip("\n")
            line = self.format(record)
            with self._write_lock:
                self.writer.write(line + "\n")
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        flush = getattr(self.writer, "flush", None)
        if flush is not None and not self._closed:
            flush()

    def close(self) -> None:
        if not self._closed:
            self.flush()
            self._closed = True
        super().close()


def new_stream_hook_with_newline_truncate(
    writer: Any, level: int, formatter: logging.Formatter
) -> StreamHook:
    """Create a StreamHook for ``writer`` emitting records at ``level`` and above."""
    return StreamHook(writer, level, formatter)


def setup_file_hook(
    logger: logging.Logger, log_file: Any, formatter: logging.Formatter | None = None
) -> Callable[[], None]:
    """
    Attach a hook writing every record of ``logger`` to ``log_file``.

    The hook accepts all levels down to TRACE; the logger's own level still
    decides what is emitted. Returns a cleanup that flushes and detaches the
    hook without closing ``log_file``.
    """
    hook = StreamHook(log_file, TRACE, formatter or TextFormatter(disable_quote=True))
    logger.addHandler(hook)

    def cleanup() -> None:
        logger.removeHandler(hook)
        hook.close()

    return cleanup
