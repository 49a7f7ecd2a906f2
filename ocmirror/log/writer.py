"""
Writers used as log sinks.

MultiWriter duplicates every write to several text streams and LockedWriter
serializes access to one stream shared by several writers. Writes are
serialized so concurrent callers never interleave partial records.
"""

import threading
from typing import Any, TextIO


class MultiWriter:
    """
    Fan-out text writer.

    Each ``write()`` call is delivered to every destination, in order, while
    holding a lock. A failing destination stops the write and the error
    propagates to the caller.

    Example:
        >>> import io
        >>> a, b = io.StringIO(), io.StringIO()
        >>> w = MultiWriter(a, b)
        >>> w.write("hello\\n")
        6
        >>> a.getvalue() == b.getvalue() == "hello\\n"
        True
    """

    def __init__(self, *writers: TextIO | Any) -> None:
        self._writers = tuple(writers)
        self._lock = threading.Lock()

    @property
    def writers(self) -> tuple[Any, ...]:
        return self._writers

    def write(self, data: str) -> int:
        with self._lock:
            for w in self._writers:
                w.write(data)
        return len(data)

    def flush(self) -> None:
        with self._lock:
            for w in self._writers:
                flush = getattr(w, "flush", None)
                if flush is not None:
                    flush()

    def writable(self) -> bool:
        return True

    def isatty(self) -> bool:
        return False


class LockedWriter:
    """
    Writer guarding a single destination with its own lock.

    Wrap a sink shared by several writers so every write to it is serialized,
    whichever writer it comes through.
    """

    def __init__(self, writer: TextIO | Any) -> None:
        self._writer = writer
        self._lock = threading.Lock()

    @property
    def writer(self) -> Any:
        return self._writer

    def write(self, data: str) -> int:
        with self._lock:
            self._writer.write(data)
        return len(data)

    def flush(self) -> None:
        with self._lock:
            self._writer.flush()

    def writable(self) -> bool:
        return True

    def isatty(self) -> bool:
        return False


class DiscardWriter:
    """Writer that drops everything written to it."""

    def write(self, data: str) -> int:
        return len(data)

    def flush(self) -> None:
        pass

    def writable(self) -> bool:
        return True

    def isatty(self) -> bool:
        return False


Discard = DiscardWriter()
