"""
Cancellable execution contexts.

A Context represents the lifetime of an operation. It can be cancelled
explicitly through its cancel function or implicitly when its parent is
cancelled; either way ``done()`` is set and ``err()`` reports why. Work
running under a context should check ``is_done()`` or wait on ``done()``
and stop promptly once it is set.

Example:
    ctx, cancel = with_cancel(background())
    try:
        while not ctx.is_done():
            do_some_work()
    finally:
        cancel()
"""

import threading
from collections.abc import Callable

from ..errors import ContextCanceledError

CancelFunc = Callable[[], None]


class Context:
    """Cancellable context node; use background() and with_cancel() to create."""

    def __init__(self, parent: "Context | None" = None) -> None:
        self._parent = parent
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._err: BaseException | None = None
        self._callbacks: list[Callable[[], None]] = []

    @property
    def parent(self) -> "Context | None":
        return self._parent

    def done(self) -> threading.Event:
        """Event set once the context is cancelled."""
        return self._done

    def is_done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the context is done; returns False on timeout."""
        return self._done.wait(timeout)

    def err(self) -> BaseException | None:
        """None while active, the cancellation reason once done."""
        with self._lock:
            return self._err

    def add_done_callback(self, fn: Callable[[], None]) -> Callable[[], None]:
        """
        Run ``fn`` once the context is done.

        Runs immediately (in the caller's thread) if already done. Returns a
        function that unregisters the callback.
        """
        with self._lock:
            if self._err is None:
                self._callbacks.append(fn)
                return lambda: self._remove_callback(fn)
        fn()
        return lambda: None

    def _remove_callback(self, fn: Callable[[], None]) -> None:
        with self._lock:
            if fn in self._callbacks:
                self._callbacks.remove(fn)

    def _cancel(self, err: BaseException) -> None:
        with self._lock:
            if self._err is not None:
                return
            self._err = err
            callbacks, self._callbacks = self._callbacks, []
        self._done.set()
        for fn in callbacks:
            fn()


class _BackgroundContext(Context):
    """Root context; never cancelled."""

    def add_done_callback(self, fn: Callable[[], None]) -> Callable[[], None]:
        return lambda: None

    def _cancel(self, err: BaseException) -> None:
        pass

    def __repr__(self) -> str:
        return "context.Background"


_background = _BackgroundContext()


def background() -> Context:
    """The empty root context. It is never cancelled."""
    return _background


def with_cancel(parent: Context) -> tuple[Context, CancelFunc]:
    """
    Derive a child context with its own cancel function.

    The child is cancelled when the returned cancel function is called or
    when ``parent`` is cancelled, whichever happens first. Calling cancel
    more than once is harmless. Callers must call cancel on every exit path
    to release the child's registration with its parent.
    """
    child = Context(parent)
    unregister = parent.add_done_callback(
        lambda: child._cancel(parent.err() or ContextCanceledError())
    )

    def cancel() -> None:
        child._cancel(ContextCanceledError())
        unregister()

    return child, cancel
