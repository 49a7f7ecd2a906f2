"""
Cancellable contexts driven by OS signals.

CancelContextFactory derives child contexts that are cancelled either by
their parent or by the first SIGINT/SIGTERM delivered after they were
created. The signal bridge behind it is registered lazily, exactly once per
process, on the first derivation.
"""

import queue
import signal
import threading
from collections.abc import Iterable
from typing import Optional

from .context import CancelFunc, Context, with_cancel
from .signals import (
    DEFAULT_SIGNALS,
    EventSource,
    SignalCancelBridge,
    make_cancel_events,
)

_SIGNALLED = "signal"
_DONE = "done"


class CancelContextFactory:
    """
    Thread-safe singleton deriving signal-cancellable contexts.

    The first derivation registers the signal bridge; it should happen in the
    main thread because Python only installs signal handlers there.

    Example:
        >>> ctx, cancel = CancelContextFactory.get_instance().derive(background())
        >>> try:
        ...     mirror(ctx)
        ... finally:
        ...     cancel()
    """

    _instance: Optional["CancelContextFactory"] = None
    _lock_class = threading.Lock()  # Class-level lock for singleton

    def __init__(self, signals: Iterable[signal.Signals] = DEFAULT_SIGNALS) -> None:
        """Initialize the factory (private - use get_instance())."""
        self._signals = tuple(signals)
        self._init_lock = threading.Lock()
        self._bridge: SignalCancelBridge | None = None
        self._events: EventSource | None = None

    @classmethod
    def get_instance(cls) -> "CancelContextFactory":
        """
        Get the process-wide CancelContextFactory.

        Thread-safe lazy initialization.
        """
        if cls._instance is None:
            with cls._lock_class:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """
        Reset the singleton, restoring original signal handlers (for testing only).

        Warning:
            Contexts derived before the reset stop receiving signal events.
        """
        with cls._lock_class:
            if cls._instance is not None:
                cls._instance.shutdown()
            cls._instance = None

    def shutdown(self) -> None:
        """Unregister the signal bridge, restoring original handlers."""
        with self._init_lock:
            if self._bridge is not None:
                self._bridge.unregister()
            self._bridge = None
            self._events = None

    @property
    def events(self) -> EventSource | None:
        return self._events

    def is_initialized(self) -> bool:
        return self._events is not None

    def ensure_initialized(self) -> EventSource:
        """Register the signal bridge on first call; later calls are no-ops."""
        if self._events is None:
            with self._init_lock:
                if self._events is None:
                    self._bridge, self._events = make_cancel_events(self._signals)
        return self._events

    def derive(self, parent: Context) -> tuple[Context, CancelFunc]:
        """
        Derive a child of ``parent`` that a watched signal also cancels.

        A watcher thread waits for whichever comes first: a signal event,
        which cancels the child, or the child finishing for any other reason,
        which just ends the watcher. Callers must call the returned cancel
        function on every exit path.
        """
        events = self.ensure_initialized()
        ctx, cancel = with_cancel(parent)

        inbox: queue.SimpleQueue[str] = queue.SimpleQueue()
        unsubscribe = events.subscribe(lambda: inbox.put(_SIGNALLED))
        ctx.add_done_callback(lambda: inbox.put(_DONE))

        def watch() -> None:
            try:
                if inbox.get() == _SIGNALLED:
                    cancel()
            finally:
                unsubscribe()

        threading.Thread(target=watch, name="cancel-watcher", daemon=True).start()
        return ctx, cancel


def cancel_context(parent: Context) -> tuple[Context, CancelFunc]:
    """Derive a signal-cancellable child of ``parent`` from the shared factory."""
    return CancelContextFactory.get_instance().derive(parent)
