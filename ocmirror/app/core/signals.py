"""
Signal bridge for turning OS interrupts into cancellation events.

This module installs handlers for SIGINT and SIGTERM that do nothing but
enqueue the signal number. A daemon listener thread drains that queue and
publishes one cancellation event per received signal to every subscriber.
Repeated signals are not deduplicated; subscribers treat the first event as
authoritative.
"""

import queue
import signal
import threading
from collections.abc import Callable, Iterable
from typing import Any

from ...log import LoggerFactory, fatal
from ..errors import SignalRegistrationError

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)

_STOP = object()


class EventSource:
    """
    Thread-safe broadcaster of cancellation events.

    Example:
        unsubscribe = source.subscribe(lambda: print("cancel!"))
        ...
        unsubscribe()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[Callable[[], None]] = []
        self._published = 0

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register ``callback``; returns a function that removes it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    @property
    def published(self) -> int:
        """Number of events published so far."""
        return self._published

    def publish(self) -> None:
        """Deliver one event to every current subscriber."""
        with self._lock:
            subscribers = list(self._subscribers)
            self._published += 1
        for callback in subscribers:
            callback()


class SignalCancelBridge:
    """
    Converts OS signals into events on an EventSource.

    ``register()`` may be called once per bridge. It must run in the main
    thread, which is a restriction of Python's ``signal.signal``; a failure
    to install handlers is fatal to the process.

    Usage:
        bridge = SignalCancelBridge()
        events = bridge.register({signal.SIGINT, signal.SIGTERM})
        events.subscribe(on_cancel)
    """

    def __init__(self) -> None:
        self._pending: queue.SimpleQueue[Any] = queue.SimpleQueue()
        self._events = EventSource()
        self._original_handlers: dict[signal.Signals, Any] = {}
        self._listener: threading.Thread | None = None
        self._registered = False

    @property
    def events(self) -> EventSource:
        return self._events

    @property
    def signals(self) -> frozenset[signal.Signals]:
        return frozenset(self._original_handlers)

    def is_registered(self) -> bool:
        return self._registered

    def register(
        self, signals: Iterable[signal.Signals] = DEFAULT_SIGNALS
    ) -> EventSource:
        """
        Install handlers for ``signals`` and start the listener thread.

        Raises:
            SignalRegistrationError: If this bridge is already registered
        """
        if self._registered:
            raise SignalRegistrationError("signal bridge already registered")

        try:
            for signum in signals:
                self._original_handlers[signum] = signal.signal(
                    signum, self._handle_signal
                )
        except (ValueError, OSError) as e:
            self._restore_handlers()
            fatal(e)

        self._registered = True
        self._listener = threading.Thread(
            target=self._listen, name="signal-cancel-bridge", daemon=True
        )
        self._listener.start()
        return self._events

    def _handle_signal(self, signum: int, frame: Any) -> None:
        """
        Handle a watched signal by queueing it for the listener thread.

        SimpleQueue.put is reentrant, so this is safe even if the main thread
        was interrupted inside another queue operation.

        Args:
            signum: Signal number (SIGINT=2, SIGTERM=15)
            frame: Current stack frame (unused)
        """
        self._pending.put(signum)

    def _listen(self) -> None:
        while True:
            item = self._pending.get()
            if item is _STOP:
                return
            LoggerFactory.primary().v(2).info(
                "received signal", extra={"signal": signal.Signals(item).name}
            )
            self._events.publish()

    def _restore_handlers(self) -> None:
        for signum, handler in self._original_handlers.items():
            signal.signal(signum, handler)
        self._original_handlers.clear()

    def unregister(self) -> None:
        """Restore original handlers and stop the listener (for testing only)."""
        if not self._registered:
            return
        self._restore_handlers()
        self._pending.put(_STOP)
        if self._listener is not None:
            self._listener.join(timeout=1.0)
        self._listener = None
        self._registered = False


def make_cancel_events(
    signals: Iterable[signal.Signals] = DEFAULT_SIGNALS,
) -> tuple[SignalCancelBridge, EventSource]:
    """Create a bridge, register it for ``signals`` and return both."""
    bridge = SignalCancelBridge()
    return bridge, bridge.register(signals)
