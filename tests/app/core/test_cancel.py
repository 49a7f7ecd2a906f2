"""
Tests for app/core/cancel.py.

Tests signal-cancellable contexts including:
- One-time signal registration under concurrent first use
- Cancellation of every live context per signal event
- Parent propagation and watcher cleanup
- Delivery of real SIGINT/SIGTERM to the process
"""

import os
import signal
import subprocess
import sys
import textwrap
import threading
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from ocmirror.app.core.cancel import CancelContextFactory, cancel_context
from ocmirror.app.core.context import background, with_cancel
from ocmirror.app.errors import ContextCanceledError


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def mock_signal():
    with patch("signal.signal") as mock:
        yield mock


@pytest.fixture
def factory(mock_signal):
    """A private factory with signal installation mocked out."""
    f = CancelContextFactory()
    yield f
    f.shutdown()


@pytest.mark.unit
class TestInitialization:
    """Test lazy one-time registration."""

    def test_not_initialized_until_first_derive(self, factory, mock_signal):
        assert factory.is_initialized() is False
        assert factory.events is None
        mock_signal.assert_not_called()

    def test_ensure_initialized_is_idempotent(self, factory, mock_signal):
        first = factory.ensure_initialized()
        second = factory.ensure_initialized()

        assert first is second
        assert mock_signal.call_count == 2

    def test_concurrent_first_use_registers_once(self, factory, mock_signal):
        """Test many threads deriving at once install handlers exactly once."""
        barrier = threading.Barrier(16)
        results = []
        lock = threading.Lock()

        def derive():
            barrier.wait()
            pair = factory.derive(background())
            with lock:
                results.append(pair)

        threads = [threading.Thread(target=derive) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert len(results) == 16
        assert mock_signal.call_count == 2
        for _, cancel in results:
            cancel()

    def test_get_instance_singleton(self):
        instance = CancelContextFactory.get_instance()
        assert CancelContextFactory.get_instance() is instance


@pytest.mark.unit
class TestDerive:
    """Test CancelContextFactory.derive()."""

    def test_signal_event_cancels_all_live_contexts(self, factory):
        """Test one event cancels every context derived before it."""
        pairs = [factory.derive(background()) for _ in range(5)]

        factory.events.publish()

        for ctx, cancel in pairs:
            assert ctx.wait(timeout=2)
            assert isinstance(ctx.err(), ContextCanceledError)
            cancel()

    def test_context_derived_after_signal_is_live(self, factory):
        first, cancel_first = factory.derive(background())
        factory.events.publish()
        assert first.wait(timeout=2)

        second, cancel_second = factory.derive(background())

        assert second.wait(timeout=0.1) is False
        cancel_first()
        cancel_second()

    def test_parent_cancel_propagates(self, factory):
        """Test cancelling the parent cancels the derived context."""
        parent, cancel_parent = with_cancel(background())
        ctx, cancel = factory.derive(parent)

        cancel_parent()

        assert ctx.wait(timeout=2)
        assert ctx.err() is parent.err()
        cancel()

    def test_watcher_unsubscribes_after_cancel(self, factory):
        """Test the watcher releases its subscription once the context ends."""
        ctx, cancel = factory.derive(background())
        assert factory.events.subscriber_count() == 1

        cancel()

        assert wait_for(lambda: factory.events.subscriber_count() == 0)
        assert ctx.is_done()

    def test_watcher_unsubscribes_after_signal(self, factory):
        ctx, cancel = factory.derive(background())

        factory.events.publish()

        assert ctx.wait(timeout=2)
        assert wait_for(lambda: factory.events.subscriber_count() == 0)
        cancel()

    def test_unrelated_context_unaffected(self, factory):
        ctx, cancel = factory.derive(background())
        other, cancel_other = with_cancel(background())

        factory.events.publish()

        assert ctx.wait(timeout=2)
        assert other.is_done() is False
        cancel()
        cancel_other()


@pytest.mark.integration
class TestProcessSignals:
    """Test real signal delivery to the current process."""

    @pytest.mark.parametrize("signum", [signal.SIGINT, signal.SIGTERM])
    def test_signal_cancels_context(self, signum):
        """Test SIGINT and SIGTERM cancel a derived context."""
        ctx, cancel = cancel_context(background())
        try:
            os.kill(os.getpid(), signum)

            assert ctx.wait(timeout=5)
            assert isinstance(ctx.err(), ContextCanceledError)
        finally:
            cancel()

    def test_unwatched_signal_does_not_cancel(self):
        """Test signals other than SIGINT/SIGTERM leave contexts alone."""
        received = threading.Event()
        original = signal.signal(signal.SIGUSR1, lambda signum, frame: received.set())
        ctx, cancel = cancel_context(background())
        try:
            os.kill(os.getpid(), signal.SIGUSR1)

            assert received.wait(timeout=2)
            assert ctx.wait(timeout=0.2) is False
        finally:
            cancel()
            signal.signal(signal.SIGUSR1, original)

    def test_reset_restores_handlers(self):
        original = signal.getsignal(signal.SIGINT)
        _, cancel = cancel_context(background())
        cancel()
        assert signal.getsignal(signal.SIGINT) != original

        CancelContextFactory.reset_instance()

        assert signal.getsignal(signal.SIGINT) == original

    def test_first_use_off_main_thread_is_fatal(self, tmp_path):
        """Test a worker thread's failed registration ends the whole process."""
        script = textwrap.dedent(
            """
            import threading

            from ocmirror.app.core.cancel import cancel_context
            from ocmirror.app.core.context import background

            worker = threading.Thread(target=lambda: cancel_context(background()))
            worker.start()
            worker.join()
            print("still running")
            """
        )
        root = Path(__file__).resolve().parents[3]
        env = dict(os.environ, PYTHONPATH=str(root))

        result = subprocess.run(
            [sys.executable, "-c", script],
            cwd=tmp_path,
            env=env,
            capture_output=True,
            text=True,
            timeout=30,
        )

        assert result.returncode == 255
        assert "still running" not in result.stdout
        assert "main thread" in result.stderr
