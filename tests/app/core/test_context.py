"""
Tests for app/core/context.py.

Tests cancellable contexts including:
- Explicit cancellation and its reason
- Propagation from parent to child
- Done callbacks
- The background root context
"""

import threading

import pytest

from ocmirror.app.core.context import background, with_cancel
from ocmirror.app.errors import ContextCanceledError


@pytest.mark.unit
class TestBackground:
    """Test the background context."""

    def test_never_done(self):
        """Test background context is never cancelled."""
        ctx = background()

        assert ctx.is_done() is False
        assert ctx.err() is None
        assert ctx.wait(timeout=0.01) is False

    def test_singleton(self):
        assert background() is background()


@pytest.mark.unit
class TestWithCancel:
    """Test with_cancel()."""

    def test_cancel_sets_done_and_err(self):
        """Test cancel marks the context done with ContextCanceledError."""
        ctx, cancel = with_cancel(background())
        assert ctx.err() is None

        cancel()

        assert ctx.is_done()
        assert ctx.done().is_set()
        assert isinstance(ctx.err(), ContextCanceledError)
        assert str(ctx.err()) == "context canceled"

    def test_cancel_is_idempotent(self):
        """Test a second cancel keeps the first reason."""
        ctx, cancel = with_cancel(background())
        cancel()
        first = ctx.err()

        cancel()

        assert ctx.err() is first

    def test_parent_cancel_propagates(self):
        """Test cancelling the parent cancels the child with the parent's reason."""
        parent, cancel_parent = with_cancel(background())
        child, cancel_child = with_cancel(parent)
        grandchild, cancel_grandchild = with_cancel(child)

        cancel_parent()

        assert child.wait(timeout=1)
        assert grandchild.wait(timeout=1)
        assert child.err() is parent.err()
        assert grandchild.err() is parent.err()
        cancel_child()
        cancel_grandchild()

    def test_child_cancel_does_not_affect_parent(self):
        parent, cancel_parent = with_cancel(background())
        child, cancel_child = with_cancel(parent)

        cancel_child()

        assert child.is_done()
        assert parent.is_done() is False
        cancel_parent()

    def test_cancel_releases_parent_registration(self):
        """Test cancelling a child removes its callback from the parent."""
        parent, cancel_parent = with_cancel(background())
        _, cancel_child = with_cancel(parent)
        assert len(parent._callbacks) == 1

        cancel_child()

        assert parent._callbacks == []
        cancel_parent()

    def test_child_of_cancelled_parent_starts_done(self):
        parent, cancel_parent = with_cancel(background())
        cancel_parent()

        child, cancel_child = with_cancel(parent)

        assert child.is_done()
        assert child.err() is parent.err()
        cancel_child()

    def test_wait_unblocks_other_thread(self):
        """Test a thread waiting on done() wakes up on cancel."""
        ctx, cancel = with_cancel(background())
        woke = threading.Event()

        def waiter():
            ctx.wait()
            woke.set()

        thread = threading.Thread(target=waiter)
        thread.start()
        cancel()
        thread.join(timeout=2)

        assert woke.is_set()


@pytest.mark.unit
class TestDoneCallbacks:
    """Test add_done_callback()."""

    def test_callback_runs_once_on_cancel(self):
        ctx, cancel = with_cancel(background())
        calls = []
        ctx.add_done_callback(lambda: calls.append(1))

        cancel()
        cancel()

        assert calls == [1]

    def test_callback_runs_immediately_when_done(self):
        ctx, cancel = with_cancel(background())
        cancel()
        calls = []

        ctx.add_done_callback(lambda: calls.append(1))

        assert calls == [1]

    def test_unregistered_callback_not_called(self):
        ctx, cancel = with_cancel(background())
        calls = []
        unregister = ctx.add_done_callback(lambda: calls.append(1))

        unregister()
        cancel()

        assert calls == []
