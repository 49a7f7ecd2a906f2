"""
Core lifecycle components.

This module provides the building blocks that run around a command:
- Cancellable contexts and the signal bridge that cancels them
- Logging setup and teardown
"""

from .cancel import CancelContextFactory, cancel_context
from .context import CancelFunc, Context, background, with_cancel
from .lifecycle import LifecycleState, LoggingLifecycle, open_log_file
from .signals import DEFAULT_SIGNALS, EventSource, SignalCancelBridge

__all__ = [
    "CancelContextFactory",
    "CancelFunc",
    "Context",
    "DEFAULT_SIGNALS",
    "EventSource",
    "LifecycleState",
    "LoggingLifecycle",
    "SignalCancelBridge",
    "background",
    "cancel_context",
    "open_log_file",
    "with_cancel",
]
