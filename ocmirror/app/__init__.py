"""
Application layer: option aggregates, lifecycle hooks and command execution.
"""

from .errors import (
    CommandError,
    ConfigurationError,
    ContextCanceledError,
    LifecycleError,
    OcMirrorError,
    SignalRegistrationError,
)
from .streams import IOStreams

__all__ = [
    "CommandError",
    "ConfigurationError",
    "ContextCanceledError",
    "IOStreams",
    "LifecycleError",
    "OcMirrorError",
    "SignalRegistrationError",
]
