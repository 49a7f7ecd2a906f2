"""
Error classes for the ocmirror.app package.

This module provides the exception hierarchy for lifecycle, signal and
command failures.
"""


class OcMirrorError(Exception):
    """Base exception for ocmirror.app package."""

    pass


class SignalRegistrationError(OcMirrorError):
    """Raised when signal listeners are registered twice on one bridge."""

    def __init__(self, message: str):
        super().__init__(f"Signal registration error: {message}")


class ContextCanceledError(OcMirrorError):
    """Reason reported by a context that was cancelled."""

    def __init__(self, message: str = "context canceled"):
        super().__init__(message)


class ConfigurationError(OcMirrorError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str):
        super().__init__(f"Configuration error: {message}")


class LifecycleError(OcMirrorError):
    """Raised when lifecycle operations fail."""

    def __init__(self, message: str):
        super().__init__(f"Lifecycle error: {message}")


class CommandError(OcMirrorError):
    """Raised when command execution fails."""

    def __init__(self, message: str):
        super().__init__(f"Command error: {message}")
