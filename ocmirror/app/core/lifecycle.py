"""
Logging lifecycle management.

This module configures the process's logging sinks before a command runs and
dismantles them afterwards. Setup opens the persistent log file, tees both
loggers and the command's streams into it, and produces a single cleanup
procedure that teardown runs exactly once.
"""

import os
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, TextIO

from ...log import (
    Discard,
    LockedWriter,
    LogConstants,
    LogError,
    LoggerFactory,
    LogFlags,
    MultiWriter,
    TextFormatter,
    fatal,
    new_stream_hook_with_newline_truncate,
    primary_verbosity,
    secondary_level,
    setup_file_hook,
)
from ...log.levels import level_name
from ..errors import LifecycleError
from ..streams import IOStreams

if TYPE_CHECKING:
    from ..options import RootOptions


class LifecycleState(Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    TORN_DOWN = "torn-down"


def open_log_file(path: str = LogConstants.LOG_FILE_NAME) -> TextIO:
    """
    Open the persistent log file for appending.

    Created with owner-only permissions if absent; existing content is kept.
    """
    fd = os.open(
        path, os.O_CREAT | os.O_APPEND | os.O_RDWR, LogConstants.LOG_FILE_MODE
    )
    return os.fdopen(fd, "a", encoding="utf-8", buffering=1)


def _apply_flags(log_level: int) -> None:
    """Configure the primary logger; any rejected flag is fatal."""
    flags = LogFlags(LoggerFactory.primary_config())
    try:
        flags.set("stderrthreshold", str(len(LogConstants.SEVERITY_TIERS) - 1))
        flags.set("skip_headers", "true")
        flags.set("logtostderr", "false")
        flags.set("alsologtostderr", "false")
        flags.set("v", primary_verbosity(log_level))
    except LogError as e:
        fatal(e)
    LoggerFactory.configure_primary(flags.config)


class LoggingLifecycle:
    """
    Owns the logging configuration around a single command.

    State machine: UNINITIALIZED -> ACTIVE -> TORN_DOWN. ``teardown()`` does
    nothing unless the lifecycle is ACTIVE, so it is safe to call twice or
    without a prior setup.

    Usage:
        lifecycle = LoggingLifecycle()
        lifecycle.setup(options)
        try:
            run(options)
        finally:
            lifecycle.teardown()
    """

    def __init__(self, log_file_name: str = LogConstants.LOG_FILE_NAME) -> None:
        self.log_file_name = log_file_name
        self._state = LifecycleState.UNINITIALIZED
        self._cleanup: Callable[[], None] | None = None

    @property
    def state(self) -> LifecycleState:
        return self._state

    def setup(self, options: "RootOptions") -> Callable[[], None]:
        """
        Route logging through the log file and rebind ``options.streams``.

        Failures opening the log file or applying a logger flag are fatal, as
        is any error raised while the cleanup dismantles the sinks. The cleanup
        also restores the original ``options.streams``.

        Returns:
            The cleanup procedure, also run by teardown()
        """
        if self._state is not LifecycleState.UNINITIALIZED:
            raise LifecycleError(
                f"cannot set up logging in state {self._state.value}"
            )

        _apply_flags(options.log_level)

        try:
            log_file = open_log_file(self.log_file_name)
        except OSError as e:
            fatal(e)

        streams = options.streams
        shared_file = LockedWriter(log_file)
        original_out = LoggerFactory.output()
        LoggerFactory.set_output(MultiWriter(streams.out, shared_file))

        # Registry libraries log through the secondary logger; its own output
        # is dropped and records reach users through the hooks below.
        LoggerFactory.set_secondary_output(Discard)
        level = secondary_level(options.log_level)
        LoggerFactory.set_secondary_level(level)
        err_hook = new_stream_hook_with_newline_truncate(
            streams.err_out,
            level,
            TextFormatter(
                disable_timestamp=True,
                disable_level_truncation=True,
                disable_quote=True,
            ),
        )
        LoggerFactory.add_hook(err_hook)
        file_hook_cleanup = setup_file_hook(LoggerFactory.secondary(), shared_file)

        options.streams = IOStreams(
            in_=streams.in_,
            out=MultiWriter(streams.out, shared_file),
            err_out=MultiWriter(streams.err_out, shared_file),
        )

        def _dismantle() -> None:
            try:
                LoggerFactory.flush()
            finally:
                try:
                    file_hook_cleanup()
                    LoggerFactory.remove_hook(err_hook)
                    err_hook.close()
                finally:
                    LoggerFactory.set_output(original_out)
                    options.streams = streams
                    log_file.close()

        def cleanup() -> None:
            try:
                _dismantle()
            except Exception as e:
                fatal(e)

        self._cleanup = cleanup
        self._state = LifecycleState.ACTIVE
        LoggerFactory.primary().v(4).info(
            "logging configured",
            extra={
                "log_file": self.log_file_name,
                "registry_level": level_name(level),
            },
        )
        return cleanup

    def teardown(self) -> None:
        """Run the cleanup procedure once; no-op unless ACTIVE."""
        if self._state is not LifecycleState.ACTIVE or self._cleanup is None:
            return
        cleanup, self._cleanup = self._cleanup, None
        self._state = LifecycleState.TORN_DOWN
        cleanup()

