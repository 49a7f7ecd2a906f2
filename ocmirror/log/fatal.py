"""
Fatal error reporting.

Startup configuration failures are not recoverable. They are logged through
the primary logger at CRITICAL and end the process with exit status 255.
"""

import os
import threading
from typing import NoReturn

from .constants import LogConstants
from .factory import LoggerFactory


def fatal(err: BaseException | str) -> NoReturn:
    """
    Log ``err`` at CRITICAL, flush, and exit the process.

    On the main thread this raises SystemExit so ``finally`` blocks still run.
    SystemExit would only end a worker thread, so elsewhere the process is
    terminated with os._exit() after flushing.
    """
    lg = LoggerFactory.primary()
    lg.critical(str(err), stacklevel=2)
    LoggerFactory.flush()
    if threading.current_thread() is not threading.main_thread():
        os._exit(LogConstants.FATAL_EXIT_CODE)
    raise SystemExit(LogConstants.FATAL_EXIT_CODE)


def check_err(err: BaseException | None) -> None:
    """Call fatal() if ``err`` is set."""
    if err is not None:
        fatal(err)
