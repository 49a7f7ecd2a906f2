"""
Constants and configuration values for the logging system.

This module contains all the constant values used throughout the logging system,
including the log file name, custom log level definitions and the severity
names used by the secondary logger.
"""

import logging


class LogConstants:
    """Constants for the logging system."""

    # Persistent log file, relative to the process working directory
    LOG_FILE_NAME: str = ".oc-mirror.log"
    LOG_FILE_MODE: int = 0o600

    # Custom log levels
    CUSTOM_LEVELS: dict[str, int] = {"TRACE": 5}

    # Primary logger verbosity range (klog-style -v)
    MIN_VERBOSITY: int = 0
    MAX_VERBOSITY: int = 9

    # Primary logger severity tiers, indexed by stderr threshold number.
    # The last tier sits above fatal and mirrors nothing to stderr.
    SEVERITY_TIERS: tuple[int, ...] = (
        logging.INFO,
        logging.WARNING,
        logging.ERROR,
        logging.CRITICAL,
        logging.CRITICAL + 1,
    )

    # Secondary logger level names, matching the text formatter output
    LEVEL_NAMES: dict[str, int] = {
        "panic": logging.CRITICAL + 1,
        "fatal": logging.CRITICAL,
        "error": logging.ERROR,
        "warning": logging.WARNING,
        "info": logging.INFO,
        "debug": logging.DEBUG,
        "trace": 5,
    }

    # Exit code used for fatal errors
    FATAL_EXIT_CODE: int = 255


logging.addLevelName(LogConstants.CUSTOM_LEVELS["TRACE"], "TRACE")
