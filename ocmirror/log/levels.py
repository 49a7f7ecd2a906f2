"""
Verbosity to severity mapping tables.

The CLI exposes a single ``-v`` numeral. Both logging facilities derive their
thresholds from it through the pure functions in this module.
"""

import logging

from .constants import LogConstants
from .exceptions import InvalidLogLevelError

TRACE = LogConstants.CUSTOM_LEVELS["TRACE"]


def primary_verbosity(log_level: int) -> str:
    """Return the primary logger's ``v`` flag value for a CLI verbosity."""
    if log_level < 0:
        raise InvalidLogLevelError(log_level)
    return str(log_level)


def secondary_level(log_level: int) -> int:
    """
    Map a CLI verbosity to the secondary logger's severity.

    0 is info, 1 and 2 are debug, anything from 3 up is trace.
    """
    if log_level < 0:
        raise InvalidLogLevelError(log_level)
    if log_level == 0:
        return logging.INFO
    if log_level in (1, 2):
        return logging.DEBUG
    return TRACE


def level_name(level: int) -> str:
    """Lower-case severity name as printed by the text formatter."""
    for name, value in LogConstants.LEVEL_NAMES.items():
        if value == level:
            return name
    if level > logging.CRITICAL:
        return "panic"
    if level < TRACE:
        return "trace"
    return logging.getLevelName(level).lower()
