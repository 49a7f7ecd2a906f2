"""
Argument parsing helpers.

This module provides the help formatter shared by every command parser.
"""

import argparse


class DefaultsHelpFormatter(argparse.HelpFormatter):
    """
    Help formatter that displays default values.

    Appends ``(default: ...)`` to help text unless the default is suppressed,
    None, or an empty string.
    """

    def _get_help_string(self, action: argparse.Action) -> str:
        help_text = action.help or ""
        if action.default is argparse.SUPPRESS or action.default in (None, ""):
            return help_text
        if isinstance(action, argparse._StoreTrueAction):
            return help_text
        return help_text + f" (default: {action.default})"
