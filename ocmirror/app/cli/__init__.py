"""
Command execution for CLI applications.
"""

from .commands import Command, FlagBinder

__all__ = ["Command", "FlagBinder"]
