"""
Standard I/O endpoints handed to commands.
"""

import sys
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class IOStreams:
    """Input, output and error streams a command reads from and writes to."""

    in_: Any = field(default_factory=lambda: sys.stdin)
    out: Any = field(default_factory=lambda: sys.stdout)
    err_out: Any = field(default_factory=lambda: sys.stderr)
