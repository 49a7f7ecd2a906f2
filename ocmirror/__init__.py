"""
Lifecycle core for the oc-mirror command line tool.

Provides signal-cancellable execution contexts and the logging lifecycle
that tees output to the console and a persistent log file.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ocmirror")
except PackageNotFoundError:
    # Package not installed, use fallback (development mode)
    __version__ = "0.1.0-dev"
