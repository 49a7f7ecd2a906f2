"""
Pytest configuration and shared fixtures.

This module provides central pytest configuration, custom markers,
and shared fixtures for the ocmirror test suite.
"""

import io
import signal
from collections.abc import Generator
from pathlib import Path

import pytest

from ocmirror.app.core.cancel import CancelContextFactory
from ocmirror.app.options import RootOptions
from ocmirror.app.streams import IOStreams
from ocmirror.log import LoggerFactory

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (may use signals, threads, files)"
    )
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests (full command execution)"
    )


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """
    Reset both process-wide loggers before and after each test.

    This prevents hooks and outputs installed by one test from leaking
    into the next.
    """
    LoggerFactory.reset()
    yield
    LoggerFactory.reset()


@pytest.fixture(autouse=True)
def reset_cancel_factory() -> Generator[None, None, None]:
    """
    Drop the cancel-context singleton and restore SIGINT/SIGTERM handlers.
    """
    original = {
        signum: signal.getsignal(signum) for signum in (signal.SIGINT, signal.SIGTERM)
    }
    CancelContextFactory.reset_instance()
    yield
    CancelContextFactory.reset_instance()
    for signum, handler in original.items():
        signal.signal(signum, handler)


@pytest.fixture
def work_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Run the test with a fresh temporary directory as the working directory.

    Returns:
        Path: The temporary working directory
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def streams() -> IOStreams:
    """In-memory command streams."""
    return IOStreams(in_=io.StringIO(), out=io.StringIO(), err_out=io.StringIO())


@pytest.fixture
def root_options(streams: IOStreams) -> RootOptions:
    """RootOptions bound to in-memory streams."""
    return RootOptions(streams=streams)


@pytest.fixture
def log_path(work_dir: Path) -> Path:
    """Location of the persistent log file inside work_dir."""
    return work_dir / ".oc-mirror.log"


# =============================================================================
# Test Collection Hooks
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """Add 'unit' marker to tests without other markers."""
    for item in items:
        if not any(
            mark.name in ["integration", "e2e"] for mark in item.iter_markers()
        ):
            item.add_marker(pytest.mark.unit)
