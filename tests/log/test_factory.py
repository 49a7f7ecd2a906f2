"""
Tests for log/factory.py and log/fatal.py.

Tests the process-wide loggers including:
- Primary output routing and stderr mirroring
- Verbosity gating through v()
- Secondary output replacement and hooks
- Fatal exit behavior
"""

import io
import logging
import threading
from unittest.mock import patch

import pytest

from ocmirror.log import (
    Discard,
    LogConfig,
    LoggerFactory,
    StreamHook,
    TextFormatter,
    check_err,
    fatal,
)
from ocmirror.log.factory import OutputHandler


def make_record(level=logging.INFO, msg="line"):
    return logging.LogRecord("/", level, __file__, 1, msg, (), None)


@pytest.mark.unit
class TestOutputHandler:
    """Test primary output routing."""

    def test_log_to_stderr_ignores_output(self, capsys):
        out = io.StringIO()
        handler = OutputHandler(LogConfig(skip_headers=True), out)

        handler.emit(make_record())

        assert out.getvalue() == ""
        assert capsys.readouterr().err == "line\n"

    def test_writes_to_output_below_threshold(self, capsys):
        out = io.StringIO()
        config = LogConfig(skip_headers=True, log_to_stderr=False)
        handler = OutputHandler(config, out)

        handler.emit(make_record(logging.WARNING))

        assert out.getvalue() == "line\n"
        assert capsys.readouterr().err == ""

    def test_mirrors_to_stderr_at_threshold(self, capsys):
        out = io.StringIO()
        config = LogConfig(skip_headers=True, log_to_stderr=False)
        handler = OutputHandler(config, out)

        handler.emit(make_record(logging.ERROR))

        assert out.getvalue() == "line\n"
        assert capsys.readouterr().err == "line\n"

    def test_also_log_to_stderr(self, capsys):
        out = io.StringIO()
        config = LogConfig(
            skip_headers=True, log_to_stderr=False, also_log_to_stderr=True
        )
        handler = OutputHandler(config, out)

        handler.emit(make_record(logging.INFO))

        assert out.getvalue() == "line\n"
        assert capsys.readouterr().err == "line\n"

    def test_highest_threshold_never_mirrors(self, capsys):
        out = io.StringIO()
        config = LogConfig(skip_headers=True, log_to_stderr=False, stderr_threshold=4)
        handler = OutputHandler(config, out)

        handler.emit(make_record(logging.CRITICAL))

        assert out.getvalue() == "line\n"
        assert capsys.readouterr().err == ""


@pytest.mark.unit
class TestPrimaryLogger:
    """Test the primary logger."""

    def test_singleton(self):
        assert LoggerFactory.primary() is LoggerFactory.primary()

    def test_configure_and_route(self):
        out = io.StringIO()
        LoggerFactory.configure_primary(
            LogConfig(verbosity=2, skip_headers=True, log_to_stderr=False)
        )
        LoggerFactory.set_output(out)
        lg = LoggerFactory.primary()

        lg.v(2).info("shown", extra={"images": 3})
        lg.v(3).info("hidden")

        assert out.getvalue() == 'shown images="3"\n'
        assert LoggerFactory.output() is out
        assert LoggerFactory.primary_config().verbosity == 2

    def test_verbose_truthiness(self):
        LoggerFactory.configure_primary(LogConfig(verbosity=1))
        lg = LoggerFactory.primary()

        assert lg.v(0)
        assert lg.v(1)
        assert not lg.v(2)


@pytest.mark.unit
class TestSecondaryLogger:
    """Test the secondary logger."""

    def test_default_level_is_info(self):
        assert LoggerFactory.secondary().level == logging.INFO

    def test_discarded_output_with_hook(self):
        captured = io.StringIO()
        LoggerFactory.set_secondary_output(Discard)
        LoggerFactory.set_secondary_level(logging.DEBUG)
        formatter = TextFormatter(disable_timestamp=True)
        hook = StreamHook(captured, logging.DEBUG, formatter)
        LoggerFactory.add_hook(hook)

        LoggerFactory.secondary().debug("copying blob")

        assert captured.getvalue() == 'level=debug msg="copying blob"\n'

    def test_removed_hook_receives_nothing(self):
        captured = io.StringIO()
        LoggerFactory.set_secondary_output(Discard)
        hook = StreamHook(captured, logging.DEBUG)
        LoggerFactory.add_hook(hook)
        LoggerFactory.remove_hook(hook)

        LoggerFactory.secondary().info("dropped")

        assert captured.getvalue() == ""

    def test_reset_recreates_loggers(self):
        LoggerFactory.set_secondary_level(logging.DEBUG)
        LoggerFactory.reset()

        assert LoggerFactory.secondary().level == logging.INFO
        assert len(LoggerFactory.secondary().handlers) == 1


@pytest.mark.unit
class TestFatal:
    """Test fatal() and check_err()."""

    def test_fatal_exits_255(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            fatal(RuntimeError("open .oc-mirror.log: permission denied"))

        assert exc_info.value.code == 255
        assert "permission denied" in capsys.readouterr().err

    def test_check_err_none_is_noop(self):
        check_err(None)

    def test_check_err_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            check_err(ValueError("bad"))

        assert exc_info.value.code == 255

    def test_fatal_off_main_thread_terminates_process(self):
        """Test fatal() on a worker thread exits the process, not the thread."""
        exits = []

        def worker():
            try:
                fatal(ValueError("signal only works in main thread"))
            except SystemExit:
                pass

        with patch("os._exit", side_effect=exits.append):
            thread = threading.Thread(target=worker)
            thread.start()
            thread.join(timeout=5)

        assert exits == [255]
