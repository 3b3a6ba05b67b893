"""
Logging configuration tests.

Tests for setup_logging() and the STRBUF_LOG_* environment variables.
"""

import logging

import pytest

from strbuf import Buffer
from strbuf._logging import (
    HumanFormatter,
    JsonFormatter,
    _get_log_format,
    _get_log_level,
    logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_logger():
    """Put the strbuf logger back the way the test found it."""
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


class TestSetupLogging:
    """setup_logging()."""

    def test_exported(self, strbuf):
        """setup_logging is part of the public API."""
        assert strbuf.setup_logging is setup_logging

    def test_default_level_is_warn(self):
        """setup_logging() defaults to WARN."""
        setup_logging()
        assert logger.level == logging.WARNING

    @pytest.mark.parametrize(
        "level,expected",
        [
            ("DEBUG", logging.DEBUG),
            ("trace", logging.DEBUG),
            ("Info", logging.INFO),
            ("error", logging.ERROR),
            ("fatal", logging.CRITICAL),
            (logging.ERROR, logging.ERROR),
            ("bogus", logging.WARNING),
        ],
    )
    def test_levels(self, level, expected):
        """String names (any case) and ints are accepted."""
        setup_logging(level)
        assert logger.level == expected

    def test_off_silences_warnings(self):
        """"off" is above every level."""
        setup_logging("off")
        assert not logger.isEnabledFor(logging.CRITICAL)

    def test_replaces_handlers(self):
        """Existing handlers are replaced by exactly one."""
        logger.addHandler(logging.StreamHandler())
        logger.addHandler(logging.StreamHandler())
        setup_logging("INFO")
        assert len(logger.handlers) == 1

    @pytest.mark.parametrize("fmt,formatter", [("json", JsonFormatter), ("human", HumanFormatter)])
    def test_format(self, fmt, formatter):
        """format selects the formatter."""
        setup_logging("INFO", format=fmt)
        assert isinstance(logger.handlers[0].formatter, formatter)


class TestDefaultBehavior:
    """Logger defaults."""

    def test_logger_name(self):
        """The package logger is named strbuf."""
        assert logger.name == "strbuf"

    def test_child_loggers_inherit(self):
        """strbuf.* loggers inherit the package level."""
        setup_logging("DEBUG")
        assert logging.getLogger("strbuf.app").getEffectiveLevel() == logging.DEBUG


class TestEnvironmentVariables:
    """STRBUF_LOG_LEVEL and STRBUF_LOG_FORMAT."""

    @pytest.mark.parametrize(
        "value,expected",
        [("debug", logging.DEBUG), ("WARN", logging.WARNING), ("nonsense", logging.WARNING)],
    )
    def test_log_level(self, monkeypatch, value, expected):
        """STRBUF_LOG_LEVEL is parsed case-insensitively."""
        monkeypatch.setenv("STRBUF_LOG_LEVEL", value)
        assert _get_log_level() == expected

    def test_log_level_unset(self, monkeypatch):
        """Unset means WARN."""
        monkeypatch.delenv("STRBUF_LOG_LEVEL", raising=False)
        assert _get_log_level() == logging.WARNING

    def test_log_level_off(self, monkeypatch):
        """off disables every level."""
        monkeypatch.setenv("STRBUF_LOG_LEVEL", "off")
        assert _get_log_level() > logging.CRITICAL

    @pytest.mark.parametrize("value,expected", [("json", "json"), ("HUMAN", "human")])
    def test_log_format(self, monkeypatch, value, expected):
        """STRBUF_LOG_FORMAT is lower-cased."""
        monkeypatch.setenv("STRBUF_LOG_FORMAT", value)
        assert _get_log_format() == expected


class TestWarnings:
    """Warnings emitted at the default level."""

    def test_truncation_warns(self, caplog):
        """Shrinking below the length logs a warning."""
        buf = Buffer.from_bytes(b"abcdef")
        with caplog.at_level(logging.WARNING, logger="strbuf"):
            buf.set_size(3)
        assert buf.value == b"ab"
        assert any("truncated" in r.getMessage() for r in caplog.records)

    def test_refused_allocation_warns(self, caplog):
        """A refused reallocation logs a warning with the capacities."""
        from strbuf import LimitedAllocator

        buf = Buffer(4, allocator=LimitedAllocator(4))
        with caplog.at_level(logging.WARNING, logger="strbuf"):
            buf.append_bytes(b"too long")
        failed = [r for r in caplog.records if r.getMessage() == "Reallocation failed"]
        assert len(failed) == 1
        assert failed[0].old_capacity == 4
        assert failed[0].new_capacity == 9

    def test_invalid_env_capacity_warns(self, monkeypatch, caplog):
        """An unusable STRBUF_INITIAL_CAPACITY is reported."""
        monkeypatch.setenv("STRBUF_INITIAL_CAPACITY", "lots")
        with caplog.at_level(logging.WARNING, logger="strbuf"):
            assert Buffer().capacity == 16
        assert any(getattr(r, "scope", None) == "config" for r in caplog.records)
