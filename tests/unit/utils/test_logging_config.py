"""Tests for logging configuration and Rich logging helpers."""

from __future__ import annotations

import io
import json
import logging
import sys

import pytest
from rich.console import Console

pytestmark = [pytest.mark.unit, pytest.mark.observability]

from magnetize.models import ObservabilityConfig
from magnetize.utils.logging_config import (
    CorrelationFilter,
    LoggingContext,
    StructuredFormatter,
    correlation_id,
    get_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)
from magnetize.utils.rich_logging import (
    CorrelationRichHandler,
    FileFormatter,
    create_rich_handler,
    strip_rich_markup,
)


def _flush_package_handlers():
    for handler in logging.getLogger("magnetize").handlers:
        handler.flush()


def _record(msg="hello", exc_info=None, **extra):
    record = logging.LogRecord(
        "magnetize.test", logging.INFO, __file__, 42, msg, None, exc_info
    )
    record.__dict__.update(extra)
    return record


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_console_only(self):
        """Test that a Rich handler is attached without a log file."""
        setup_logging(ObservabilityConfig(log_level="info"))

        logger = logging.getLogger("magnetize")
        assert logger.level == logging.INFO
        assert logger.propagate is False
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], CorrelationRichHandler)

    def test_repeated_setup_does_not_stack_handlers(self):
        """Test that calling setup_logging twice replaces handlers."""
        setup_logging(ObservabilityConfig())
        setup_logging(ObservabilityConfig())
        assert len(logging.getLogger("magnetize").handlers) == 1

    def test_plain_log_file(self, tmp_path):
        """Test plain-text file logging with markup stripped."""
        log_file = tmp_path / "logs" / "magnetize.log"
        setup_logging(ObservabilityConfig(log_level="INFO", log_file=str(log_file)))
        set_correlation_id("corr-123")

        get_logger("test").info("hello [red]world[/red]")
        get_logger("test").debug("not written")
        _flush_package_handlers()

        content = log_file.read_text(encoding="utf-8")
        assert "INFO corr-123 magnetize.test" in content
        assert "hello world" in content
        assert "[red]" not in content
        assert "not written" not in content

    def test_structured_log_file(self, tmp_path):
        """Test JSON-lines file logging."""
        log_file = tmp_path / "magnetize.jsonl"
        setup_logging(
            ObservabilityConfig(
                log_level="DEBUG", log_file=str(log_file), structured_logging=True
            )
        )
        set_correlation_id("corr-456")

        get_logger("core.magnet").debug("hashed %s", "abc", extra={"source": "a.torrent"})
        _flush_package_handlers()

        entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])
        assert entry["message"] == "hashed abc"
        assert entry["level"] == "DEBUG"
        assert entry["logger"] == "magnetize.core.magnet"
        assert entry["correlation_id"] == "corr-456"
        assert entry["source"] == "a.torrent"

    def test_correlation_id_assigned(self):
        """Test that setup_logging starts a new correlation ID."""
        set_correlation_id("before")
        setup_logging(ObservabilityConfig(log_correlation_id=True))
        assert get_correlation_id() not in (None, "before")

    def test_correlation_id_disabled(self):
        """Test that setup_logging leaves the correlation ID alone when disabled."""
        set_correlation_id("before")
        setup_logging(ObservabilityConfig(log_correlation_id=False))
        assert get_correlation_id() == "before"


class TestStructuredFormatter:
    """Test cases for StructuredFormatter."""

    def test_basic_fields(self):
        """Test the standard JSON fields."""
        entry = json.loads(StructuredFormatter().format(_record(correlation_id="c1")))
        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["line"] == 42
        assert entry["correlation_id"] == "c1"

    def test_extra_fields_included(self):
        """Test that extra attributes are carried into the entry."""
        entry = json.loads(StructuredFormatter().format(_record(bytes_read=10)))
        assert entry["bytes_read"] == 10
        assert "msg" not in entry

    def test_exception_included(self):
        """Test that exception tracebacks are formatted."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record(exc_info=sys.exc_info())

        entry = json.loads(StructuredFormatter().format(record))
        assert "ValueError: boom" in entry["exception"]


class TestCorrelation:
    """Test cases for correlation ID helpers."""

    def test_set_and_get(self):
        """Test setting an explicit correlation ID."""
        assert set_correlation_id("abc") == "abc"
        assert get_correlation_id() == "abc"

    def test_generated_id(self):
        """Test that a fresh ID is generated when none is given."""
        first = set_correlation_id()
        second = set_correlation_id()
        assert first != second
        assert get_correlation_id() == second

    def test_filter_adds_id(self):
        """Test that CorrelationFilter tags records."""
        set_correlation_id("xyz")
        record = _record()
        assert CorrelationFilter().filter(record) is True
        assert record.correlation_id == "xyz"


class TestGetLogger:
    """Test cases for get_logger."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("cli", "magnetize.cli"),
            ("magnetize", "magnetize"),
            ("magnetize.core.torrent", "magnetize.core.torrent"),
        ],
    )
    def test_namespacing(self, name, expected):
        """Test that loggers live under the magnetize namespace."""
        assert get_logger(name).name == expected


class TestLoggingContext:
    """Test cases for LoggingContext."""

    def test_success(self, caplog):
        """Test start and completion messages."""
        with caplog.at_level(logging.DEBUG, logger="magnetize"):
            with LoggingContext("magnet", source="a.torrent") as ctx:
                assert ctx.operation == "magnet"

        messages = [record.getMessage() for record in caplog.records]
        assert messages[0] == "Starting magnet"
        assert messages[1].startswith("Completed magnet in ")
        assert all(record.levelno == logging.DEBUG for record in caplog.records)
        assert caplog.records[0].source == "a.torrent"

    def test_failure_propagates(self, caplog):
        """Test that exceptions are logged and re-raised."""
        with caplog.at_level(logging.DEBUG, logger="magnetize"):
            with pytest.raises(ValueError, match="boom"):
                with LoggingContext("info"):
                    raise ValueError("boom")

        last = caplog.records[-1].getMessage()
        assert last.startswith("Failed info in ")
        assert last.endswith(": boom")

    def test_custom_level(self, caplog):
        """Test logging at a caller-chosen level."""
        with caplog.at_level(logging.DEBUG, logger="magnetize"):
            with LoggingContext("magnet", log_level=logging.INFO):
                pass

        assert all(record.levelno == logging.INFO for record in caplog.records)

    def test_new_correlation_id(self):
        """Test that each operation gets its own correlation ID."""
        set_correlation_id("outer")
        with LoggingContext("magnet"):
            assert get_correlation_id() != "outer"


class TestRichLogging:
    """Test cases for Rich logging helpers."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("[bold red]error[/bold red] here", "error here"),
            ("no markup", "no markup"),
            ("[/]", ""),
        ],
    )
    def test_strip_rich_markup(self, text, expected):
        """Test removal of Rich markup tags."""
        assert strip_rich_markup(text) == expected

    def test_file_formatter(self):
        """Test that FileFormatter strips markup from formatted output."""
        formatter = FileFormatter("%(levelname)s %(message)s")
        assert formatter.format(_record("[green]done[/green]")) == "INFO done"

    def test_create_rich_handler(self):
        """Test handler construction and emission."""
        buffer = io.StringIO()
        handler = create_rich_handler(
            console=Console(file=buffer, width=120), level=logging.WARNING
        )
        assert isinstance(handler, CorrelationRichHandler)
        assert handler.level == logging.WARNING

        set_correlation_id("rich-id")
        record = _record("visible message")
        handler.emit(record)

        assert "visible message" in buffer.getvalue()
        assert record.correlation_id == "rich-id"

    def test_rich_handler_without_correlation_id(self):
        """Test the placeholder used when no correlation ID is set."""
        handler = create_rich_handler(console=Console(file=io.StringIO(), width=120))
        token = correlation_id.set(None)
        try:
            record = _record()
            handler.emit(record)
        finally:
            correlation_id.reset(token)

        assert record.correlation_id == "no-correlation-id"

    def test_default_console_is_stderr(self):
        """Test that the default handler writes to stderr."""
        handler = create_rich_handler()
        assert handler.console.file is sys.stderr
