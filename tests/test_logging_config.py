"""Tests for logging configuration and formatters."""

import json
import logging
import sys

import pytest

from stillgrateful.logging import ComponentLoggerAdapter, get_logger
from stillgrateful.logging.config import (
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    RedactingFilter,
    configure_logging,
)
from stillgrateful.logging.context import log_context


@pytest.fixture
def logger():
    """Create a test logger with no handlers attached."""
    test_logger = logging.getLogger("test_logger")
    test_logger.setLevel(logging.DEBUG)
    test_logger.handlers.clear()

    yield test_logger

    test_logger.handlers.clear()


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after configure_logging()."""
    root = logging.getLogger()
    level = root.level
    yield
    root.handlers.clear()
    root.setLevel(level)


def test_json_formatter_basic(logger):
    """Test JSONFormatter produces valid JSON with mandatory fields."""
    formatter = JSONFormatter()
    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)

    log_obj = json.loads(formatter.format(record))

    assert log_obj["level"] == "INFO"
    assert log_obj["message"] == "Test message"
    assert log_obj["logger"] == "test"
    assert log_obj["timestamp"].endswith("Z")


def test_json_formatter_with_extra_fields(logger):
    """Test JSONFormatter includes extra fields with their JSON types."""
    formatter = JSONFormatter()
    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Test message",
        (),
        None,
        extra={"event": "send.completed", "http_status": 200, "audit_written": True},
    )

    log_obj = json.loads(formatter.format(record))

    assert log_obj["event"] == "send.completed"
    assert log_obj["http_status"] == 200
    assert log_obj["audit_written"] is True


def test_json_formatter_with_exception(logger):
    """Test JSONFormatter renders exception info."""
    formatter = JSONFormatter()
    try:
        raise ValueError("Test exception")
    except ValueError:
        exc_info = sys.exc_info()

    record = logger.makeRecord("test", logging.ERROR, "test.py", 1, "Failed", (), exc_info)
    log_obj = json.loads(formatter.format(record))

    assert "ValueError: Test exception" in log_obj["exc_info"]


def test_key_value_formatter_quotes_values_with_spaces(logger):
    """Test KeyValueFormatter appends sorted key=value pairs."""
    formatter = KeyValueFormatter("%(levelname)s %(message)s")
    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Done",
        (),
        None,
        extra={"reason": "Sender token is required.", "allowed": False, "count": None},
    )

    output = formatter.format(record)

    assert output.startswith("INFO Done ")
    assert 'reason="Sender token is required."' in output
    assert "allowed=false" in output
    assert "count=null" in output
    assert output.index("allowed=") < output.index("count=") < output.index("reason=")


def test_key_value_formatter_omits_static_fields(logger):
    """Test service and environment are not repeated on every line."""
    formatter = KeyValueFormatter("%(message)s")
    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Hello", (), None)
    ContextualFilter(environment="production").filter(record)

    assert formatter.format(record) == "Hello"


def test_contextual_filter_adds_metadata_and_context(logger):
    """Test ContextualFilter injects service, environment and context fields."""
    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Hello", (), None)

    with log_context(request_id="abc123"):
        assert ContextualFilter(environment="staging").filter(record) is True

    assert record.service == "stillgrateful-api"
    assert record.environment == "staging"
    assert record.request_id == "abc123"


def test_contextual_filter_does_not_override_explicit_extra(logger):
    """Test a field passed via extra wins over the same context field."""
    record = logger.makeRecord(
        "test", logging.INFO, "test.py", 1, "Hello", (), None, extra={"request_id": "explicit"}
    )

    with log_context(request_id="from-context"):
        ContextualFilter().filter(record)

    assert record.request_id == "explicit"


def test_get_logger_with_component_merges_extra(caplog):
    """Test get_logger adds the component to every record."""
    adapter = get_logger("test.component", component="ratelimit")
    assert isinstance(adapter, ComponentLoggerAdapter)

    with caplog.at_level(logging.INFO, logger="test.component"):
        adapter.info("Allowed", extra={"event": "ratelimit.allowed"})

    record = caplog.records[-1]
    assert record.component == "ratelimit"
    assert record.event == "ratelimit.allowed"


def test_get_logger_without_component_returns_logger():
    """Test get_logger returns a plain logger when no component is given."""
    assert isinstance(get_logger("test.plain"), logging.Logger)


def test_configure_logging_json(restore_root_logger, capsys):
    """Test configure_logging installs a JSON handler on the root logger."""
    configure_logging(level="DEBUG", format_type="json", environment="test")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)

    logging.getLogger("test.configured").info("Configured", extra={"event": "x.y"})
    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    log_obj = json.loads(lines[-1])
    assert log_obj["event"] == "x.y"
    assert log_obj["environment"] == "test"


def test_configure_logging_routes_uvicorn_loggers(restore_root_logger):
    """Test uvicorn loggers propagate to the root handler."""
    configure_logging(level="INFO", format_type="key-value")

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        assert uvicorn_logger.propagate is True
        assert uvicorn_logger.handlers == []


def test_configure_logging_invalid_level(restore_root_logger):
    """Test configure_logging rejects unknown levels."""
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="VERBOSE")


def test_configure_logging_invalid_format(restore_root_logger):
    """Test configure_logging rejects unknown formats."""
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="xml")


def test_redacting_filter_masks_sensitive_extras(logger):
    """Test addresses, tokens and keys never reach a formatter."""
    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Hello",
        (),
        None,
        extra={
            "recipient_email": "teacher@school.org",
            "sender_token": "unique-anonymous-token-123",
            "recipient_domain": "school.org",
        },
    )

    assert RedactingFilter().filter(record) is True

    log_obj = json.loads(JSONFormatter().format(record))
    assert log_obj["recipient_email"] == "[redacted]"
    assert log_obj["sender_token"] == "[redacted]"
    assert log_obj["recipient_domain"] == "school.org"


def test_configure_logging_installs_redaction(restore_root_logger, capsys):
    configure_logging(level="INFO", format_type="json")

    logging.getLogger("test.redaction").info("Hi", extra={"api_key": "secret-key"})

    output = capsys.readouterr().out
    assert "secret-key" not in output
    assert "[redacted]" in output
