import io
import json
import logging
import sys
from datetime import datetime, timedelta, timezone

import pytest

from goster.logging_setup import JsonFormatter, configure_logging, get_logger


@pytest.fixture
def stream():
    return io.StringIO()


def _lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


def test_record_fields(stream):
    configure_logging("info", stream)
    get_logger("main").info("Database migrations completed")
    (entry,) = _lines(stream)
    assert entry["message"] == "Database migrations completed"
    assert entry["level"] == "info"
    assert entry["function"] == "main"


def test_time_is_timezone_aware(stream):
    configure_logging("info", stream)
    get_logger("init").info("Env variables are loaded!")
    (entry,) = _lines(stream)
    parsed = datetime.fromisoformat(entry["time"].replace("Z", "+00:00"))
    # Subtracting an aware datetime fails for a naive one, so this checks both.
    assert abs(parsed - datetime.now(timezone.utc)) < timedelta(minutes=1)


def test_unknown_level_falls_back_to_info(stream):
    assert configure_logging("bogus", stream) == logging.INFO


def test_level_names_are_case_insensitive(stream):
    assert configure_logging("DEBUG", stream) == logging.DEBUG


def test_level_filters_messages(stream):
    configure_logging("error", stream)
    logger = get_logger("main")
    logger.info("hidden")
    logger.error("shown")
    entries = _lines(stream)
    assert [e["message"] for e in entries] == ["shown"]
    assert entries[0]["level"] == "error"


def test_warning_level_name(stream):
    configure_logging("warn", stream)
    get_logger("main").warning("careful")
    (entry,) = _lines(stream)
    assert entry["level"] == "warning"


def test_reconfigure_replaces_handler(stream):
    first = io.StringIO()
    configure_logging("info", first)
    configure_logging("info", stream)
    get_logger("main").info("once")
    assert first.getvalue() == ""
    assert len(_lines(stream)) == 1


def test_formatter_keys_are_sorted():
    record = logging.LogRecord("goster", logging.INFO, __file__, 1, "hello %s", ("there",), None)
    record.function = "ConnectToDb"
    output = JsonFormatter().format(record)
    data = json.loads(output)
    assert data["message"] == "hello there"
    assert list(data) == sorted(data)


def test_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord(
            "goster", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
        )
    data = json.loads(JsonFormatter().format(record))
    assert "boom" in data["error"]