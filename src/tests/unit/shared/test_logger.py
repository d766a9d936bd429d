import json
import logging

from src.shared.logger import JSONFormatter, ServiceFilter, TextFormatter, get_logger


def _record(**extra):
    record = logging.LogRecord("replacer.test", logging.INFO, __file__, 1, "Entry %s", ("published",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_promotes_payload():
    record = _record(payload={"uid": "e1", "operation_count": 2})
    ServiceFilter("replacer").filter(record)

    data = json.loads(JSONFormatter().format(record))

    assert data["service"] == "replacer"
    assert data["message"] == "Entry published"
    assert data["level"] == "INFO"
    assert data["uid"] == "e1"
    assert data["operation_count"] == 2
    assert "payload" not in data


def test_json_formatter_serializes_unknown_types():
    data = json.loads(JSONFormatter().format(_record(payload={"path": object()})))
    assert isinstance(data["path"], str)


def test_service_filter_keeps_existing_service():
    record = _record(service="engine")
    ServiceFilter("replacer").filter(record)
    assert record.service == "engine"


def test_get_logger_format_follows_env(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "json")
    logger = get_logger("replacer", "replacer.test.json")
    assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    monkeypatch.setenv("LOG_FORMAT", "text")
    logger = get_logger("replacer", "replacer.test.json")
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, TextFormatter)


def test_text_formatter_appends_payload():
    record = _record(payload={"uid": "e1", "applied": 2})
    ServiceFilter("replacer").filter(record)
    line = TextFormatter().format(record)
    assert " - replacer - replacer.test - INFO - Entry published uid=e1 applied=2" in line
