"""
Logging setup for the smart replacement service.

LOG_FORMAT=json emits one JSON object per line for the hosting platform's log
drain; anything else emits readable text for local runs.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

TEXT_FORMAT = "%(asctime)s - %(service)s - %(name)s - %(levelname)s - %(message)s"


class ServiceFilter(logging.Filter):
    """Stamps records with the owning service unless the caller set one."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "service"):
            record.service = self.service_name
        return True


def _payload_of(record: logging.LogRecord) -> Dict[str, Any]:
    payload = getattr(record, "payload", None)
    return payload if isinstance(payload, dict) else {}


class TextFormatter(logging.Formatter):
    """Plain lines with the structured payload appended as key=value pairs."""

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        payload = _payload_of(record)
        if payload:
            line += " " + " ".join(f"{key}={value}" for key, value in payload.items())
        return line


class JSONFormatter(logging.Formatter):
    """One JSON object per record; payload keys become top-level fields."""

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": getattr(record, "service", "unknown"),
            "logger": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
        }
        data.update(_payload_of(record))
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False, default=str)


def get_logger(service_name: str, name: Optional[str] = None) -> logging.Logger:
    """
    Return a stdout logger for service_name, formatted per LOG_FORMAT.

    Calling again for the same name replaces the handler, so a changed
    LOG_FORMAT takes effect. Pass structured fields as
    extra={"payload": {"uid": "blt123"}}.
    """
    logger = logging.getLogger(name or service_name)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    if os.getenv("LOG_FORMAT", "text").lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())
    handler.addFilter(ServiceFilter(service_name))
    logger.addHandler(handler)
    return logger
