"""Structured JSON logging with run_id support."""
from __future__ import annotations

import contextvars
import json
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from src.shared.utils import now_iso

# Context variable for the current extraction/generation run
run_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "run_id", default=""
)


class JSONFormatter(logging.Formatter):
    """Custom JSON log formatter."""

    def __init__(self, service_name: str = "unknown") -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": now_iso(),
            "level": record.levelname,
            "service_name": self.service_name,
            "run_id": run_id_var.get(""),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


def setup_logging(service_name: str, level: str = "INFO") -> logging.Logger:
    """Configure structured JSON logging.

    The handler is installed on the ``src`` package logger so that every
    module logger (``logging.getLogger(__name__)``) inherits it.

    Args:
        service_name: Name of the service for log entries.
        level: Log level string (e.g. "INFO", "DEBUG").

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger("src")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter(service_name=service_name))
    logger.addHandler(handler)

    return logger


@contextmanager
def run_context(run_id: str | None = None) -> Iterator[str]:
    """Bind a run_id to every log entry emitted inside the block."""
    value = run_id or uuid.uuid4().hex[:12]
    token = run_id_var.set(value)
    try:
        yield value
    finally:
        run_id_var.reset(token)
