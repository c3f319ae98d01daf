"""JSON logging for the API process.

Every record carries the id of the request being served so log lines from
services can be joined to the access log.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

from pythonjsonlogger import jsonlogger

from quizflow.core.config import settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


class RequestContextFilter(logging.Filter):
    """Copy the current request context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_ctx.get()
        return True


class QuizFlowJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = settings.PROJECT_NAME
        log_record["env"] = settings.ENV
        # Outside a request
        if log_record.get("request_id") is None:
            log_record.pop("request_id", None)


def setup_logging(level: str | None = None) -> None:
    """Send JSON records to stdout. Safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        QuizFlowJsonFormatter("%(timestamp)s %(level)s %(logger)s %(message)s", datefmt="%Y-%m-%dT%H:%M:%S")
    )
    handler.addFilter(RequestContextFilter())
    root.addHandler(handler)

    # uvicorn's access log duplicates the request middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
