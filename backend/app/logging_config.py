"""
Structured JSON logging for the readiness service.

Three channels, one per layer:
- http: request start/completion, rejected bodies, 5xx responses
- db: student store lookups, inserts, score updates and failures
- scoring: readiness scores and improvement plans handed back to the dashboard

Every line on stdout is one JSON object tagged with the service name and
the request ID of the dashboard call that produced it.
"""

import logging
import json
import os
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

# Set per request by the request ID middleware; empty outside a request
# (startup, shutdown, the seed script).
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SERVICE_NAME = "placement-readiness-api"

CHANNELS = ["http", "db", "scoring"]


class StructuredJsonFormatter(logging.Formatter):
    """
    Renders a record as:

        {"timestamp", "level", "service", "channel", "message",
         "context": {"request_id", "name", "student_id", ...},
         "extra": {"duration_ms", "status_code", ...}}

    Store failures logged with exc_info also get an "exception" field.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "service": SERVICE_NAME,
            "channel": getattr(record, "channel", record.name.split(".")[-1] if "." in record.name else "app"),
            "message": record.getMessage(),
            "context": {
                "request_id": request_id_var.get(""),
                **(getattr(record, "context", {}) or {})
            },
            "extra": getattr(record, "extra_data", {}) or {}
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging():
    """Send everything to stdout as JSON and apply LOG_LEVEL to each channel."""
    level = getattr(logging, LOG_LEVEL, logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for channel in CHANNELS:
        logging.getLogger(f"app.{channel}").setLevel(level)

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    return logging.getLogger(f"app.{channel}")


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None):
    """
    Emit one structured entry on the logger's channel.

    context holds who the entry is about (student name, student id);
    extra_data holds measurements (scores, duration_ms, status_code).
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(
        log_level,
        message,
        extra={"context": context or {}, "extra_data": extra_data or {}, "channel": logger.name.split(".")[-1]}
    )


def generate_request_id() -> str:
    return str(uuid.uuid4())
