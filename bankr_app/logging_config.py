#  Bankr App Kit - Logging Configuration
#
#  Configures the "bankr" logger with JSON or text output.
#  Every line carries the running app (trading-bot, console, ...) and, inside
#  AgentGateway.submit, the id of the agent request being made. Gateway
#  records also pass ledger and upstream numbers through `extra=`; both
#  formatters surface them so a rejected or failed request can be read
#  without parsing the message.
#
#  Depends on: (none)
#  Used by:    cli.py, services/gateway.py

import contextvars
import json
import logging
import sys
import time
import uuid
from contextlib import contextmanager

request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)
app_name_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("app_name", default=None)

# Attributes the gateway attaches with `extra=`, in output order
GATEWAY_FIELDS = ("in_window", "limit", "retry_after_ms", "status_code", "elapsed_ms")


def set_app_name(name: str | None):
    app_name_var.set(name)


@contextmanager
def agent_request(request_id: str | None = None):
    """Tag log records emitted inside the block with one agent request id."""
    rid = request_id or uuid.uuid4().hex[:12]
    token = request_id_var.set(rid)
    try:
        yield rid
    finally:
        request_id_var.reset(token)


def gateway_fields(record: logging.LogRecord) -> dict:
    return {name: getattr(record, name) for name in GATEWAY_FIELDS if hasattr(record, name)}


class JSONFormatter(logging.Formatter):
    """One JSON object per line: message, context and gateway numbers."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        app = app_name_var.get()
        if app:
            entry["app"] = app
        rid = request_id_var.get()
        if rid:
            entry["request_id"] = rid
        entry.update(gateway_fields(record))
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines, suffixed with `key=value` context when present."""

    def __init__(self):
        super().__init__("%(asctime)s [%(name)s] %(levelname)s: %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {}
        app = app_name_var.get()
        if app:
            context["app"] = app
        rid = request_id_var.get()
        if rid:
            context["req"] = rid
        context.update(gateway_fields(record))
        if not context:
            return line
        # Keep tracebacks after the suffix
        head, sep, tail = line.partition("\n")
        suffix = " ".join(f"{k}={v}" for k, v in context.items())
        return f"{head} [{suffix}]{sep}{tail}"


def setup_logging(level: str = "INFO", fmt: str = "text"):
    """Configure logging for the bankr loggers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        fmt: "json" for structured output, "text" for human-readable.
    """
    root = logging.getLogger("bankr")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
        root.addHandler(handler)

    # The gateway logs every request itself
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
