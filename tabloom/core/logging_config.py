"""Logging setup: JSON lines or plain text, request ids, secret redaction."""

import contextvars
import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Optional


request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")

# Chatty libraries capped at these levels regardless of LOG_LEVEL.
_QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "passlib": logging.ERROR,
    "httpx": logging.WARNING,
}

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class _JsonFormatter(logging.Formatter):
    """One JSON object per line.

    ``extra=`` fields land at the top level next to timestamp, level, logger,
    message and, inside a request, ``request_id``.
    """

    _RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = request_id_var.get()
        if request_id:
            entry["request_id"] = request_id

        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in self._RECORD_ATTRS and key not in entry
        )

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


# Bearer tokens in Authorization headers, and password/token values in
# request bodies or query strings.
_REDACTIONS = (
    re.compile(r"(?i)(bearer\s+)[\w.\-]{16,}"),
    re.compile(r"(?i)((?:password|password_hash|jwt_secret_key|secret|token)[\"']?\s*[=:]\s*[\"']?)[^\s,'\"&]{4,}"),
)


def redact(text: str) -> str:
    """Replace secret values in *text* with a marker, keeping their labels."""
    for pattern in _REDACTIONS:
        text = pattern.sub(r"\1***", text)
    return text


class _RedactingFilter(logging.Filter):
    """Redacts the fully formatted message, so ``%s`` arguments are covered too."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg, record.args = cleaned, None
        if record.exc_text:
            record.exc_text = redact(record.exc_text)
        return True


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL (default INFO).
        log_format: ``"json"`` (default) or ``"text"``.
    """
    level = (log_level or "INFO").upper()
    fmt = (log_format or "json").lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_RedactingFilter())
    if fmt == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name, cap in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(cap)

    logging.getLogger(__name__).debug("Logging configured", extra={"level": level, "format": fmt})
