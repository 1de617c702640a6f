"""Structured logging for firebridge.

Emits one JSON object per line on stdout, in the shape Google Cloud Logging
parses into structured entries (``severity``, ``message`` plus any extra
fields passed as keyword arguments).
"""
import json
import logging
import os
import sys
from typing import Any, Optional


def _level_from_env() -> int:
    name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


class JSONFormatter(logging.Formatter):
    """Render a log record as a Cloud Logging JSON payload."""

    def __init__(self, component: str):
        super().__init__()
        self.component = component

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "component": self.component,
        }

        fields = getattr(record, "fields", None)
        if fields:
            log_obj.update(fields)

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


class StructuredLogger:
    """Logger that attaches keyword arguments as structured fields.

    Example:
        logger = StructuredLogger("token-exchange")
        logger.info("Access token acquired", expires_in=3599)
        logger.error("Token request failed", status_code=400)
    """

    def __init__(self, component: str, level: Optional[int] = None):
        self.component = component
        self.logger = self._setup_logger(
            level if level is not None else _level_from_env())

    def _setup_logger(self, level: int) -> logging.Logger:
        logger = logging.getLogger(f"firebridge.{self.component}")
        logger.setLevel(level)
        logger.propagate = False

        # Re-instantiating a component must not stack handlers
        logger.handlers = []

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter(self.component))
        logger.addHandler(handler)

        return logger

    def _log(self, level: int, message: str, exc_info: Any,
             fields: dict) -> None:
        if not self.logger.isEnabledFor(level):
            return
        if exc_info is True:
            exc_info = sys.exc_info()
        record = self.logger.makeRecord(
            self.logger.name, level, "", 0, message, (), exc_info or None
        )
        record.fields = fields
        self.logger.handle(record)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, None, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, None, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, None, kwargs)

    def error(self, message: str, exc_info: Any = None,
              **kwargs: Any) -> None:
        """Log an error.

        Args:
            message: Human-readable error message
            exc_info: ``True`` to attach the exception being handled
            **kwargs: Additional structured fields (stage, status_code, ...)
        """
        self._log(logging.ERROR, message, exc_info, kwargs)
