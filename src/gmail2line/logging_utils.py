from __future__ import annotations

import json
import logging
import os

__all__ = ["configure_logger"]


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logger(name: str = "gmail2line", level: str = "INFO") -> logging.Logger:
    """Return a logger configured with a standard formatter.

    The level can be overridden via ``LOG_LEVEL``. When ``LOG_JSON`` is
    ``true`` records are emitted as one JSON object per line, which is what
    CloudWatch Logs expects from the Lambda entry point.
    """
    logger = logging.getLogger(name)

    log_level = os.getenv("LOG_LEVEL") or level
    logger.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))

    if os.getenv("LOG_JSON", "false").lower() == "true":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            "%Y-%m-%dT%H:%M:%S%z",
        )
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
