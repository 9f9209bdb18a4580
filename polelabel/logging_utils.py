"""JSON logging for the label search and the command line."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.config import dictConfig
from math import isfinite
from typing import Any, Dict, FrozenSet

from .datatypes import ResolvedConfig, json_default

# attributes every LogRecord carries; anything else arrived through ``extra=``
_RECORD_ATTRIBUTES: FrozenSet[str] = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record with ``extra`` fields merged in.

    Coordinates and distances are rounded to ``digits`` decimals; points
    and cells serialise as plain lists and objects.
    """

    def __init__(self, digits: int = 6) -> None:
        super().__init__()
        self.digits = digits

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                payload[key] = self._plain(value)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=json_default, ensure_ascii=False)

    def _plain(self, value: Any) -> Any:
        if value is None or isinstance(value, (bool, int, str)):
            return value
        if isinstance(value, float):
            return round(value, self.digits) if isfinite(value) else str(value)
        if isinstance(value, dict):
            return {key: self._plain(item) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._plain(item) for item in value]
        converted = json_default(value)
        if isinstance(converted, (dict, list)):
            return self._plain(converted)
        return converted


def configure_logging(level: str = "INFO", digits: int = 6) -> None:
    """Send JSON logs to stderr; stdout carries the label output."""

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "polelabel.logging_utils.JsonLogFormatter", "digits": digits},
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stderr",
                }
            },
            "root": {"handlers": ["stderr"], "level": level.upper()},
        }
    )


def get_logger(name: str = "polelabel") -> logging.Logger:
    return logging.getLogger(name)


def log_config_snapshot(config: ResolvedConfig) -> None:
    """Log the settings a CLI run resolved to."""

    get_logger("polelabel.config").info(
        "resolved_config",
        extra={"event": "resolved_config", "config": config.redacted_dict()},
    )
