"""Root logger configuration driven by settings."""

import json
import logging
from datetime import UTC, datetime

from app.core.config import LogFormatEnum, Settings

_SIMPLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(config: Settings) -> None:
    """Configure the root logger from ``LOG_LEVEL`` and ``LOG_FORMAT``."""
    handler = logging.StreamHandler()
    if config.log_format == LogFormatEnum.json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_SIMPLE_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(config.log_level.value)
