"""Structured logging for the API process."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from church_portal.core.config import Settings


class JsonLogFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        for attr in ("component", "request_id", "program_id", "enrollment_id"):
            if hasattr(record, attr):
                payload[attr] = getattr(record, attr)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(settings: Settings, *, log_level: Optional[str] = None) -> None:
    """Install a stdout JSON handler on the root logger.

    Does nothing when the root logger already has handlers, so reloading the
    app under pytest or uvicorn's reloader doesn't duplicate output.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level_name = log_level or settings.LOG_LEVEL
    level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonLogFormatter())
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # SQL echo is controlled by SQL_ECHO, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.SQL_ECHO else logging.WARNING
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
