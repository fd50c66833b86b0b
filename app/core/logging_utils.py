import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
}


def setup_logging(log_level: str = "INFO", log_format: str = "text"):
    """
    Configure root logging once at application start.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR
        log_format: "text" or "json"
    """
    if log_format.lower() == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logger.info(f"Logging configured: level={log_level}, format={log_format}")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, including fields passed via `extra`."""

    def format(self, record):
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                log_entry[key] = value
            except (TypeError, ValueError):
                log_entry[key] = str(value)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False)


def log_business_event(
    event: str,
    entity: str,
    entity_id: int,
    user_id: Optional[int] = None,
    data: Optional[Dict[str, Any]] = None,
):
    """Log a domain event (booking created, review moderated, ...)."""
    logging.getLogger("app.events").info(
        f"{event}: {entity}#{entity_id}",
        extra={
            "event": event,
            "entity": entity,
            "entity_id": entity_id,
            "user_id": user_id,
            "data": data or {},
        },
    )
