"""Structured logging for the HBCI dialog driver.

Stages attach the dialog they work on via extra={"context": {...}}; the
dialog id and message number are lifted into top-level JSON fields so log
lines of one dialog can be filtered without parsing the context.
"""

import json
import logging
import logging.config
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH, DialogConfig, load_config

PACKAGE_LOGGER = "hbci_dialog"

# Context keys promoted to top-level fields of a log line
DIALOG_FIELDS = ("dialog_id", "msg_num")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with dialog_id/msg_num when known."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        context = dict(getattr(record, "context", None) or {})
        for key in DIALOG_FIELDS:
            if key in context:
                log_data[key] = context.pop(key)
        if context:
            log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def dialog_context(dialog_id: str | None, msg_num: int | str | None = None) -> dict:
    """The extra= payload identifying a dialog (and message) in a log record."""
    context: dict = {"dialog_id": dialog_id}
    if msg_num is not None:
        context["msg_num"] = str(msg_num)
    return {"context": context}


def setup_logging(
    config: DialogConfig | None = None,
    log_file: str | None = None,
) -> None:
    """
    Route the hbci_dialog logger to a rotating JSON file and stdout.

    Args:
        config: Supplies the log level. Defaults to load_config().
        log_file: Path to log file. Defaults to 04_logs/hbci_dialog.log.
    """
    if config is None:
        config = load_config()

    if log_file is None:
        log_file = str(DEFAULT_LOG_PATH)
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": JSONFormatter},
            },
            "handlers": {
                "file": {
                    "class": "logging.handlers.RotatingFileHandler",
                    "filename": log_file,
                    "maxBytes": 10 * 1024 * 1024,  # 10 MB
                    "backupCount": 5,
                    "formatter": "json",
                    "encoding": "utf-8",
                },
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                PACKAGE_LOGGER: {
                    "level": config.log_level,
                    "handlers": ["file", "console"],
                    "propagate": False,
                },
            },
        }
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
