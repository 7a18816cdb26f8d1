"""Logging setup: dictConfig with a per-request id injected into every record."""

import logging
import logging.config
from contextvars import ContextVar
from typing import Any

LOGGER_NAME = "cellid"

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")


def set_request_id(request_id: str) -> None:
    request_id_ctx.set(request_id)


def clear_request_id() -> None:
    request_id_ctx.set("-")


class ContextFilter(logging.Filter):
    """Attach the current request id to every record, third-party ones included."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.__dict__.setdefault("request_id", request_id_ctx.get())
        return True


def build_logging_config(level: int, json_format: bool) -> dict[str, Any]:
    """Return the dictConfig for the application loggers.

    Args:
        level: Level applied to the ``cellid`` and ``uvicorn.error`` loggers.
        json_format: Emit one JSON object per record instead of text.
    """
    formatters: dict[str, Any] = {
        "default": {
            "()": "uvicorn.logging.DefaultFormatter",
            "fmt": "%(levelprefix)s %(asctime)s [%(name)s] [req=%(request_id)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s %(module)s %(funcName)s %(request_id)s",
        },
    }

    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if json_format else "default",
            "filters": ["ctx"],
            "stream": "ext://sys.stderr",
        }
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"ctx": {"()": ContextFilter}},
        "formatters": formatters,
        "handlers": handlers,
        "loggers": {
            LOGGER_NAME: {"handlers": ["console"], "level": level, "propagate": False},
            "uvicorn.error": {"handlers": ["console"], "level": level, "propagate": False},
            "uvicorn.access": {"handlers": ["console"], "level": logging.WARNING, "propagate": False},
        },
        "root": {"handlers": ["console"], "level": max(level, logging.WARNING)},
    }


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Apply the logging configuration.

    Args:
        level: Level name such as ``"INFO"`` or ``"DEBUG"``; unknown names fall
            back to INFO.
        json_format: Use the JSON formatter from python-json-logger.
    """
    level_int = getattr(logging, str(level).upper(), logging.INFO)
    if not isinstance(level_int, int):
        level_int = logging.INFO
    logging.config.dictConfig(build_logging_config(level_int, json_format))
    logging.getLogger(LOGGER_NAME).debug(
        "event=logging_setup level=%s json=%s", logging.getLevelName(level_int), json_format
    )
