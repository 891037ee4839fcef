"""Structured logging: structlog events rendered through stdlib handlers on stderr."""

from __future__ import annotations

import logging.config
import os
import sys
from typing import Any

import structlog

LEVEL_ENV = "DEPAUDIT_LOG_LEVEL"
FORMAT_ENV = "DEPAUDIT_LOG_FORMAT"

# Library loggers pinned regardless of the depaudit level.
THIRD_PARTY_LEVELS = {
    "uvicorn.access": "WARNING",
    "uvicorn.error": "INFO",
    "httpx": "WARNING",
    "httpcore": "WARNING",
}


def _processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    # No ANSI colours when stderr is piped into a file or a collector.
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def build_logging_config(
    log_level: str,
    pre_chain: list[structlog.types.Processor],
    renderer: structlog.types.Processor,
) -> dict[str, Any]:
    """``dictConfig`` payload: one stderr handler formatting through structlog."""
    loggers = {name: {"level": level} for name, level in THIRD_PARTY_LEVELS.items()}
    loggers["depaudit"] = {"level": log_level}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": pre_chain,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
            },
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "structlog",
            },
        },
        "root": {"handlers": ["stderr"], "level": log_level},
        "loggers": loggers,
    }


def setup_logging(level: str | None = None) -> None:
    """Configure structlog and stdlib logging once per process.

    ``DEPAUDIT_LOG_LEVEL`` (default INFO) and ``DEPAUDIT_LOG_FORMAT``
    (``console`` or ``json``) are read from the environment; an explicit
    *level*, e.g. from ``depaudit -v``, wins over the variable.
    """
    log_level = (level or os.environ.get(LEVEL_ENV) or "INFO").upper()
    log_format = os.environ.get(FORMAT_ENV, "console").strip().lower()

    pre_chain = _processors()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.config.dictConfig(build_logging_config(log_level, pre_chain, _renderer(log_format)))
