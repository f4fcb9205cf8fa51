"""Structured logging configuration."""

import logging
import sys

import structlog

# Held at WARNING outside debug mode. SQL echo is governed by DATABASE_ECHO.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "sqlalchemy.engine")


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    """Route structlog through stdlib logging.

    Console output in debug mode, one JSON object per line otherwise.
    ``level`` overrides the level implied by ``debug``.
    """
    root_level = logging.getLevelName(level.upper()) if level else None
    if not isinstance(root_level, int):
        root_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=root_level,
    )
    for name in _NOISY_LOGGERS:
        if name == "sqlalchemy.engine" or not debug:
            logging.getLogger(name).setLevel(logging.WARNING)

    renderer = structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)  # type: ignore[no-any-return]
