"""Logging configuration for the storefront engine.

Structured logging with structlog on top of the standard library handlers.
Production and staging emit one JSON object per line; development gets the
console renderer.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

LOG_FILE = "storefront.log"
ERROR_LOG_FILE = "storefront_error.log"

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


def _environment() -> str:
    return (os.getenv("STOREFRONT_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def get_log_level(env: str | None = None) -> str:
    """``LOG_LEVEL`` if set, otherwise the default for ``env``."""
    env = env or _environment()
    return os.getenv("LOG_LEVEL", _LEVELS.get(env, "INFO"))


def _rotating(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(level: str, log_dir: Path | None = None) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating(log_dir / LOG_FILE, level))
        root_logger.addHandler(_rotating(log_dir / ERROR_LOG_FILE, logging.ERROR))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_structlog(env: str) -> None:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if env in ("production", "staging"):
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: Path | None = None, env: str | None = None) -> None:
    """Configure all logging for the application.

    File handlers are only attached when ``log_dir`` is given. ``env`` defaults
    to ``STOREFRONT_ENV``.
    """
    env = env or _environment()
    setup_stdlib_logging(get_log_level(env), log_dir)
    setup_structlog(env)
