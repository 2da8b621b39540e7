"""Logging configuration for the storefront.

stdlib logging owns the handlers: stdout, ``storefront.log`` and
``storefront_error.log`` (both rotating). structlog sits on top and renders
key/value events, as JSON in production and for a terminal elsewhere.

Request-scoped values (path, method, order number) are bound through
`add_context` and appear on every line logged while handling the request.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

_MAX_LOG_BYTES = 10 * 1024 * 1024
_BACKUPS = 5

_DEFAULT_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

# Third-party loggers that drown out the storefront's own events
_QUIET_LOGGERS = ("protean", "urllib3", "asyncio", "uvicorn.access")


def current_environment() -> str:
    """Name of the running environment, lowercased."""
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", _DEFAULT_LEVELS.get(current_environment(), "INFO")).upper()


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_dir: str | None = None, file_prefix: str = "storefront") -> None:
    level = get_log_level()
    log_path = Path(log_dir or os.getenv("LOG_DIR", "logs"))
    log_path.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating_handler(log_path / f"{file_prefix}.log", level),
        _rotating_handler(log_path / f"{file_prefix}_error.log", logging.ERROR),
    ]

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer(environment: str):
    if environment in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def setup_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            ),
            _renderer(current_environment()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: str | None = None, file_prefix: str = "storefront") -> None:
    """Configure stdlib handlers and structlog. Safe to call more than once."""
    setup_stdlib_logging(log_dir=log_dir, file_prefix=file_prefix)
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind values onto every log line emitted in the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
