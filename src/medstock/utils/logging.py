"""Logging for the medstock domain.

structlog renders through the standard library root logger, which writes to
stdout and to ``<log_dir>/medstock.log`` (plus ``medstock_error.log`` for
errors). Production and staging emit JSON lines.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

_LEVELS = {"production": "INFO", "staging": "INFO", "development": "DEBUG", "test": "WARNING"}
_MAX_BYTES = 10 * 1024 * 1024

_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.CallsiteParameterAdder(
        parameters=[
            structlog.processors.CallsiteParameter.FILENAME,
            structlog.processors.CallsiteParameter.LINENO,
            structlog.processors.CallsiteParameter.FUNC_NAME,
        ]
    ),
]


def _current_env() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """``LOG_LEVEL`` if set, otherwise the level for the current environment."""
    return os.getenv("LOG_LEVEL", _LEVELS.get(_current_env(), "INFO")).upper()


def _renderer():
    if _current_env() in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=True, max_frames=2),
    )


def _handlers(log_dir: Path, prefix: str):
    yield logging.StreamHandler(sys.stdout), None
    for suffix, level in (("", None), ("_error", logging.ERROR)):
        handler = logging.handlers.RotatingFileHandler(
            log_dir / f"{prefix}{suffix}.log", maxBytes=_MAX_BYTES, backupCount=5, encoding="utf-8"
        )
        yield handler, level


def configure_logging(log_dir: str = "logs", log_file_prefix: str = "medstock") -> None:
    level = get_log_level()
    path = Path(log_dir)
    path.mkdir(exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = []
    for handler, handler_level in _handlers(path, log_file_prefix):
        handler.setLevel(handler_level or level)
        root.addHandler(handler)

    # Library chatter
    for name in ("protean", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[*_PROCESSORS, _renderer()],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
