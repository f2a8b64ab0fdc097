"""Loguru configuration with a per-request correlation id."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger

from .sensitive_filter import sanitize_record

NO_CORRELATION = "-"

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default=NO_CORRELATION)

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}:{function}:{line}</cyan> | <lvl>{message}</lvl>"
)


def _stamp_correlation_id(record) -> None:
    record["extra"]["correlation_id"] = _correlation_id.get()


logger.configure(patcher=_stamp_correlation_id)


def set_correlation_id(value: str | None) -> None:
    _correlation_id.set(value or NO_CORRELATION)


def get_correlation_id() -> str:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(NO_CORRELATION)


class _StdlibBridge(logging.Handler):
    """Route records from stdlib loggers (werkzeug, sqlalchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def _log_file() -> Path:
    configured = os.getenv("LOG_FILE")
    path = Path(configured) if configured else Path(__file__).resolve().parents[2] / "instance" / "app.log"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    level = (level or os.getenv("LOG_LEVEL") or ("DEBUG" if debug_mode else "INFO")).upper()
    common = dict(level=level, format=_FORMAT, backtrace=False, diagnose=False, filter=sanitize_record)

    logger.remove()
    logger.add(sys.stderr, colorize=True, **common)
    logger.add(_log_file(), colorize=False, enqueue=True, encoding="utf-8", **common)

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    logging.getLogger("werkzeug").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


__all__ = [
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
