"""Loguru sinks and structured context helpers for closuretree."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict

from loguru import logger

from ..config.settings import Settings, get_settings

#: Context keys rendered in their own column rather than with the other fields.
_COLUMNS = ("step", "module")

_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[step]}</magenta> | "
    "<cyan>{extra[module]}</cyan> | "
    "{message}{extra[fields]}\n{exception}"
)


def _render_fields(record: Dict[str, Any]) -> None:
    """Flatten structured keyword context into a ``key=value`` suffix."""

    extra = record["extra"]
    for key in _COLUMNS:
        extra.setdefault(key, "-")
    pairs = [
        f"{key}={value!r}"
        for key, value in extra.items()
        if key not in _COLUMNS and key != "fields"
    ]
    extra["fields"] = (" | " + " ".join(pairs)) if pairs else ""


def configure_logging(settings: Settings | None = None, level: str | None = None) -> None:
    """Install the stderr sink and, when enabled, the rotating file sink.

    ``level`` overrides ``settings.logging.level`` for both sinks.
    """

    cfg = settings or get_settings()
    log_cfg = cfg.logging
    level = (level or log_cfg.level).upper()

    logger.remove()
    logger.configure(extra={"step": "-", "module": "-"}, patcher=_render_fields)
    logger.add(sys.stderr, level=level, backtrace=False, diagnose=False, format=_LOG_FORMAT)

    if log_cfg.file_sink:
        log_path = cfg.log_file
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=level,
            rotation=log_cfg.rotation,
            retention=log_cfg.retention,
            format=_LOG_FORMAT,
        )


def get_logger(**context: Any):
    """Return a logger bound to ``context``, usually ``module=__name__``."""

    return logger.bind(**context)


@contextmanager
def logging_context(**context: Any):
    with logger.contextualize(**context):
        yield logger


@contextmanager
def log_timing(step: str, *, logger_=logger, **context: Any):
    """Log the wall-clock seconds spent inside the block, with ``context``."""

    start = perf_counter()
    try:
        yield
    finally:
        logger_.info("Step timing", step=step, seconds=round(perf_counter() - start, 6), **context)


__all__ = ["configure_logging", "get_logger", "logging_context", "log_timing"]
