"""
Logging setup shared by the rating service and its tooling.

Entry points (``app.main``, ``run_server.py``) call ``setup_logging`` once;
modules ask for a tagged adapter:

    from utils.logging_utils import get_tagged_logger

    logger = get_tagged_logger(__name__, tag="rating_engine")
    logger.debug("Rated sample")

Every record carries ``job_name`` and ``tag`` so lines from the engine stages,
the API and batch jobs can be told apart in one stream. INFO and below go to
stdout, WARNING and above to stderr.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Dict, Mapping, Optional


# Records emitted before setup_logging() still get a timestamp and level.
BOOTSTRAP_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
BOOTSTRAP_DATEFMT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(level=logging.INFO, format=BOOTSTRAP_FORMAT, datefmt=BOOTSTRAP_DATEFMT)

DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(job_name)s | %(tag)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CONFIGURED: bool = False


class MaxLevelFilter(logging.Filter):
    """Pass records at or below ``max_level``; used to keep stdout free of warnings."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        return record.levelno <= self.max_level


class EnsureTagFilter(logging.Filter):
    """Give untagged records a tag taken from the last segment of their logger name.

    Third-party loggers (uvicorn, fastapi) never go through get_tagged_logger,
    so "uvicorn.error" is tagged "error".
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "tag"):
            name = getattr(record, "name", "")
            record.tag = name.rsplit(".", 1)[-1] if name else "-"
        return True


class JobNameFilter(logging.Filter):
    """Stamp every record with the process-wide job name ("-" when unset)."""

    def __init__(self, job_name: Optional[str] = None) -> None:
        super().__init__()
        self._job_name = job_name or "-"

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "job_name"):
            record.job_name = self._job_name
        return True


def build_logging_config(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = None,
) -> Mapping[str, Any]:
    """
    Return a ``logging.config.dictConfig`` mapping.

    Parameters
    ----------
    level:
        Root level, e.g. "DEBUG" to see per-stage engine traces.
    log_format, date_format:
        Formatter patterns; the default format expects ``job_name`` and ``tag``.
    job_name:
        Logical process name, e.g. "surf-wave-insights" or "dashboard-batch".
    """
    shared_filters = ["ensure_tag", "job_name"]
    handlers: Dict[str, Dict[str, Any]] = {
        "stdout": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "filters": shared_filters + ["stdout_max_info"],
            "level": "DEBUG",
            "stream": "ext://sys.stdout",
        },
        "stderr": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "filters": list(shared_filters),
            "level": "WARNING",
            "stream": "ext://sys.stderr",
        },
    }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "ensure_tag": {"()": EnsureTagFilter},
            "job_name": {"()": JobNameFilter, "job_name": job_name},
            "stdout_max_info": {"()": MaxLevelFilter, "max_level": logging.INFO},
        },
        "formatters": {"standard": {"format": log_format, "datefmt": date_format}},
        "handlers": handlers,
        "root": {"level": level, "handlers": list(handlers)},
    }


def setup_logging(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = None,
    override_existing: bool = False,
) -> None:
    """
    Apply the process-wide logging configuration.

    Repeat calls are no-ops unless ``override_existing`` is True, so importing
    ``app.main`` from tests does not clobber a test's own handlers twice.
    """
    global _CONFIGURED

    if _CONFIGURED and not override_existing:
        return

    logging.config.dictConfig(
        build_logging_config(level=level, log_format=log_format, date_format=date_format, job_name=job_name)
    )
    _CONFIGURED = True


def get_tagged_logger(name: str, *, tag: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Return a LoggerAdapter whose records carry ``tag``.

    ``tag`` defaults to the last segment of ``name``, so
    ``get_tagged_logger("app.safety_gate")`` is tagged "safety_gate".
    """
    if tag is None:
        tag = name.rsplit(".", 1)[-1]
    return logging.LoggerAdapter(logging.getLogger(name), {"tag": tag})
