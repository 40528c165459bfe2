"""
utils/logging.py — structlog configuration for pipeline runs.

Output is JSON or human-readable console text depending on log_format.
The CLI calls configure_logging() once per process.

Usage:
    from plaincost_pipeline.utils.logging import configure_logging, get_logger

    configure_logging(cfg)
    log = get_logger(__name__, stage="build")
    log.info("msas_inserted", rows=384)
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from plaincost_shared.config import Settings


def configure_logging(
    config: Settings | None = None,
    *,
    log_level: str | None = None,
    log_format: str | None = None,
) -> None:
    """
    Configure structlog for a pipeline process. Idempotent.

    Explicit log_level / log_format arguments win over the config values.
    """
    level_name = (log_level or (config.log_level if config else "INFO")).upper()
    fmt = log_format or (config.log_format if config else "console")
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str, **initial_values: Any) -> structlog.BoundLogger:
    """Return a structlog logger, pre-bound with initial_values if given."""
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger  # type: ignore[return-value]
