"""Structured logging for analysis runs.

Logs go to stderr so command-line JSON output on stdout stays parseable.
A scan context (URL, run id, ...) can be bound once per analysis and is
merged into every event logged while it is active.
"""

import logging
import sys
from typing import Any

import structlog

from defaultanswer.config import get_settings


def setup_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Configure structlog and stdlib logging.

    Args:
        level: Log level name; defaults to the configured level
        json_logs: Render JSON lines; defaults to True in production
    """
    settings = get_settings()

    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    render_json = settings.is_production if json_logs is None else json_logs

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if render_json:
        processors.extend(
            [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        )
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty() and not settings.is_test,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level, force=True)


def bind_scan_context(**fields: Any) -> None:
    """Attach fields (url, run_id, ...) to every event until cleared."""
    structlog.contextvars.bind_contextvars(**fields)


def clear_scan_context() -> None:
    structlog.contextvars.clear_contextvars()
