"""
Logging setup for timeresample.

Modules log key/value events through structlog, for example
``log.info("Parsed date column", column="observed", nulls=2)``. Events go to
stderr so that the CLI's tables on stdout stay clean.
"""

import logging
import sys
from typing import Any

import structlog


def _renderer(json_output: bool) -> list[structlog.types.Processor]:
    """Final processors: JSON lines, or aligned console output."""
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
) -> None:
    """
    Set up structlog once per process, before the pipeline runs.

    Args:
        level: Minimum level name; events below it are dropped.
        json_output: Write each event as a JSON line instead of console text.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(json_output),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Module-level logger; pass ``__name__``."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """
    Bind key/value pairs to every event logged inside a ``with`` block.

    The pipeline binds ``project`` this way so that each parse and resample
    event names the job it belongs to.
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
