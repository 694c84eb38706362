"""Structured logging configuration using structlog.

Every dagkit module logs through a module-level structlog logger. This module
wires structlog onto the standard library ``logging`` package so that
applications embedding the graph engine control verbosity and rendering in
one place.

Example:
    >>> from dagkit.log_config import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_logs=False)
    >>> logger = get_logger(__name__)
    >>> logger.info("build_order_computed", vertex_count=12)
"""

import logging
import sys
from typing import Any

import structlog


PACKAGE_LOGGER = "dagkit"


def _resolve_level(level: str) -> int:
    numeric_level = getattr(logging, level.strip().upper(), None)
    if not isinstance(numeric_level, int):
        msg = f"Invalid log level: {level}"
        raise ValueError(msg)
    return numeric_level


def configure_logging(
    level: str = "INFO",
    json_logs: bool = True,
    graph_level: str | None = None,
) -> None:
    """Configure structlog for dagkit.

    The root logger receives ``level``. The ``dagkit`` package logger, which
    carries the per-edge mutation events, can be tuned separately so that an
    application running at DEBUG is not flooded by graph bookkeeping.

    Args:
        level: Root logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, use JSONRenderer; if False, use ConsoleRenderer
        graph_level: Level for the ``dagkit`` loggers; inherits ``level`` when None

    Raises:
        ValueError: If an invalid log level is provided
    """
    numeric_level = _resolve_level(level)
    package_level = _resolve_level(graph_level) if graph_level is not None else logging.NOTSET

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )
    logging.getLogger().setLevel(numeric_level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(package_level)

    processors: list[Any] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.contextvars.merge_contextvars,
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        A structlog BoundLogger instance
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables to every subsequent log entry.

    Useful when several graphs are analysed in one process, e.g.
    ``bind_context(graph="deploy-order")``.

    Args:
        **kwargs: Key-value pairs to add to the logging context
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific context variables from the logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all context variables from the logging context."""
    structlog.contextvars.clear_contextvars()
