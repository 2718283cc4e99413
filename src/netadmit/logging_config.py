"""structlog configuration for netadmit.

Log records emitted inside an active OpenTelemetry span carry trace_id and
span_id so admission decisions can be correlated with webhook traces.

Example:
    >>> from netadmit.logging_config import configure_logging
    >>> configure_logging(log_level="DEBUG", json_output=True)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import INVALID_SPAN_ID, INVALID_TRACE_ID

EventDict = MutableMapping[str, Any]


def add_trace_context(
    logger: Any,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Add trace context to a structlog event dictionary.

    Args:
        logger: The logger instance (unused, required by structlog processor API).
        method_name: The log method name (unused).
        event_dict: The event dictionary to enrich.

    Returns:
        The event dictionary with trace_id and span_id added if a span is active.
    """
    ctx = trace.get_current_span().get_span_context()
    if ctx.trace_id != INVALID_TRACE_ID and ctx.span_id != INVALID_SPAN_ID:
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    """Create a logger writing to the current sys.stderr."""
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
) -> None:
    """Configure structlog processors and level filtering.

    Logs go to stderr so command output on stdout stays parseable.

    Args:
        log_level: Minimum level to emit (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: If True, render JSON lines; otherwise console output.

    Raises:
        ValueError: If log_level is not a known level name.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_trace_context,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )


__all__ = [
    "add_trace_context",
    "configure_logging",
]
