"""Structured logging for the search library.

Wraps structlog configuration with:
- Correlation ID injection into every log entry
- Component names for filtering orchestrator vs. adapter events
- JSON output for log aggregation or colored console output for the CLI

Usage:
    from websearch.observability.logging import configure_logging, get_logger

    configure_logging(level="INFO", json_output=False)

    logger = get_logger("orchestrator")
    logger.info("search_started", strategy="failover")
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.typing import EventDict, WrappedLogger

from websearch.observability.context import get_correlation_id


def add_correlation_id_processor(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Inject the current correlation ID ("none" outside a search)."""
    corr_id = get_correlation_id()
    event_dict.setdefault("correlation_id", corr_id if corr_id else "none")
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog for the application.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: Render JSON when True, colored console lines otherwise.
        add_timestamp: Prefix each entry with an ISO timestamp.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_correlation_id_processor,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(component: Optional[str] = None, **initial_context: Any) -> Any:
    """Get a structlog logger bound to a component name.

    Args:
        component: Component name, e.g. "orchestrator" or "provider.arxiv".
        **initial_context: Extra key/values bound to every entry.
    """
    logger = structlog.get_logger()
    if component:
        logger = logger.bind(component=component)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


def bind_context(**context: Any) -> None:
    """Bind key/values to all later log entries in the current context."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
