"""Request-scoped debug logging.

Each MultiSearchRequest may carry DebugOptions. These helpers emit extra
structlog events only when the matching switch is on, so adapters and
strategies can log freely without checking flags themselves.
"""

from typing import Any, Optional

import structlog

from websearch.models.search import DebugOptions

logger = structlog.get_logger("websearch.debug")


def log(options: Optional[DebugOptions], event: str, **fields: Any) -> None:
    """Log an event when debugging is enabled."""
    if options is not None and options.enabled:
        logger.info(event, **fields)


def log_request(options: Optional[DebugOptions], event: str, **fields: Any) -> None:
    """Log request details (URLs, parameters) when request logging is on."""
    if options is not None and options.enabled and options.log_requests:
        logger.info(event, kind="request", **fields)


def log_response(options: Optional[DebugOptions], event: str, **fields: Any) -> None:
    """Log response details when response logging is on."""
    if options is not None and options.enabled and options.log_responses:
        logger.info(event, kind="response", **fields)


def debug_all() -> DebugOptions:
    return DebugOptions(enabled=True, log_requests=True, log_responses=True)
