"""Observability for the search library.

Provides:
- Correlation ID context shared by all provider calls of one search
- Structured logging (structlog) with correlation ID injection
- Prometheus metrics for provider calls and orchestrated searches
"""

from websearch.observability.context import (
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
    search_context,
)
from websearch.observability.logging import (
    get_logger,
    configure_logging,
    bind_context,
    clear_context,
)
from websearch.observability.metrics import (
    PROVIDER_REQUESTS,
    PROVIDER_LATENCY,
    SEARCHES_TOTAL,
    RESULTS_RETURNED,
    get_metrics_text,
    get_metrics_content_type,
)

__all__ = [
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "search_context",
    "get_logger",
    "configure_logging",
    "bind_context",
    "clear_context",
    "PROVIDER_REQUESTS",
    "PROVIDER_LATENCY",
    "SEARCHES_TOTAL",
    "RESULTS_RETURNED",
    "get_metrics_text",
    "get_metrics_content_type",
]
