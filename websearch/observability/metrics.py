"""Prometheus metrics for provider calls and orchestrated searches.

Usage:
    from websearch.observability.metrics import PROVIDER_REQUESTS

    PROVIDER_REQUESTS.labels(provider="arxiv", status="success").inc()

The stats tracker and orchestrator update these automatically; host
applications expose them with get_metrics_text().
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Private registry so embedding applications keep their default one clean
REGISTRY = CollectorRegistry(auto_describe=True)

PROVIDER_REQUESTS = Counter(
    name="websearch_provider_requests_total",
    documentation="Provider invocations by outcome",
    labelnames=["provider", "status"],  # success, failed, timeout
    registry=REGISTRY,
)

PROVIDER_LATENCY = Histogram(
    name="websearch_provider_latency_seconds",
    documentation="Latency of successful provider calls in seconds",
    labelnames=["provider"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 30, float("inf")),
    registry=REGISTRY,
)

SEARCHES_TOTAL = Counter(
    name="websearch_searches_total",
    documentation="Orchestrated searches by strategy and outcome",
    labelnames=["strategy", "status"],  # success, failed
    registry=REGISTRY,
)

RESULTS_RETURNED = Counter(
    name="websearch_results_returned_total",
    documentation="Results returned to callers",
    labelnames=["strategy"],
    registry=REGISTRY,
)


def get_metrics_text() -> bytes:
    """Metrics in Prometheus exposition format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
