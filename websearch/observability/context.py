"""Correlation ID context for tracing one search across providers.

A search fans out to several providers, possibly concurrently. The
correlation ID lives in a ContextVar, so every task spawned by the
orchestrator inherits it and all log events of one search share an ID.

Usage:
    from websearch.observability.context import search_context

    with search_context() as corr_id:
        results = await orchestrator.search(request)
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Generator, Optional

_correlation_id_var: ContextVar[Optional[str]] = ContextVar(
    "websearch_correlation_id", default=None
)


def new_correlation_id() -> str:
    """Generate a short, log-friendly correlation ID."""
    return f"search-{uuid.uuid4().hex[:12]}"


def set_correlation_id(corr_id: Optional[str] = None) -> str:
    """Set the correlation ID for the current context.

    Args:
        corr_id: Explicit ID. A new one is generated when None.

    Returns:
        The ID now in effect.
    """
    if corr_id is None:
        corr_id = new_correlation_id()
    _correlation_id_var.set(corr_id)
    return corr_id


def get_correlation_id() -> Optional[str]:
    """Current correlation ID, or None outside any search."""
    return _correlation_id_var.get()


def clear_correlation_id() -> None:
    _correlation_id_var.set(None)


@contextmanager
def search_context(corr_id: Optional[str] = None) -> Generator[str, None, None]:
    """Scope a correlation ID to one search.

    An ID already set by the caller is reused so that nested searches
    (e.g. a CLI command running several searches) stay correlated.
    The previous value is restored on exit.
    """
    effective = corr_id or get_correlation_id() or new_correlation_id()
    token = _correlation_id_var.set(effective)
    try:
        yield effective
    finally:
        _correlation_id_var.reset(token)
