"""Per-provider request statistics.

Every provider invocation is recorded exactly once. Updates for one provider
are applied under a lock, so the invariant

    total_requests == successful_requests + failed_requests

holds after every update even when several searches share one tracker.
"""

import threading
from typing import Dict, Iterable

import structlog

from websearch.models.provider import ProviderStats
from websearch.observability.metrics import PROVIDER_LATENCY, PROVIDER_REQUESTS

logger = structlog.get_logger()


class StatsTracker:
    """Rolling statistics keyed by provider name."""

    def __init__(self, provider_names: Iterable[str] = ()):
        self._lock = threading.Lock()
        self._stats: Dict[str, ProviderStats] = {}
        for name in provider_names:
            self.register(name)

    def register(self, name: str) -> None:
        """Create a zeroed entry for a provider (no-op if already present)."""
        with self._lock:
            self._stats.setdefault(name, ProviderStats())

    def __contains__(self, name: object) -> bool:
        return name in self._stats

    def record(
        self,
        name: str,
        success: bool,
        elapsed_ms: float,
        status: str = "",
    ) -> None:
        """Apply one invocation outcome.

        Args:
            name: Provider name.
            success: Whether the call returned results.
            elapsed_ms: Wall time of the call in milliseconds.
            status: Metrics label override (e.g. "timeout"); defaults to
                "success" or "failed".
        """
        with self._lock:
            stats = self._stats.setdefault(name, ProviderStats())
            stats.total_requests += 1
            if success:
                stats.successful_requests += 1
                n = stats.successful_requests
                stats.avg_response_time_ms = (
                    stats.avg_response_time_ms * (n - 1) + elapsed_ms
                ) / n
            else:
                stats.failed_requests += 1

        PROVIDER_REQUESTS.labels(
            provider=name, status=status or ("success" if success else "failed")
        ).inc()
        if success:
            PROVIDER_LATENCY.labels(provider=name).observe(elapsed_ms / 1000)

    def get(self, name: str) -> ProviderStats:
        """Copy of one provider's stats.

        Raises:
            KeyError: Unknown provider.
        """
        with self._lock:
            return self._stats[name].model_copy()

    def snapshot(self) -> Dict[str, ProviderStats]:
        """Copies of all entries, in registration order."""
        with self._lock:
            return {name: s.model_copy() for name, s in self._stats.items()}
