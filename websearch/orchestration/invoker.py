"""Timed invocation of a single provider."""

import asyncio
import time
from typing import List, Sequence

import structlog

from websearch.models.search import MultiSearchRequest, NormalizedResult
from websearch.orchestration.stats import StatsTracker
from websearch.services.providers.base import SearchProvider
from websearch.utils.exceptions import SearchTimeoutError

logger = structlog.get_logger()


class TimedInvoker:
    """Runs one provider call under a deadline and records its outcome.

    The provider's own result or exception passes through unchanged; only
    deadline expiry is translated into SearchTimeoutError. Exactly one stats
    update is made per call, whatever the outcome.
    """

    def __init__(
        self,
        providers: Sequence[SearchProvider],
        stats: StatsTracker,
        timeout_seconds: float,
    ):
        self.providers = providers
        self.stats = stats
        self.timeout_seconds = timeout_seconds

    @property
    def timeout_ms(self) -> int:
        return int(round(self.timeout_seconds * 1000))

    async def invoke(
        self, index: int, request: MultiSearchRequest
    ) -> List[NormalizedResult]:
        """Call provider `index` with the request.

        Raises:
            SearchTimeoutError: The deadline elapsed (provider call cancelled).
            asyncio.CancelledError: The caller cancelled this call.
            Exception: Whatever the provider raised.
        """
        provider = self.providers[index]
        name = provider.name
        start = time.perf_counter()
        # Expiry comes from the task state; a provider's own TimeoutError is
        # an ordinary failure
        task = asyncio.ensure_future(provider.search(request))

        try:
            done, _ = await asyncio.wait({task}, timeout=self.timeout_seconds)
        except asyncio.CancelledError:
            # Race losers end here
            await self._abandon(task)
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.stats.record(name, False, elapsed_ms, status="cancelled")
            logger.debug("provider_cancelled", provider=name)
            raise

        if not done:
            await self._abandon(task)
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.stats.record(name, False, elapsed_ms, status="timeout")
            logger.warning(
                "provider_timeout",
                provider=name,
                timeout_ms=self.timeout_ms,
                elapsed_ms=round(elapsed_ms, 1),
            )
            raise SearchTimeoutError(self.timeout_ms, provider=name)

        try:
            results = task.result()
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.stats.record(name, False, elapsed_ms)
            logger.warning(
                "provider_failed",
                provider=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        self.stats.record(name, True, elapsed_ms)
        logger.debug(
            "provider_succeeded",
            provider=name,
            count=len(results),
            elapsed_ms=round(elapsed_ms, 1),
        )
        return results

    @staticmethod
    async def _abandon(task: "asyncio.Future[List[NormalizedResult]]") -> None:
        """Cancel a provider call and wait until it has unwound."""
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
