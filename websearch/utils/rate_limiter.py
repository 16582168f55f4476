import asyncio
import time

import structlog

logger = structlog.get_logger()


class RateLimiter:
    """Async token bucket that paces requests to a single backend.

    Adapters for backends with published politeness rules (arXiv asks for
    one request every three seconds) acquire a token before each call.
    Concurrent callers queue on an asyncio lock so the bucket is never
    overdrawn when the orchestrator fans out.
    """

    def __init__(self, requests_per_minute: int = 60, burst_size: int = 10):
        if requests_per_minute <= 0:
            raise ValueError("requests_per_minute must be positive")
        self.rate = requests_per_minute / 60.0
        self.burst_size = burst_size
        self.tokens = float(burst_size)
        self.last_update = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self.last_update
        self.tokens = min(float(self.burst_size), self.tokens + elapsed * self.rate)
        self.last_update = now

    async def acquire(self, requester_id: str = "system") -> float:
        """Take one token, sleeping until one is available.

        Returns:
            Seconds spent waiting.
        """
        async with self._lock:
            self._refill()
            if self.tokens >= 1:
                self.tokens -= 1
                return 0.0

            wait_time = (1 - self.tokens) / self.rate
            logger.debug(
                "rate_limit_wait", requester_id=requester_id, wait_seconds=wait_time
            )
            await asyncio.sleep(wait_time)
            self._refill()
            self.tokens = max(0.0, self.tokens - 1)
            return wait_time
