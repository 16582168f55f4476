"""Multi-provider search orchestrator.

Holds the ordered provider list, the per-provider statistics and the
configured strategy, and routes every search through them.

Usage:
    orchestrator = (
        SearchOrchestrator.configure("aggregate", timeout_per_provider=5.0)
        .add_provider(DuckDuckGoProvider())
        .add_provider(ArxivProvider())
    )
    results = await orchestrator.search(MultiSearchRequest(query="llm agents"))
"""

import asyncio
from typing import Dict, List, Optional, Sequence, Tuple, Union

import structlog
from pydantic import ValidationError

from websearch.models.config import OrchestratorConfig
from websearch.models.provider import ProviderStats, StrategyKind
from websearch.models.search import MultiSearchRequest, NormalizedResult
from websearch.observability.context import search_context
from websearch.observability.metrics import RESULTS_RETURNED, SEARCHES_TOTAL
from websearch.orchestration.invoker import TimedInvoker
from websearch.orchestration.stats import StatsTracker
from websearch.orchestration.strategies import SearchStrategy, create_strategy
from websearch.services.providers.base import SearchProvider
from websearch.utils.exceptions import ConfigurationError

logger = structlog.get_logger()


class SearchOrchestrator:
    """Single query interface over several search providers.

    The strategy is fixed at construction. Providers are registered before
    the first search; their registration order drives failover order,
    round-robin order and race tie-breaking.
    """

    def __init__(
        self,
        config: Optional[OrchestratorConfig] = None,
        providers: Sequence[SearchProvider] = (),
    ):
        """Initialize orchestrator.

        Args:
            config: Validated orchestrator configuration (defaults apply
                when None).
            providers: Initial providers, in registration order.

        Raises:
            ConfigurationError: Duplicate provider names.
        """
        self._config = config or OrchestratorConfig()
        self._providers: List[SearchProvider] = []
        self._stats = StatsTracker()
        self._searched = False

        self._invoker = TimedInvoker(
            self._providers, self._stats, self._config.timeout_per_provider
        )
        self._strategy: SearchStrategy = create_strategy(
            self._config.strategy, self._invoker, self._config.max_concurrent
        )

        for provider in providers:
            self.add_provider(provider)

        logger.info(
            "orchestrator_initialized",
            strategy=self._config.strategy.value,
            timeout_ms=self._config.timeout_ms,
            max_concurrent=self._config.max_concurrent,
            providers=[p.name for p in self._providers],
        )

    @classmethod
    def configure(
        cls,
        strategy: Union[StrategyKind, str],
        timeout_per_provider: float = 10.0,
        max_concurrent: int = 3,
    ) -> "SearchOrchestrator":
        """Build an orchestrator with no providers yet.

        Args:
            strategy: Strategy kind or its name ("failover", "load_balance",
                "aggregate", "race").
            timeout_per_provider: Deadline per provider call, in seconds.
            max_concurrent: Calls in flight at once for aggregate and race.

        Raises:
            ConfigurationError: Unknown strategy or out-of-range values.
        """
        try:
            config = OrchestratorConfig(
                strategy=strategy,
                timeout_per_provider=timeout_per_provider,
                max_concurrent=max_concurrent,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid orchestrator configuration: {e}") from e
        return cls(config)

    def add_provider(self, provider: SearchProvider) -> "SearchOrchestrator":
        """Register a provider and zero its statistics.

        Returns:
            self, for chaining.

        Raises:
            ConfigurationError: After the first search, or on a duplicate name.
        """
        if self._searched:
            raise ConfigurationError(
                f"Cannot add provider '{provider.name}' after the first search"
            )
        if provider.name in self._stats:
            raise ConfigurationError(f"Duplicate provider name: '{provider.name}'")

        self._providers.append(provider)
        self._stats.register(provider.name)
        logger.debug(
            "provider_registered",
            provider=provider.name,
            position=len(self._providers) - 1,
        )
        return self

    @property
    def providers(self) -> Tuple[SearchProvider, ...]:
        return tuple(self._providers)

    @property
    def config(self) -> OrchestratorConfig:
        return self._config

    @property
    def strategy(self) -> StrategyKind:
        return self._config.strategy

    async def search(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        """Run one search with the configured strategy.

        All log events of the call share one correlation ID.

        Raises:
            NoProvidersConfiguredError: No providers registered.
            AllProvidersFailedError: Aggregate search with no successes.
            SearchTimeoutError: Provider deadline exceeded.
            SearchError: Any error surfaced by the strategy.
        """
        self._searched = True
        strategy = self._config.strategy.value

        with search_context():
            logger.info(
                "search_started",
                strategy=strategy,
                providers=len(self._providers),
                query=request.query[:80],
            )
            try:
                results = await self._strategy.execute(request)
            except Exception as e:
                SEARCHES_TOTAL.labels(strategy=strategy, status="failed").inc()
                logger.warning(
                    "search_failed",
                    strategy=strategy,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

            SEARCHES_TOTAL.labels(strategy=strategy, status="success").inc()
            RESULTS_RETURNED.labels(strategy=strategy).inc(len(results))
            logger.info("search_completed", strategy=strategy, count=len(results))
            return results

    def search_sync(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        """Blocking wrapper around search() for synchronous callers."""
        return asyncio.run(self.search(request))

    def get_stats(self) -> Dict[str, ProviderStats]:
        """Snapshot of per-provider statistics (copies)."""
        return self._stats.snapshot()
