"""Strategies deciding which providers a search calls and how answers combine.

- FailoverStrategy: registration order, first success wins
- LoadBalanceStrategy: one provider per call, round-robin
- AggregateStrategy: every provider, results merged and sorted by provider
- RaceStrategy: every provider concurrently, fastest success wins
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

import structlog

from websearch.models.provider import StrategyKind
from websearch.models.search import MultiSearchRequest, NormalizedResult
from websearch.orchestration.invoker import TimedInvoker
from websearch.utils import debug
from websearch.utils.exceptions import (
    AllProvidersFailedError,
    NoProvidersConfiguredError,
)

logger = structlog.get_logger()


class SearchStrategy(ABC):
    """Base class for orchestration strategies.

    Subclasses implement `_execute`; `execute` rejects an empty provider
    list before any provider is touched.
    """

    kind: StrategyKind

    def __init__(self, invoker: TimedInvoker, max_concurrent: int = 3):
        self.invoker = invoker
        self.max_concurrent = max_concurrent

    @property
    def provider_count(self) -> int:
        return len(self.invoker.providers)

    def provider_name(self, index: int) -> str:
        return self.invoker.providers[index].name

    async def execute(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        if self.provider_count == 0:
            raise NoProvidersConfiguredError()
        debug.log(
            request.debug,
            "strategy_started",
            strategy=self.kind.value,
            providers=self.provider_count,
        )
        return await self._execute(request)

    @abstractmethod
    async def _execute(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        pass


class FailoverStrategy(SearchStrategy):
    """Try providers in registration order until one succeeds.

    When all fail, the last provider's exception is re-raised unchanged.
    """

    kind = StrategyKind.FAILOVER

    async def _execute(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        last_error: Optional[Exception] = None

        for index in range(self.provider_count):
            try:
                results = await self.invoker.invoke(index, request)
            except Exception as e:
                last_error = e
                debug.log(
                    request.debug,
                    "failover_next_provider",
                    failed_provider=self.provider_name(index),
                    error=str(e),
                )
                continue

            debug.log(
                request.debug,
                "failover_succeeded",
                provider=self.provider_name(index),
                attempts=index + 1,
            )
            return results

        assert last_error is not None
        raise last_error


class LoadBalanceStrategy(SearchStrategy):
    """Send each call to exactly one provider, cycling through the list."""

    kind = StrategyKind.LOAD_BALANCE

    def __init__(self, invoker: TimedInvoker, max_concurrent: int = 3):
        super().__init__(invoker, max_concurrent)
        self._cursor = 0

    async def _execute(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        # Advance before awaiting so overlapping calls pick different providers
        index = self._cursor % self.provider_count
        self._cursor += 1

        debug.log(
            request.debug,
            "load_balance_selected",
            provider=self.provider_name(index),
            index=index,
        )
        return await self.invoker.invoke(index, request)


class AggregateStrategy(SearchStrategy):
    """Query every provider and merge the successful answers.

    Results are concatenated in registration order, stably sorted by provider
    name and truncated to the request's max_results. Individual failures are
    dropped; AllProvidersFailedError is raised only when nothing succeeded.
    """

    kind = StrategyKind.AGGREGATE

    async def _execute(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def run(index: int) -> List[NormalizedResult]:
            async with semaphore:
                return await self.invoker.invoke(index, request)

        outcomes = await asyncio.gather(
            *(run(i) for i in range(self.provider_count)), return_exceptions=True
        )

        merged: List[NormalizedResult] = []
        errors: Dict[str, str] = {}
        succeeded = 0

        for index, outcome in enumerate(outcomes):
            name = self.provider_name(index)
            if isinstance(outcome, BaseException):
                errors[name] = str(outcome) or type(outcome).__name__
                logger.warning(
                    "aggregate_provider_dropped", provider=name, error=str(outcome)
                )
                continue
            succeeded += 1
            merged.extend(outcome)

        if succeeded == 0:
            raise AllProvidersFailedError(provider_errors=errors)

        merged.sort(key=lambda r: (r.provider is not None, r.provider or ""))
        if request.max_results:
            merged = merged[: request.max_results]

        debug.log(
            request.debug,
            "aggregate_merged",
            succeeded=succeeded,
            failed=len(errors),
            returned=len(merged),
        )
        return merged


class RaceStrategy(SearchStrategy):
    """Run providers concurrently and return the first successful answer.

    At most max_concurrent calls are in flight; calls start in registration
    order. When several succeed in the same step the first-listed wins. The
    remaining calls are cancelled and awaited before returning. When all
    fail, the last provider's exception is re-raised.
    """

    kind = StrategyKind.RACE

    async def _execute(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        semaphore = asyncio.Semaphore(self.max_concurrent)
        decided = asyncio.Event()

        async def run(index: int) -> Optional[List[NormalizedResult]]:
            async with semaphore:
                # A slot freed after the race was won must not start a call
                if decided.is_set():
                    return None
                results = await self.invoker.invoke(index, request)
                decided.set()
                return results

        tasks = [asyncio.create_task(run(i)) for i in range(self.provider_count)]
        position = {task: i for i, task in enumerate(tasks)}
        errors: Dict[int, BaseException] = {}
        pending = set(tasks)

        try:
            while pending:
                done, pending = await asyncio.wait(
                    pending, return_when=asyncio.FIRST_COMPLETED
                )

                winners = []
                for task in done:
                    index = position[task]
                    if task.cancelled():
                        errors[index] = asyncio.CancelledError()
                    elif task.exception() is not None:
                        errors[index] = task.exception()
                    elif task.result() is not None:
                        winners.append(index)

                if winners:
                    winner = min(winners)
                    debug.log(
                        request.debug,
                        "race_won",
                        provider=self.provider_name(winner),
                        cancelled=len(pending),
                    )
                    results = tasks[winner].result()
                    assert results is not None
                    return results
        finally:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        raise errors[self.provider_count - 1]


STRATEGIES: Dict[StrategyKind, Type[SearchStrategy]] = {
    StrategyKind.FAILOVER: FailoverStrategy,
    StrategyKind.LOAD_BALANCE: LoadBalanceStrategy,
    StrategyKind.AGGREGATE: AggregateStrategy,
    StrategyKind.RACE: RaceStrategy,
}


def create_strategy(
    kind: StrategyKind, invoker: TimedInvoker, max_concurrent: int = 3
) -> SearchStrategy:
    """Instantiate the strategy registered for `kind`."""
    return STRATEGIES[kind](invoker, max_concurrent)
