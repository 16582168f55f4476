"""Orchestration engine for multi-provider search."""

from websearch.orchestration.invoker import TimedInvoker
from websearch.orchestration.orchestrator import SearchOrchestrator
from websearch.orchestration.stats import StatsTracker
from websearch.orchestration.strategies import (
    STRATEGIES,
    AggregateStrategy,
    FailoverStrategy,
    LoadBalanceStrategy,
    RaceStrategy,
    SearchStrategy,
    create_strategy,
)

__all__ = [
    "SearchOrchestrator",
    "TimedInvoker",
    "StatsTracker",
    "SearchStrategy",
    "FailoverStrategy",
    "LoadBalanceStrategy",
    "AggregateStrategy",
    "RaceStrategy",
    "STRATEGIES",
    "create_strategy",
]
