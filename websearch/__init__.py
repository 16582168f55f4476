"""websearch: one query interface over several search providers.

Example:
    from websearch import MultiSearchRequest, SearchOrchestrator
    from websearch.services.providers.duckduckgo import DuckDuckGoProvider
    from websearch.services.providers.arxiv import ArxivProvider

    orchestrator = (
        SearchOrchestrator.configure("failover")
        .add_provider(DuckDuckGoProvider())
        .add_provider(ArxivProvider())
    )
    results = orchestrator.search_sync(MultiSearchRequest(query="transformers"))
"""

from websearch.models.config import OrchestratorConfig
from websearch.models.provider import ProviderStats, StrategyKind
from websearch.models.search import (
    DebugOptions,
    MultiSearchRequest,
    NormalizedResult,
    SafeSearch,
    SortBy,
    SortOrder,
)
from websearch.orchestration.orchestrator import SearchOrchestrator
from websearch.services.providers.base import SearchProvider
from websearch.utils.exceptions import (
    AllProvidersFailedError,
    ConfigurationError,
    NoProvidersConfiguredError,
    ProviderError,
    SearchError,
    SearchTimeoutError,
)

__version__ = "0.1.0"

__all__ = [
    "SearchOrchestrator",
    "OrchestratorConfig",
    "StrategyKind",
    "ProviderStats",
    "SearchProvider",
    "MultiSearchRequest",
    "NormalizedResult",
    "DebugOptions",
    "SafeSearch",
    "SortBy",
    "SortOrder",
    "SearchError",
    "ConfigurationError",
    "NoProvidersConfiguredError",
    "SearchTimeoutError",
    "AllProvidersFailedError",
    "ProviderError",
]
