"""Builds providers and orchestrators from configuration."""

from typing import Dict, List, Optional, Tuple, Union

import structlog

from websearch.models.config import ProviderName, ProviderSettings, WebSearchConfig
from websearch.models.provider import StrategyKind
from websearch.orchestration.orchestrator import SearchOrchestrator
from websearch.services.config_manager import (
    ENV_BRAVE_API_KEY,
    ENV_EXA_API_KEY,
    ENV_GOOGLE_API_KEY,
    ENV_GOOGLE_CX,
    ENV_SERPAPI_API_KEY,
    ENV_TAVILY_API_KEY,
)
from websearch.services.providers.arxiv import ArxivProvider
from websearch.services.providers.base import SearchProvider
from websearch.services.providers.brave import BraveProvider
from websearch.services.providers.duckduckgo import DuckDuckGoProvider
from websearch.services.providers.exa import ExaProvider
from websearch.services.providers.google import GoogleProvider
from websearch.services.providers.serpapi import SerpApiProvider
from websearch.services.providers.tavily import TavilyProvider
from websearch.utils.exceptions import ConfigurationError

logger = structlog.get_logger()

# Environment variables holding each provider's credentials (empty: keyless)
PROVIDER_ENV_VARS: Dict[ProviderName, Tuple[str, ...]] = {
    ProviderName.DUCKDUCKGO: (),
    ProviderName.ARXIV: (),
    ProviderName.BRAVE: (ENV_BRAVE_API_KEY,),
    ProviderName.TAVILY: (ENV_TAVILY_API_KEY,),
    ProviderName.GOOGLE: (ENV_GOOGLE_API_KEY, ENV_GOOGLE_CX),
    ProviderName.SERPAPI: (ENV_SERPAPI_API_KEY,),
    ProviderName.EXA: (ENV_EXA_API_KEY,),
}

PROVIDER_DESCRIPTIONS: Dict[ProviderName, str] = {
    ProviderName.DUCKDUCKGO: "DuckDuckGo web search (HTML scraping)",
    ProviderName.ARXIV: "arXiv academic paper index",
    ProviderName.BRAVE: "Brave Search API",
    ProviderName.TAVILY: "Tavily AI-curated search API",
    ProviderName.GOOGLE: "Google Custom Search API",
    ProviderName.SERPAPI: "SerpAPI search engine results",
    ProviderName.EXA: "Exa keyword and semantic search API",
}


def _as_provider_name(name: Union[ProviderName, str]) -> ProviderName:
    try:
        return ProviderName(name)
    except ValueError:
        valid = ", ".join(p.value for p in ProviderName)
        raise ConfigurationError(f"Unknown provider '{name}'. Valid providers: {valid}")


def _missing_credentials(name: ProviderName, label: str) -> ConfigurationError:
    env_vars = " and ".join(PROVIDER_ENV_VARS[name])
    return ConfigurationError(f"{label} requires an API key. Set {env_vars}.")


def create_provider(
    name: Union[ProviderName, str], settings: Optional[ProviderSettings] = None
) -> SearchProvider:
    """Instantiate one provider.

    Raises:
        ConfigurationError: Unknown name or missing/invalid credential.
    """
    provider_name = _as_provider_name(name)
    settings = settings or ProviderSettings()

    if not is_available(provider_name, settings):
        label = PROVIDER_DESCRIPTIONS[provider_name].split()[0]
        raise _missing_credentials(provider_name, label)

    if provider_name == ProviderName.ARXIV:
        return ArxivProvider(settings.arxiv)
    if provider_name == ProviderName.DUCKDUCKGO:
        return DuckDuckGoProvider(settings.duckduckgo)
    if provider_name == ProviderName.BRAVE:
        return BraveProvider(settings.brave.api_key, settings.brave)
    if provider_name == ProviderName.TAVILY:
        return TavilyProvider(settings.tavily.api_key, settings.tavily)
    if provider_name == ProviderName.GOOGLE:
        return GoogleProvider(
            settings.google.api_key, settings.google.cx, settings.google
        )
    if provider_name == ProviderName.SERPAPI:
        return SerpApiProvider(settings.serpapi.api_key, settings.serpapi)
    return ExaProvider(settings.exa.api_key, settings.exa)


def is_available(name: ProviderName, settings: ProviderSettings) -> bool:
    """Whether a provider's credentials (if any) are configured."""
    if name == ProviderName.BRAVE:
        return bool(settings.brave.api_key)
    if name == ProviderName.TAVILY:
        return bool(settings.tavily.api_key)
    if name == ProviderName.GOOGLE:
        return bool(settings.google.api_key and settings.google.cx)
    if name == ProviderName.SERPAPI:
        return bool(settings.serpapi.api_key)
    if name == ProviderName.EXA:
        return bool(settings.exa.api_key)
    return True


def available_providers(
    settings: Optional[ProviderSettings] = None,
) -> List[ProviderName]:
    """Providers that can be created with the given settings"""
    settings = settings or ProviderSettings()
    return [name for name in ProviderName if is_available(name, settings)]


def build_orchestrator(
    config: WebSearchConfig,
    provider_names: Optional[List[str]] = None,
    strategy: Optional[Union[StrategyKind, str]] = None,
    timeout_per_provider: Optional[float] = None,
    max_concurrent: Optional[int] = None,
) -> SearchOrchestrator:
    """Create an orchestrator with providers registered in configured order.

    Args:
        config: Application configuration.
        provider_names: Overrides `config.providers.enabled` when given.
        strategy: Overrides the configured strategy.
        timeout_per_provider: Overrides the configured per-provider timeout.
        max_concurrent: Overrides the configured concurrency bound.

    Raises:
        ConfigurationError: Invalid overrides, unknown or unavailable
            provider, duplicates.
    """
    defaults = config.orchestrator
    if timeout_per_provider is None:
        timeout_per_provider = defaults.timeout_per_provider
    if max_concurrent is None:
        max_concurrent = defaults.max_concurrent
    orchestrator = SearchOrchestrator.configure(
        strategy or defaults.strategy,
        timeout_per_provider=timeout_per_provider,
        max_concurrent=max_concurrent,
    )

    names = provider_names or [p.value for p in config.providers.enabled]
    for name in names:
        orchestrator.add_provider(create_provider(name, config.providers))

    logger.info(
        "orchestrator_built",
        strategy=orchestrator.strategy.value,
        providers=[p.name for p in orchestrator.providers],
    )
    return orchestrator
