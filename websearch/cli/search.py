"""Search commands: single provider, orchestrated multi-provider, arXiv IDs."""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer

from websearch.cli.formatting import OutputFormat, display_results, display_stats
from websearch.cli.utils import (
    display_info,
    enable_debug_logging,
    handle_errors,
    load_config,
)
from websearch.models.provider import StrategyKind
from websearch.models.search import (
    MultiSearchRequest,
    SafeSearch,
    SortBy,
    SortOrder,
)
from websearch.services.provider_factory import build_orchestrator, create_provider
from websearch.services.providers.arxiv import ArxivProvider
from websearch.services.web_search import web_search
from websearch.utils.debug import debug_all


@handle_errors
def single_command(
    query: str = typer.Argument(..., help="Search query"),
    provider: str = typer.Option(
        "duckduckgo", "--provider", "-p", help="Provider to query"
    ),
    max_results: int = typer.Option(
        10, "--max-results", "-m", min=1, help="Maximum number of results"
    ),
    language: Optional[str] = typer.Option(
        None, "--language", "-l", help="Language hint (e.g. en)"
    ),
    region: Optional[str] = typer.Option(
        None, "--region", "-r", help="Region hint (e.g. us-en)"
    ),
    safe_search: Optional[SafeSearch] = typer.Option(
        None, "--safe-search", "-s", help="Safe search level"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Verbose logging"),
    raw: bool = typer.Option(False, "--raw", help="Include raw provider payloads"),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TABLE, "--format", "-f", help="Output format"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to websearch config YAML"
    ),
):
    """Search with a single provider."""
    config = load_config(config_path)
    if debug:
        enable_debug_logging(config)

    search_provider = create_provider(provider, config.providers)
    request = MultiSearchRequest(
        query=query,
        max_results=max_results,
        language=language,
        region=region,
        safe_search=safe_search,
        debug=debug_all() if debug else None,
    )

    results = asyncio.run(web_search(request, search_provider))
    display_results(results, output_format, include_raw=raw)


@handle_errors
def multi_command(
    query: str = typer.Argument(..., help="Search query"),
    strategy: Optional[StrategyKind] = typer.Option(
        None, "--strategy", "-s", help="Orchestration strategy"
    ),
    providers: Optional[List[str]] = typer.Option(
        None, "--provider", "-p", help="Provider to use (repeat to add more)"
    ),
    max_results: int = typer.Option(
        10, "--max-results", "-m", min=1, help="Maximum number of results"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Per-provider timeout in seconds"
    ),
    max_concurrent: Optional[int] = typer.Option(
        None, "--max-concurrent", help="Providers in flight at once"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Verbose logging"),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TABLE, "--format", "-f", help="Output format"
    ),
    show_stats: bool = typer.Option(
        False, "--stats", help="Print provider statistics after the search"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to websearch config YAML"
    ),
):
    """Search across several providers with an orchestration strategy."""
    config = load_config(config_path)
    if debug:
        enable_debug_logging(config)

    orchestrator = build_orchestrator(
        config,
        provider_names=providers,
        strategy=strategy,
        timeout_per_provider=timeout,
        max_concurrent=max_concurrent,
    )

    if output_format != OutputFormat.JSON:
        names = ", ".join(p.name for p in orchestrator.providers)
        display_info(f"Searching {names} (strategy: {orchestrator.strategy.value})")

    request = MultiSearchRequest(
        query=query,
        max_results=max_results,
        debug=debug_all() if debug else None,
    )
    results = asyncio.run(orchestrator.search(request))
    display_results(results, output_format)

    if show_stats:
        display_stats(orchestrator.get_stats())


@handle_errors
def arxiv_command(
    ids: str = typer.Argument(..., help="Comma-separated arXiv IDs"),
    max_results: int = typer.Option(
        10, "--max-results", "-m", min=1, help="Maximum number of results"
    ),
    sort_by: Optional[SortBy] = typer.Option(None, "--sort-by", help="Sort field"),
    sort_order: Optional[SortOrder] = typer.Option(
        None, "--sort-order", help="Sort direction"
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TABLE, "--format", "-f", help="Output format"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to websearch config YAML"
    ),
):
    """Look up arXiv papers by ID."""
    config = load_config(config_path)

    request = MultiSearchRequest(
        id_list=ids,
        max_results=max_results,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    provider = ArxivProvider(config.providers.arxiv)
    results = asyncio.run(web_search(request, provider))
    display_results(results, output_format)
