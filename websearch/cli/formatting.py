"""Rendering of search results and provider statistics."""

import json
from enum import Enum
from typing import Dict, List

import typer

from websearch.cli.utils import display_warning
from websearch.models.provider import ProviderStats
from websearch.models.search import NormalizedResult

SNIPPET_WIDTH = 200


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    SIMPLE = "simple"


def _truncate(text: str, width: int = SNIPPET_WIDTH) -> str:
    if len(text) <= width:
        return text
    return text[: width - 3].rstrip() + "..."


def display_results(
    results: List[NormalizedResult],
    output_format: OutputFormat = OutputFormat.TABLE,
    include_raw: bool = False,
) -> None:
    """Print results in the requested format."""
    if output_format == OutputFormat.JSON:
        payload = [r.to_display_dict(include_raw=include_raw) for r in results]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    if not results:
        display_warning("No results found.")
        return

    if output_format == OutputFormat.SIMPLE:
        for result in results:
            typer.echo(result.title)
            typer.echo(result.url)
            typer.echo("")
        return

    for i, result in enumerate(results, start=1):
        typer.secho(f"{i}. {result.title}", bold=True)
        typer.secho(f"   {result.url}", fg=typer.colors.BLUE)
        if result.snippet:
            typer.echo(f"   {_truncate(result.snippet)}")

        meta = [m for m in (result.domain, result.published_date) if m]
        if result.provider:
            meta.insert(0, f"[{result.provider}]")
        if meta:
            typer.secho(f"   {' | '.join(meta)}", fg=typer.colors.BRIGHT_BLACK)
        if include_raw and result.raw:
            typer.echo(f"   raw: {json.dumps(result.raw, default=str)}")
        typer.echo("")

    typer.secho(f"{len(results)} result(s)", fg=typer.colors.GREEN)


def display_stats(stats: Dict[str, ProviderStats]) -> None:
    """Print per-provider request statistics."""
    typer.secho("\nProvider statistics:", bold=True)
    typer.echo(
        f"{'provider':<12} {'total':>6} {'ok':>6} {'failed':>7} "
        f"{'avg ms':>9} {'rate':>6}"
    )
    for name, s in stats.items():
        typer.echo(
            f"{name:<12} {s.total_requests:>6} {s.successful_requests:>6} "
            f"{s.failed_requests:>7} {s.avg_response_time_ms:>9.1f} "
            f"{s.success_rate:>6.0%}"
        )
