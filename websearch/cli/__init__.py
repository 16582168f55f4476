"""websearch CLI Package.

Command-line interface for single-provider and orchestrated
multi-provider web search.

Usage:
    python -m websearch.cli single "rust async runtimes" -p duckduckgo
    python -m websearch.cli multi "llm agents" -s aggregate -p duckduckgo -p arxiv
    python -m websearch.cli arxiv 2301.12345,2302.00001
    python -m websearch.cli providers
"""

import typer

from websearch.cli.providers import providers_command
from websearch.cli.search import arxiv_command, multi_command, single_command

# Create main app
app = typer.Typer(help="websearch: multi-provider web search")

app.command(name="single")(single_command)
app.command(name="multi")(multi_command)
app.command(name="arxiv")(arxiv_command)
app.command(name="providers")(providers_command)

__all__ = [
    "app",
    "single_command",
    "multi_command",
    "arxiv_command",
    "providers_command",
]
