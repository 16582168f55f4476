"""Providers command: list providers and whether they can be used."""

from pathlib import Path
from typing import Optional

import typer

from websearch.cli.utils import (
    display_success,
    display_warning,
    handle_errors,
    load_config,
)
from websearch.models.config import ProviderName
from websearch.services.provider_factory import (
    PROVIDER_DESCRIPTIONS,
    PROVIDER_ENV_VARS,
    available_providers,
)


@handle_errors
def providers_command(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to websearch config YAML"
    ),
):
    """List search providers and their availability."""
    config = load_config(config_path)
    enabled = set(config.providers.enabled)
    available = set(available_providers(config.providers))

    for name in ProviderName:
        marker = "*" if name in enabled else " "
        line = f"{marker} {name.value:<12} {PROVIDER_DESCRIPTIONS[name]}"

        if name in available:
            display_success(f"{line} (available)")
        else:
            env_vars = " and ".join(PROVIDER_ENV_VARS[name])
            display_warning(f"{line} (set {env_vars} to enable)")

    typer.echo("\n* enabled by default for multi-provider searches")
