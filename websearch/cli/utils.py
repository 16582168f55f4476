"""Shared CLI utilities.

Provides common functionality for all CLI commands.
"""

import functools
from pathlib import Path
from typing import Callable, Optional, TypeVar

import structlog
import typer

from websearch.models.config import WebSearchConfig
from websearch.observability.logging import configure_logging
from websearch.services.config_manager import ConfigManager, ConfigValidationError

# Keep stdout clean for results; only warnings and errors are logged
configure_logging(level="WARNING", json_output=False)
logger = structlog.get_logger()

# Type variable for decorator
F = TypeVar("F", bound=Callable)


def load_config(config_path: Optional[Path]) -> WebSearchConfig:
    """Load and validate configuration.

    Args:
        config_path: YAML file, or None to configure from the environment.

    Raises:
        typer.Exit: If configuration is invalid.
    """
    config_manager = ConfigManager(str(config_path) if config_path else None)
    try:
        return config_manager.load_config()
    except (FileNotFoundError, ConfigValidationError) as e:
        typer.secho(f"Configuration Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def enable_debug_logging(config: WebSearchConfig) -> None:
    """Switch to verbose logging for --debug runs."""
    configure_logging(level="DEBUG", json_output=config.json_logs)


def handle_errors(func: F) -> F:
    """Decorator for consistent error handling.

    Catches exceptions and displays user-friendly error messages.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except Exception as e:
            logger.error("command_failed", error=str(e), error_type=type(e).__name__)
            typer.secho(f"Error: {e}", fg=typer.colors.RED)
            raise typer.Exit(code=1)

    return wrapper  # type: ignore[return-value]


def display_success(message: str) -> None:
    typer.secho(message, fg=typer.colors.GREEN)


def display_warning(message: str) -> None:
    typer.secho(message, fg=typer.colors.YELLOW)


def display_error(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)


def display_info(message: str) -> None:
    typer.secho(message, fg=typer.colors.CYAN)
