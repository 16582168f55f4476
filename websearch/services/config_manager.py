import os
from pathlib import Path
from string import Template
from typing import Any, Dict, Optional

import structlog
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from websearch.models.config import WebSearchConfig
from websearch.utils.exceptions import ConfigurationError

logger = structlog.get_logger()

# Environment variables read by ConfigManager.from_env()
ENV_BRAVE_API_KEY = "BRAVE_API_KEY"
ENV_TAVILY_API_KEY = "TAVILY_API_KEY"
ENV_GOOGLE_API_KEY = "GOOGLE_API_KEY"
ENV_GOOGLE_CX = "GOOGLE_CX"
ENV_SERPAPI_API_KEY = "SERPAPI_API_KEY"
ENV_EXA_API_KEY = "EXA_API_KEY"
ENV_STRATEGY = "WEBSEARCH_STRATEGY"
ENV_TIMEOUT = "WEBSEARCH_TIMEOUT"
ENV_MAX_CONCURRENT = "WEBSEARCH_MAX_CONCURRENT"


class ConfigValidationError(ConfigurationError):
    """Configuration validation failed"""

    pass


class ConfigManager:
    """Loads and validates the application configuration"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self.env_loaded = False
        self._config: Optional[WebSearchConfig] = None

    def _load_env(self) -> None:
        if not self.env_loaded:
            load_dotenv()
            self.env_loaded = True

    def load_config(self) -> WebSearchConfig:
        """Load and validate configuration.

        Reads the YAML file when a path was given, otherwise builds the
        configuration from environment variables.

        Raises:
            FileNotFoundError: Config path does not exist.
            ConfigValidationError: Unreadable YAML or invalid values.
        """
        if self._config:
            return self._config

        # 1. Load environment
        self._load_env()

        if self.config_path is None:
            self._config = self.from_env()
            return self._config

        # 2. Check file existence
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        # 3. Read YAML
        try:
            raw_content = self.config_path.read_text()
        except OSError as e:
            raise ConfigValidationError(f"Failed to read config file: {e}")

        # 4. Substitute env vars
        try:
            substituted = Template(raw_content).safe_substitute(os.environ)
            config_data = yaml.safe_load(substituted) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Failed to parse YAML: {e}")

        if not isinstance(config_data, dict):
            raise ConfigValidationError("Configuration root must be a mapping")

        # 5. Validate with Pydantic
        self._config = self._validate(config_data)
        logger.info(
            "config_loaded",
            path=str(self.config_path),
            strategy=self._config.orchestrator.strategy.value,
            providers=[p.value for p in self._config.providers.enabled],
        )
        return self._config

    @staticmethod
    def _validate(data: Dict[str, Any]) -> WebSearchConfig:
        try:
            return WebSearchConfig(**data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid configuration: {e}")

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> WebSearchConfig:
        """Build a configuration from environment variables.

        API keys enable the matching provider after the keyless defaults
        (duckduckgo, arxiv). Google needs both GOOGLE_API_KEY and GOOGLE_CX.

        Raises:
            ConfigValidationError: Invalid strategy, timeout or concurrency.
        """
        env = os.environ if environ is None else environ

        orchestrator: Dict[str, Any] = {}
        if env.get(ENV_STRATEGY):
            orchestrator["strategy"] = env[ENV_STRATEGY].strip().lower()
        if env.get(ENV_TIMEOUT):
            orchestrator["timeout_per_provider"] = env[ENV_TIMEOUT]
        if env.get(ENV_MAX_CONCURRENT):
            orchestrator["max_concurrent"] = env[ENV_MAX_CONCURRENT]

        enabled = ["duckduckgo", "arxiv"]
        providers: Dict[str, Any] = {}
        brave_key = env.get(ENV_BRAVE_API_KEY)
        if brave_key:
            enabled.append("brave")
            providers["brave"] = {"api_key": brave_key}
        tavily_key = env.get(ENV_TAVILY_API_KEY)
        if tavily_key:
            enabled.append("tavily")
            providers["tavily"] = {"api_key": tavily_key}
        google_key = env.get(ENV_GOOGLE_API_KEY)
        google_cx = env.get(ENV_GOOGLE_CX)
        if google_key and google_cx:
            enabled.append("google")
            providers["google"] = {"api_key": google_key, "cx": google_cx}
        serpapi_key = env.get(ENV_SERPAPI_API_KEY)
        if serpapi_key:
            enabled.append("serpapi")
            providers["serpapi"] = {"api_key": serpapi_key}
        exa_key = env.get(ENV_EXA_API_KEY)
        if exa_key:
            enabled.append("exa")
            providers["exa"] = {"api_key": exa_key}
        providers["enabled"] = enabled

        return cls._validate({"orchestrator": orchestrator, "providers": providers})
