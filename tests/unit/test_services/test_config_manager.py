"""Tests for ConfigManager."""

import pytest

from websearch.models.config import ProviderName
from websearch.models.provider import StrategyKind
from websearch.services.config_manager import ConfigManager, ConfigValidationError
from websearch.utils.exceptions import ConfigurationError

VALID_YAML = """
orchestrator:
  strategy: aggregate
  timeout_per_provider: 5
  max_concurrent: 2
providers:
  enabled: [arxiv, tavily]
  tavily:
    api_key: ${TEST_TAVILY_KEY}
log_level: DEBUG
"""


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr("websearch.services.config_manager.load_dotenv", lambda: None)


def test_load_yaml_with_env_substitution(tmp_path, monkeypatch):
    monkeypatch.setenv("TEST_TAVILY_KEY", "tvly-from-env")
    path = tmp_path / "config.yaml"
    path.write_text(VALID_YAML)

    config = ConfigManager(str(path)).load_config()

    assert config.orchestrator.strategy == StrategyKind.AGGREGATE
    assert config.orchestrator.timeout_per_provider == 5.0
    assert config.orchestrator.max_concurrent == 2
    assert config.providers.enabled == [ProviderName.ARXIV, ProviderName.TAVILY]
    assert config.providers.tavily.api_key == "tvly-from-env"
    assert config.log_level == "DEBUG"


def test_unset_variable_leaves_key_missing(tmp_path, monkeypatch):
    monkeypatch.delenv("TEST_TAVILY_KEY", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(VALID_YAML)

    config = ConfigManager(str(path)).load_config()

    assert config.providers.tavily.api_key is None


def test_config_is_cached(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("log_level: INFO\n")
    manager = ConfigManager(str(path))

    assert manager.load_config() is manager.load_config()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigManager(str(tmp_path / "nope.yaml")).load_config()


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("orchestrator: [unclosed\n")

    with pytest.raises(ConfigValidationError, match="parse YAML"):
        ConfigManager(str(path)).load_config()


def test_non_mapping_root(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigValidationError, match="mapping"):
        ConfigManager(str(path)).load_config()


def test_invalid_values(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("orchestrator:\n  strategy: fastest\n")

    with pytest.raises(ConfigValidationError, match="Invalid configuration"):
        ConfigManager(str(path)).load_config()


def test_validation_error_is_configuration_error():
    assert issubclass(ConfigValidationError, ConfigurationError)


def test_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")

    config = ConfigManager(str(path)).load_config()

    assert config.orchestrator.strategy == StrategyKind.FAILOVER


class TestFromEnv:
    def test_defaults_without_keys(self):
        config = ConfigManager.from_env({})

        assert config.providers.enabled == [
            ProviderName.DUCKDUCKGO,
            ProviderName.ARXIV,
        ]
        assert config.orchestrator.strategy == StrategyKind.FAILOVER

    def test_keys_enable_providers(self):
        config = ConfigManager.from_env(
            {
                "BRAVE_API_KEY": "brave-key",
                "TAVILY_API_KEY": "tvly-key",
                "WEBSEARCH_STRATEGY": " RACE ",
                "WEBSEARCH_TIMEOUT": "2.5",
                "WEBSEARCH_MAX_CONCURRENT": "4",
            }
        )

        assert config.providers.enabled[-2:] == [ProviderName.BRAVE, ProviderName.TAVILY]
        assert config.providers.brave.api_key == "brave-key"
        assert config.orchestrator.strategy == StrategyKind.RACE
        assert config.orchestrator.timeout_per_provider == 2.5
        assert config.orchestrator.max_concurrent == 4

    def test_search_api_keys_enable_providers(self):
        config = ConfigManager.from_env(
            {
                "GOOGLE_API_KEY": "google-key",
                "GOOGLE_CX": "engine-id",
                "SERPAPI_API_KEY": "serp-key",
                "EXA_API_KEY": "exa-key",
            }
        )

        assert config.providers.enabled[2:] == [
            ProviderName.GOOGLE,
            ProviderName.SERPAPI,
            ProviderName.EXA,
        ]
        assert config.providers.google.cx == "engine-id"
        assert config.providers.exa.api_key == "exa-key"

    def test_google_key_without_cx_is_not_enabled(self):
        config = ConfigManager.from_env({"GOOGLE_API_KEY": "google-key"})

        assert ProviderName.GOOGLE not in config.providers.enabled
        assert config.providers.google.api_key is None

    def test_invalid_env_value(self):
        with pytest.raises(ConfigValidationError):
            ConfigManager.from_env({"WEBSEARCH_MAX_CONCURRENT": "zero"})

    def test_load_config_without_path_reads_environment(self, monkeypatch):
        monkeypatch.setenv("WEBSEARCH_STRATEGY", "load_balance")

        config = ConfigManager().load_config()

        assert config.orchestrator.strategy == StrategyKind.LOAD_BALANCE
