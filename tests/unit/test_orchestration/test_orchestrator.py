"""Tests for SearchOrchestrator."""

import pytest

from conftest import MockProvider
from websearch.models.config import OrchestratorConfig
from websearch.models.provider import ProviderStats, StrategyKind
from websearch.observability.context import (
    clear_correlation_id,
    get_correlation_id,
)
from websearch.observability.metrics import REGISTRY
from websearch.orchestration.orchestrator import SearchOrchestrator
from websearch.utils.exceptions import (
    AllProvidersFailedError,
    ConfigurationError,
    HttpError,
    NoProvidersConfiguredError,
    SearchTimeoutError,
)


class TestConfigure:
    def test_defaults(self):
        orchestrator = SearchOrchestrator.configure("failover")

        assert orchestrator.strategy == StrategyKind.FAILOVER
        assert orchestrator.config.timeout_per_provider == 10.0
        assert orchestrator.config.max_concurrent == 3
        assert orchestrator.providers == ()

    def test_accepts_enum_and_name(self):
        by_enum = SearchOrchestrator.configure(StrategyKind.LOAD_BALANCE)
        by_name = SearchOrchestrator.configure("load_balance")

        assert by_enum.strategy == by_name.strategy == StrategyKind.LOAD_BALANCE

    def test_unknown_strategy_is_configuration_error(self):
        with pytest.raises(ConfigurationError, match="Invalid orchestrator"):
            SearchOrchestrator.configure("round_robin_ish")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"timeout_per_provider": 0},
            {"timeout_per_provider": -1.0},
            {"max_concurrent": 0},
        ],
    )
    def test_non_positive_values_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            SearchOrchestrator.configure("aggregate", **kwargs)

    def test_constructor_accepts_config_and_providers(self):
        config = OrchestratorConfig(strategy=StrategyKind.RACE, max_concurrent=2)
        orchestrator = SearchOrchestrator(
            config, [MockProvider("p1"), MockProvider("p2")]
        )

        assert [p.name for p in orchestrator.providers] == ["p1", "p2"]
        assert orchestrator.config is config


class TestAddProvider:
    def test_chaining_and_zeroed_stats(self):
        orchestrator = (
            SearchOrchestrator.configure("failover")
            .add_provider(MockProvider("p1"))
            .add_provider(MockProvider("p2"))
        )

        assert orchestrator.get_stats() == {"p1": ProviderStats(), "p2": ProviderStats()}

    def test_duplicate_name_rejected(self):
        orchestrator = SearchOrchestrator.configure("failover")
        orchestrator.add_provider(MockProvider("p1"))

        with pytest.raises(ConfigurationError, match="Duplicate"):
            orchestrator.add_provider(MockProvider("p1"))

    @pytest.mark.asyncio
    async def test_adding_after_first_search_rejected(self, search_request):
        orchestrator = SearchOrchestrator.configure("failover")
        orchestrator.add_provider(MockProvider("p1"))
        await orchestrator.search(search_request)

        with pytest.raises(ConfigurationError, match="after the first search"):
            orchestrator.add_provider(MockProvider("p2"))

    def test_providers_property_is_read_only_copy(self):
        orchestrator = SearchOrchestrator.configure("failover")
        orchestrator.add_provider(MockProvider("p1"))

        assert isinstance(orchestrator.providers, tuple)


class TestSearch:
    @pytest.mark.asyncio
    async def test_aggregate_two_providers_capped_at_three(self, request_factory):
        orchestrator = (
            SearchOrchestrator.configure("aggregate")
            .add_provider(MockProvider("p1", count=2))
            .add_provider(MockProvider("p2", count=2))
        )

        results = await orchestrator.search(request_factory(max_results=3))

        assert len(results) == 3
        assert [r.provider for r in results] == ["p1", "p1", "p2"]

    @pytest.mark.asyncio
    async def test_slow_provider_times_out(self, search_request):
        orchestrator = SearchOrchestrator.configure(
            "failover", timeout_per_provider=0.05
        ).add_provider(MockProvider("slow", delay_ms=100))

        with pytest.raises(SearchTimeoutError) as exc_info:
            await orchestrator.search(search_request)

        assert exc_info.value.timeout_ms == 50
        stats = orchestrator.get_stats()["slow"]
        assert stats.failed_requests == 1
        assert stats.total_requests == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", list(StrategyKind))
    async def test_empty_provider_list(self, kind, search_request):
        orchestrator = SearchOrchestrator.configure(kind)

        with pytest.raises(NoProvidersConfiguredError):
            await orchestrator.search(search_request)

        assert orchestrator.get_stats() == {}

    @pytest.mark.asyncio
    async def test_aggregate_all_failed(self, search_request):
        orchestrator = (
            SearchOrchestrator.configure("aggregate")
            .add_provider(MockProvider("p1", error=HttpError("a")))
            .add_provider(MockProvider("p2", error=HttpError("b")))
        )

        with pytest.raises(AllProvidersFailedError):
            await orchestrator.search(search_request)

    @pytest.mark.asyncio
    async def test_stats_invariant_across_strategies(self, search_request):
        for kind in StrategyKind:
            orchestrator = (
                SearchOrchestrator.configure(kind, timeout_per_provider=0.05)
                .add_provider(MockProvider("bad", error=HttpError("down")))
                .add_provider(MockProvider("slow", delay_ms=100))
                .add_provider(MockProvider("good", delay_ms=5))
            )
            for _ in range(3):
                try:
                    await orchestrator.search(search_request)
                except (HttpError, SearchTimeoutError):
                    pass

            for s in orchestrator.get_stats().values():
                assert s.total_requests == s.successful_requests + s.failed_requests

    @pytest.mark.asyncio
    async def test_runs_inside_correlation_context(self, search_request):
        clear_correlation_id()
        seen = []

        class RecordingProvider(MockProvider):
            async def search(self, request):
                seen.append(get_correlation_id())
                return await super().search(request)

        orchestrator = SearchOrchestrator.configure("failover").add_provider(
            RecordingProvider("p1")
        )
        await orchestrator.search(search_request)

        assert seen[0] is not None
        assert seen[0].startswith("search-")
        assert get_correlation_id() is None

    @pytest.mark.asyncio
    async def test_records_search_metrics(self, search_request):
        def sample(status):
            value = REGISTRY.get_sample_value(
                "websearch_searches_total", {"strategy": "race", "status": status}
            )
            return value or 0.0

        before = sample("success")
        orchestrator = SearchOrchestrator.configure("race").add_provider(
            MockProvider("p1")
        )
        await orchestrator.search(search_request)

        assert sample("success") == before + 1

    def test_get_stats_returns_copies(self):
        orchestrator = SearchOrchestrator.configure("failover").add_provider(
            MockProvider("p1")
        )
        orchestrator.get_stats()["p1"].total_requests = 42

        assert orchestrator.get_stats()["p1"].total_requests == 0


def test_search_sync(search_request):
    orchestrator = SearchOrchestrator.configure("load_balance").add_provider(
        MockProvider("p1", count=1)
    )

    results = orchestrator.search_sync(search_request)

    assert len(results) == 1
    assert orchestrator.get_stats()["p1"].successful_requests == 1
