"""Shared fixtures and a scriptable in-memory provider."""

import asyncio
from typing import Dict, List, Optional

import pytest

from websearch.models.search import MultiSearchRequest, NormalizedResult
from websearch.services.providers.base import SearchProvider


def make_results(provider: Optional[str], count: int) -> List[NormalizedResult]:
    return [
        NormalizedResult(
            url=f"https://{provider or 'anon'}.example.com/{i}",
            title=f"{provider or 'anon'} result {i}",
            provider=provider,
        )
        for i in range(count)
    ]


class MockProvider(SearchProvider):
    """Provider returning canned results, an error, or both after a delay."""

    def __init__(
        self,
        name: str,
        results: Optional[List[NormalizedResult]] = None,
        error: Optional[Exception] = None,
        delay_ms: float = 0,
        count: int = 2,
    ):
        self._name = name
        self.results = results if results is not None else make_results(name, count)
        self.error = error
        self.delay_ms = delay_ms
        self.calls = 0
        self.started = 0
        self.cancelled = False

    @property
    def name(self) -> str:
        return self._name

    async def search(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        self.calls += 1
        self.started += 1
        if self.delay_ms:
            try:
                await asyncio.sleep(self.delay_ms / 1000)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        return list(self.results)

    def config(self) -> Dict[str, str]:
        return {"provider": self._name}


@pytest.fixture
def request_factory():
    def _make(**kwargs) -> MultiSearchRequest:
        kwargs.setdefault("query", "test query")
        return MultiSearchRequest(**kwargs)

    return _make


@pytest.fixture
def search_request() -> MultiSearchRequest:
    return MultiSearchRequest(query="test query")
