import pytest
from unittest.mock import AsyncMock, patch

from websearch.models.search import MultiSearchRequest, SafeSearch
from websearch.services.providers.brave import BraveProvider
from websearch.utils.exceptions import (
    AuthenticationError,
    ConfigurationError,
    InvalidInputError,
)

BRAVE_RESPONSE = {
    "web": {
        "results": [
            {
                "title": "Rust Programming Language",
                "url": "https://www.rust-lang.org/",
                "description": "A language empowering everyone.",
                "page_age": "2024-01-02T00:00:00",
                "meta_url": {"hostname": "www.rust-lang.org"},
            },
            {
                "title": "Rust (video game)",
                "url": "https://en.wikipedia.org/wiki/Rust_(video_game)",
                "description": "Survival game.",
                "age": "3 days ago",
            },
            {"title": "No URL entry"},
        ]
    }
}


@pytest.fixture
def provider():
    return BraveProvider(api_key="brave-secret")


def test_missing_api_key_rejected():
    with pytest.raises(ConfigurationError):
        BraveProvider(api_key="")


@pytest.mark.asyncio
async def test_search_success(provider):
    request = MultiSearchRequest(query="rust", max_results=5)

    with patch(
        "websearch.services.providers.brave.request_json",
        new=AsyncMock(return_value=BRAVE_RESPONSE),
    ) as mock_request:
        results = await provider.search(request)

    assert len(results) == 2
    assert results[0].title == "Rust Programming Language"
    assert results[0].snippet == "A language empowering everyone."
    assert results[0].domain == "www.rust-lang.org"
    assert results[0].published_date == "2024-01-02T00:00:00"
    assert results[1].domain == "en.wikipedia.org"
    assert results[1].published_date == "3 days ago"
    assert all(r.provider == "brave" for r in results)

    kwargs = mock_request.call_args.kwargs
    assert kwargs["headers"]["X-Subscription-Token"] == "brave-secret"
    assert kwargs["params"]["q"] == "rust"
    assert kwargs["params"]["count"] == 5


def test_query_params_mapping(provider):
    request = MultiSearchRequest(
        query="news",
        max_results=100,
        page=3,
        region="US",
        language="en",
        safe_search=SafeSearch.STRICT,
    )

    params = provider._build_query_params(request)

    assert params == {
        "q": "news",
        "count": 20,
        "offset": 2,
        "country": "us",
        "search_lang": "en",
        "safesearch": "strict",
    }


def test_empty_query_rejected(provider):
    with pytest.raises(InvalidInputError):
        provider._build_query_params(MultiSearchRequest(query=""))


@pytest.mark.asyncio
async def test_missing_web_section_returns_empty(provider):
    with patch(
        "websearch.services.providers.brave.request_json",
        new=AsyncMock(return_value={"type": "search"}),
    ):
        assert await provider.search(MultiSearchRequest(query="q")) == []


@pytest.mark.asyncio
async def test_auth_errors_propagate(provider):
    with patch(
        "websearch.services.providers.brave.request_json",
        new=AsyncMock(side_effect=AuthenticationError("brave rejected")),
    ):
        with pytest.raises(AuthenticationError):
            await provider.search(MultiSearchRequest(query="q"))


def test_config_redacts_key(provider):
    config = provider.config()

    assert config["api_key"] == "***"
    assert "brave-secret" not in config.values()
