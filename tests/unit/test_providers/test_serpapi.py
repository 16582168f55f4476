import pytest
from unittest.mock import AsyncMock, patch

from websearch.models.config import SerpApiSettings
from websearch.models.search import MultiSearchRequest, SafeSearch
from websearch.services.providers.serpapi import SerpApiProvider
from websearch.utils.exceptions import (
    ConfigurationError,
    InvalidInputError,
    ProviderError,
    RateLimitError,
)

SERPAPI_RESPONSE = {
    "search_metadata": {"id": "abc", "status": "Success"},
    "organic_results": [
        {
            "position": 1,
            "title": "Async IO in Python",
            "link": "https://realpython.com/async-io-python/",
            "displayed_link": "https://realpython.com › async-io-python",
            "snippet": "A complete walkthrough.",
            "date": "Jan 5, 2024",
        },
        {
            "position": 2,
            "title": "asyncio docs",
            "link": "https://docs.python.org/3/library/asyncio.html",
            "displayed_link": "docs.python.org › library",
        },
        {"position": 3, "title": "No link"},
    ],
}


@pytest.fixture
def provider():
    return SerpApiProvider(api_key="serp-secret")


def test_requires_api_key():
    with pytest.raises(ConfigurationError):
        SerpApiProvider(api_key="")


@pytest.mark.asyncio
async def test_search_success(provider):
    with patch(
        "websearch.services.providers.serpapi.request_json",
        new=AsyncMock(return_value=SERPAPI_RESPONSE),
    ) as mock_request:
        results = await provider.search(MultiSearchRequest(query="asyncio"))

    assert len(results) == 2
    assert results[0].domain == "realpython.com"
    assert results[0].published_date == "Jan 5, 2024"
    assert results[0].raw["position"] == 1
    assert results[1].domain == "docs.python.org"
    assert results[1].snippet is None
    assert all(r.provider == "serpapi" for r in results)

    params = mock_request.call_args.kwargs["params"]
    assert params["engine"] == "google"
    assert params["api_key"] == "serp-secret"
    assert params["num"] == 10


def test_engine_from_settings():
    provider = SerpApiProvider(
        api_key="serp-secret", settings=SerpApiSettings(engine="bing")
    )

    params = provider._build_query_params(MultiSearchRequest(query="q"))

    assert params["engine"] == "bing"
    assert provider.config()["engine"] == "bing"


def test_query_params_mapping(provider):
    request = MultiSearchRequest(
        query="news",
        max_results=5,
        page=3,
        language="fr",
        region="fr",
        safe_search=SafeSearch.STRICT,
    )

    params = provider._build_query_params(request)

    assert params["num"] == 5
    assert params["start"] == 11
    assert params["hl"] == "fr"
    assert params["gl"] == "fr"
    assert params["safe"] == "strict"


def test_first_page_has_no_start(provider):
    params = provider._build_query_params(MultiSearchRequest(query="q"))
    assert "start" not in params


def test_empty_query_rejected(provider):
    with pytest.raises(InvalidInputError):
        provider._build_query_params(MultiSearchRequest(query=""))


@pytest.mark.asyncio
async def test_error_field_raises(provider):
    with patch(
        "websearch.services.providers.serpapi.request_json",
        new=AsyncMock(return_value={"error": "Invalid API key."}),
    ):
        with pytest.raises(ProviderError, match="SerpAPI error: Invalid API key."):
            await provider.search(MultiSearchRequest(query="q"))


@pytest.mark.asyncio
async def test_rate_limit_propagates(provider):
    with patch(
        "websearch.services.providers.serpapi.request_json",
        new=AsyncMock(side_effect=RateLimitError("serpapi rate limit exceeded")),
    ):
        with pytest.raises(RateLimitError):
            await provider.search(MultiSearchRequest(query="q"))


def test_config_redacts_key(provider):
    config = provider.config()

    assert config["api_key"] == "***"
    assert "serp-secret" not in config.values()
