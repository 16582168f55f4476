"""Single-provider search with troubleshooting-rich errors."""

from typing import List

import structlog

from websearch.models.search import MultiSearchRequest, NormalizedResult
from websearch.services.providers.base import SearchProvider
from websearch.utils import debug
from websearch.utils.exceptions import (
    AuthenticationError,
    HttpError,
    InvalidInputError,
    ProviderError,
    RateLimitError,
    SearchTimeoutError,
)

logger = structlog.get_logger()

PROVIDER_HINTS = {
    "duckduckgo": "DuckDuckGo may block automated requests; retry later or "
    "use another provider.",
    "arxiv": "arXiv asks for at most one request every 3 seconds; check the "
    "query syntax or ID list.",
    "brave": "Check BRAVE_API_KEY and your Brave Search subscription quota.",
    "tavily": "Check TAVILY_API_KEY (keys start with 'tvly-') and your plan quota.",
    "google": "Check GOOGLE_API_KEY and GOOGLE_CX, and that the Custom Search "
    "API is enabled for the key's project (100 free queries per day).",
    "serpapi": "Check SERPAPI_API_KEY and the remaining searches on your "
    "SerpAPI plan.",
    "exa": "Check EXA_API_KEY and that the model is 'keyword' or 'embeddings'.",
}


def troubleshooting_hints(provider: str, error: Exception) -> List[str]:
    """Suggestions for the user based on the failure type"""
    hints: List[str] = []

    if isinstance(error, AuthenticationError):
        hints.append("The API key is missing, invalid or lacks permissions.")
    elif isinstance(error, RateLimitError):
        hints.append("Rate limit reached; wait before retrying.")
    elif isinstance(error, SearchTimeoutError):
        hints.append("The request timed out; raise the timeout or retry.")
    elif isinstance(error, InvalidInputError):
        hints.append("The request parameters were rejected; check the query.")
    elif isinstance(error, HttpError) and error.status_code is not None:
        if error.status_code == 400:
            hints.append("Bad request; check the query and parameters.")
        elif error.status_code >= 500:
            hints.append("The provider is having server problems; retry later.")

    if provider in PROVIDER_HINTS:
        hints.append(PROVIDER_HINTS[provider])
    return hints


def format_provider_error(provider: str, error: Exception) -> str:
    """Error message with provider name, cause and troubleshooting text"""
    message = f"{provider} search failed: {error}"
    hints = troubleshooting_hints(provider, error)
    if hints:
        message += "\nTroubleshooting:\n" + "\n".join(f"  - {h}" for h in hints)
    return message


async def web_search(
    request: MultiSearchRequest, provider: SearchProvider
) -> List[NormalizedResult]:
    """Run a search against one provider.

    Raises:
        InvalidInputError: Request has neither a query nor an ID list.
        ProviderError: The provider failed; the original error is chained.
    """
    if not request.has_selector:
        raise InvalidInputError("A search query or an ID list is required")

    debug.log(
        request.debug,
        "web_search_started",
        provider=provider.name,
        config=provider.config(),
    )

    try:
        results = await provider.search(request)
    except Exception as e:
        logger.error(
            "web_search_failed",
            provider=provider.name,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise ProviderError(format_provider_error(provider.name, e)) from e

    debug.log(request.debug, "web_search_completed", count=len(results))
    return results
