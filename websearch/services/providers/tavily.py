"""Tavily Search API provider.

Tavily is an AI-curated search API aimed at LLM agents. It returns ranked
results with extracted content and, optionally, a generated answer. The
answer is attached to each result's raw payload for diagnostics.

API Details:
- Endpoint: https://api.tavily.com/search
- Method: POST (JSON body, API key in body)
- Keys start with "tvly-"
"""

from typing import Any, Dict, List, Optional

import structlog

from websearch.models.config import TavilySettings
from websearch.models.search import MultiSearchRequest, NormalizedResult
from websearch.services.providers.base import SearchProvider
from websearch.utils import debug
from websearch.utils.exceptions import ConfigurationError, InvalidInputError
from websearch.utils.http import extract_domain, request_json
from websearch.utils.security import InputValidation, redact_config

logger = structlog.get_logger()

MAX_RESULTS = 20
API_KEY_PREFIX = "tvly-"


class TavilyProvider(SearchProvider):
    """Search using the Tavily AI search API."""

    def __init__(self, api_key: str, settings: Optional[TavilySettings] = None):
        """Initialize Tavily provider.

        Args:
            api_key: Tavily API key (must start with "tvly-").
            settings: Optional endpoint and search-depth settings.

        Raises:
            ConfigurationError: If the key is missing or malformed.
        """
        if not api_key:
            raise ConfigurationError("Tavily API key is required")
        if not api_key.startswith(API_KEY_PREFIX):
            raise ConfigurationError(
                "Invalid Tavily API key format. Keys should start with 'tvly-'"
            )
        self.api_key = api_key
        self.settings = settings or TavilySettings(api_key=api_key)

    @property
    def name(self) -> str:
        return "tavily"

    async def search(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        """Run one Tavily search.

        Raises:
            InvalidInputError: Empty or malformed query.
            AuthenticationError: Key rejected.
            RateLimitError: Quota exceeded.
        """
        body = self._build_request_body(request)

        debug.log_request(
            request.debug,
            "tavily_request",
            url=self.settings.base_url,
            search_depth=body["search_depth"],
            max_results=body["max_results"],
        )
        data = await request_json(
            self.name,
            "POST",
            self.settings.base_url,
            json_body=body,
            headers={"Content-Type": "application/json"},
            timeout_ms=request.timeout,
        )
        results = self._parse_response(data)
        debug.log_response(
            request.debug,
            "tavily_response",
            count=len(results),
            response_time=data.get("response_time"),
        )
        return results

    def _build_request_body(self, request: MultiSearchRequest) -> Dict[str, Any]:
        try:
            query = InputValidation.validate_query(request.query)
        except ValueError as e:
            raise InvalidInputError(str(e))
        if not query:
            raise InvalidInputError("Query cannot be empty")

        return {
            "api_key": self.api_key,
            "query": query,
            "search_depth": self.settings.search_depth,
            "include_answer": self.settings.include_answer,
            "include_images": False,
            "include_raw_content": False,
            "max_results": min(request.max_results or 10, MAX_RESULTS),
        }

    def _parse_response(self, data: Dict[str, Any]) -> List[NormalizedResult]:
        answer = data.get("answer")
        results = []
        for item in data.get("results") or []:
            url = item.get("url")
            if not url:
                continue
            raw = dict(item)
            if answer:
                raw["answer"] = answer
            results.append(
                NormalizedResult(
                    url=url,
                    title=item.get("title") or url,
                    snippet=item.get("content"),
                    domain=extract_domain(url),
                    published_date=item.get("published_date"),
                    provider=self.name,
                    raw=raw,
                )
            )
        return results

    def config(self) -> Dict[str, str]:
        return redact_config(
            {
                "provider": self.name,
                "base_url": self.settings.base_url,
                "api_key": self.api_key,
                "search_depth": self.settings.search_depth,
                "include_answer": str(self.settings.include_answer).lower(),
            }
        )
