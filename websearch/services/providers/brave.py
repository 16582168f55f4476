from typing import Any, Dict, List, Optional

import structlog

from websearch.models.config import BraveSettings
from websearch.models.search import MultiSearchRequest, NormalizedResult, SafeSearch
from websearch.services.providers.base import SearchProvider
from websearch.utils import debug
from websearch.utils.exceptions import ConfigurationError, InvalidInputError
from websearch.utils.http import extract_domain, request_json
from websearch.utils.security import InputValidation, redact_config

logger = structlog.get_logger()

# Brave caps "count" at 20 per page
MAX_COUNT = 20


class BraveProvider(SearchProvider):
    """Search the web using the Brave Search API"""

    def __init__(self, api_key: str, settings: Optional[BraveSettings] = None):
        if not api_key:
            raise ConfigurationError("Brave API key is required")
        self.api_key = api_key
        self.settings = settings or BraveSettings(api_key=api_key)

    @property
    def name(self) -> str:
        return "brave"

    async def search(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        params = self._build_query_params(request)

        debug.log_request(
            request.debug, "brave_request", url=self.settings.base_url, params=params
        )
        data = await request_json(
            self.name,
            "GET",
            self.settings.base_url,
            params=params,
            headers={
                "Accept": "application/json",
                "X-Subscription-Token": self.api_key,
            },
            timeout_ms=request.timeout,
        )
        results = self._parse_response(data)
        debug.log_response(request.debug, "brave_response", count=len(results))
        return results

    def _build_query_params(self, request: MultiSearchRequest) -> Dict[str, Any]:
        try:
            query = InputValidation.validate_query(request.query)
        except ValueError as e:
            raise InvalidInputError(str(e))
        if not query:
            raise InvalidInputError("Query cannot be empty")

        count = min(request.max_results or 10, MAX_COUNT)
        params: Dict[str, Any] = {"q": query, "count": count}

        if request.page and request.page > 1:
            params["offset"] = request.page - 1
        if request.region:
            params["country"] = request.region.lower()
        if request.language:
            params["search_lang"] = request.language
        if request.safe_search is not None:
            params["safesearch"] = request.safe_search.value
        return params

    def _parse_response(self, data: Dict[str, Any]) -> List[NormalizedResult]:
        items = (data.get("web") or {}).get("results") or []
        results = []
        for item in items:
            url = item.get("url")
            if not url:
                continue
            meta_url = item.get("meta_url") or {}
            results.append(
                NormalizedResult(
                    url=url,
                    title=item.get("title") or url,
                    snippet=item.get("description"),
                    domain=meta_url.get("hostname") or extract_domain(url),
                    published_date=item.get("page_age") or item.get("age"),
                    provider=self.name,
                    raw=item,
                )
            )
        return results

    def config(self) -> Dict[str, str]:
        return redact_config(
            {
                "provider": self.name,
                "base_url": self.settings.base_url,
                "api_key": self.api_key,
                "safe_search_default": SafeSearch.MODERATE.value,
            }
        )
