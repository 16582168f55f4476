from typing import Any, Dict, List, Optional

import structlog

from websearch.models.config import SerpApiSettings
from websearch.models.search import MultiSearchRequest, NormalizedResult
from websearch.services.providers.base import SearchProvider
from websearch.utils import debug
from websearch.utils.exceptions import (
    ConfigurationError,
    InvalidInputError,
    ProviderError,
)
from websearch.utils.http import extract_domain, request_json
from websearch.utils.security import InputValidation, redact_config

logger = structlog.get_logger()


class SerpApiProvider(SearchProvider):
    """Search engine results scraped by SerpAPI.

    SerpAPI fronts several engines (google, bing, baidu, ...); the engine is
    chosen per provider instance and only organic results are mapped.
    """

    def __init__(self, api_key: str, settings: Optional[SerpApiSettings] = None):
        if not api_key:
            raise ConfigurationError("SerpAPI key is required")
        self.api_key = api_key
        self.settings = settings or SerpApiSettings(api_key=api_key)

    @property
    def name(self) -> str:
        return "serpapi"

    @property
    def engine(self) -> str:
        return self.settings.engine

    async def search(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        params = self._build_query_params(request)

        debug.log_request(
            request.debug,
            "serpapi_request",
            url=self.settings.base_url,
            params=redact_config(params),
        )
        data = await request_json(
            self.name,
            "GET",
            self.settings.base_url,
            params=params,
            timeout_ms=request.timeout,
        )

        # SerpAPI reports some failures with a 200 and an "error" field
        if data.get("error"):
            logger.warning("serpapi_error", error=data["error"])
            raise ProviderError(f"SerpAPI error: {data['error']}")

        results = self._parse_response(data)
        debug.log_response(request.debug, "serpapi_response", count=len(results))
        return results

    def _build_query_params(self, request: MultiSearchRequest) -> Dict[str, Any]:
        try:
            query = InputValidation.validate_query(request.query)
        except ValueError as e:
            raise InvalidInputError(str(e))
        if not query:
            raise InvalidInputError("Query cannot be empty")

        per_page = request.max_results or 10
        params: Dict[str, Any] = {
            "engine": self.engine,
            "api_key": self.api_key,
            "q": query,
            "num": per_page,
        }
        if request.page and request.page > 1:
            params["start"] = (request.page - 1) * per_page + 1
        if request.language:
            params["hl"] = request.language
        if request.region:
            params["gl"] = request.region
        if request.safe_search is not None:
            params["safe"] = request.safe_search.value
        return params

    def _parse_response(self, data: Dict[str, Any]) -> List[NormalizedResult]:
        results = []
        for item in data.get("organic_results") or []:
            url = item.get("link")
            if not url:
                continue
            results.append(
                NormalizedResult(
                    url=url,
                    title=item.get("title") or url,
                    snippet=item.get("snippet"),
                    domain=extract_domain(url),
                    published_date=item.get("date"),
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
                "engine": self.engine,
            }
        )
