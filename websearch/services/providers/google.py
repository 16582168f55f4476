"""Google Custom Search JSON API provider.

Needs an API key plus a Programmable Search Engine ID (cx). Google returns
at most 10 results per request; paging uses a 1-based `start` offset.
"""

from typing import Any, Dict, List, Optional

import structlog

from websearch.models.config import GoogleSettings
from websearch.models.search import MultiSearchRequest, NormalizedResult, SafeSearch
from websearch.services.providers.base import SearchProvider
from websearch.utils import debug
from websearch.utils.exceptions import ConfigurationError, InvalidInputError
from websearch.utils.http import extract_domain, request_json
from websearch.utils.security import InputValidation, redact_config

logger = structlog.get_logger()

MAX_NUM = 10

# Metatags checked, in order, for a publication date
DATE_METATAGS = ("article:published_time", "date", "og:updated_time")


class GoogleProvider(SearchProvider):
    """Search the web using Google Custom Search"""

    def __init__(
        self, api_key: str, cx: str, settings: Optional[GoogleSettings] = None
    ):
        if not api_key:
            raise ConfigurationError("Google API key is required")
        if not cx:
            raise ConfigurationError("Google Search Engine ID (cx) is required")
        self.api_key = api_key
        self.cx = cx
        self.settings = settings or GoogleSettings(api_key=api_key, cx=cx)

    @property
    def name(self) -> str:
        return "google"

    async def search(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        params = self._build_query_params(request)

        # The key travels in the query string
        debug.log_request(
            request.debug,
            "google_request",
            url=self.settings.base_url,
            params=redact_config(params, extra_secret_keys=("key",)),
        )
        data = await request_json(
            self.name,
            "GET",
            self.settings.base_url,
            params=params,
            timeout_ms=request.timeout,
        )
        results = self._parse_response(data)
        debug.log_response(request.debug, "google_response", count=len(results))
        return results

    def _build_query_params(self, request: MultiSearchRequest) -> Dict[str, Any]:
        try:
            query = InputValidation.validate_query(request.query)
        except ValueError as e:
            raise InvalidInputError(str(e))
        if not query:
            raise InvalidInputError("Query cannot be empty")

        params: Dict[str, Any] = {"key": self.api_key, "cx": self.cx, "q": query}
        if request.max_results:
            params["num"] = min(request.max_results, MAX_NUM)
        if request.page:
            per_page = request.max_results or 10
            params["start"] = (request.page - 1) * per_page + 1
        if request.language:
            params["lr"] = f"lang_{request.language}"
        if request.region:
            params["gl"] = request.region
        if request.safe_search is not None:
            off = request.safe_search == SafeSearch.OFF
            params["safe"] = "off" if off else "active"
        return params

    def _parse_response(self, data: Dict[str, Any]) -> List[NormalizedResult]:
        results = []
        for item in data.get("items") or []:
            url = item.get("link")
            if not url:
                continue
            results.append(
                NormalizedResult(
                    url=url,
                    title=item.get("title") or url,
                    snippet=item.get("snippet"),
                    domain=item.get("displayLink") or extract_domain(url),
                    published_date=self._published_date(item),
                    provider=self.name,
                    raw=item,
                )
            )
        return results

    @staticmethod
    def _published_date(item: Dict[str, Any]) -> Optional[str]:
        metatags = (item.get("pagemap") or {}).get("metatags") or []
        if not metatags:
            return None
        first = metatags[0]
        for tag in DATE_METATAGS:
            if first.get(tag):
                return first[tag]
        return None

    def config(self) -> Dict[str, str]:
        return redact_config(
            {
                "provider": self.name,
                "base_url": self.settings.base_url,
                "api_key": self.api_key,
                "cx": self.cx,
            }
        )
