"""Exa search API provider.

Exa offers keyword search and embeddings-based semantic search. Page text is
only returned when contents are requested; it then becomes the snippet.

API Details:
- Endpoint: https://api.exa.ai/search
- Method: POST (JSON body, bearer token)
"""

from typing import Any, Dict, List, Optional

import structlog

from websearch.models.config import ExaSettings
from websearch.models.search import MultiSearchRequest, NormalizedResult
from websearch.services.providers.base import SearchProvider
from websearch.utils import debug
from websearch.utils.exceptions import ConfigurationError, InvalidInputError
from websearch.utils.http import extract_domain, request_json
from websearch.utils.security import InputValidation, redact_config

logger = structlog.get_logger()

# Result fields kept as raw metadata
RAW_FIELDS = ("id", "score", "author")


class ExaProvider(SearchProvider):
    """Search using the Exa API."""

    def __init__(self, api_key: str, settings: Optional[ExaSettings] = None):
        """Initialize Exa provider.

        Args:
            api_key: Exa API key, sent as a bearer token.
            settings: Optional endpoint, model and contents settings.

        Raises:
            ConfigurationError: If the key is missing.
        """
        if not api_key:
            raise ConfigurationError("Exa API key is required")
        self.api_key = api_key
        self.settings = settings or ExaSettings(api_key=api_key)

    @property
    def name(self) -> str:
        return "exa"

    async def search(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        """Run one Exa search.

        Raises:
            InvalidInputError: Empty or malformed query.
            AuthenticationError: Token rejected.
            RateLimitError: Quota exceeded.
        """
        body = self._build_request_body(request)

        debug.log_request(
            request.debug,
            "exa_request",
            url=self.settings.base_url,
            model=body["model"],
            include_contents=body["include_contents"],
        )
        data = await request_json(
            self.name,
            "POST",
            self.settings.base_url,
            json_body=body,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            timeout_ms=request.timeout,
        )
        results = self._parse_response(data)
        debug.log_response(
            request.debug,
            "exa_response",
            count=len(results),
            autoprompt=data.get("autopromptString"),
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
            "query": query,
            "max_results": request.max_results,
            "model": self.settings.model,
            "include_contents": self.settings.include_contents,
        }

    def _parse_response(self, data: Dict[str, Any]) -> List[NormalizedResult]:
        results = []
        for item in data.get("results") or []:
            url = item.get("url")
            if not url:
                continue
            raw = {k: item[k] for k in RAW_FIELDS if item.get(k) is not None}
            results.append(
                NormalizedResult(
                    url=url,
                    title=item.get("title") or url,
                    snippet=item.get("text"),
                    domain=extract_domain(url),
                    published_date=item.get("publishedDate"),
                    provider=self.name,
                    raw=raw or None,
                )
            )
        return results

    def config(self) -> Dict[str, str]:
        return redact_config(
            {
                "provider": self.name,
                "base_url": self.settings.base_url,
                "api_key": self.api_key,
                "model": self.settings.model,
                "include_contents": str(self.settings.include_contents).lower(),
            }
        )
