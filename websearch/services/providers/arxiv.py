from typing import Any, Dict, List, Optional

import feedparser
import structlog

from websearch.models.config import ArxivSettings
from websearch.models.search import MultiSearchRequest, NormalizedResult
from websearch.services.providers.base import SearchProvider
from websearch.utils import debug
from websearch.utils.exceptions import InvalidInputError, ParseError
from websearch.utils.http import normalize_text, request_text
from websearch.utils.rate_limiter import RateLimiter
from websearch.utils.security import InputValidation

logger = structlog.get_logger()


class ArxivProvider(SearchProvider):
    """Search academic papers using the arXiv Atom API"""

    def __init__(
        self,
        settings: Optional[ArxivSettings] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self.settings = settings or ArxivSettings()
        # arXiv asks for 3 seconds between requests
        self.rate_limiter = rate_limiter or RateLimiter(
            requests_per_minute=self.settings.requests_per_minute, burst_size=1
        )

    @property
    def name(self) -> str:
        return "arxiv"

    async def search(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        """Search by ID list or free-text query"""
        params = self._build_query_params(request)

        await self.rate_limiter.acquire(requester_id="arxiv_provider")

        debug.log_request(
            request.debug, "arxiv_request", url=self.settings.base_url, params=params
        )
        body = await request_text(
            self.name,
            "GET",
            self.settings.base_url,
            params=params,
            timeout_ms=request.timeout,
        )
        debug.log_response(request.debug, "arxiv_response", size=len(body))

        feed = feedparser.parse(body)
        if feed.bozo and not feed.entries:
            raise ParseError(f"Failed to parse arXiv feed: {feed.bozo_exception}")

        results = self._parse_feed(feed)
        logger.info(
            "papers_discovered",
            provider=self.name,
            query=request.query[:80],
            count=len(results),
        )
        return results

    def _build_query_params(self, request: MultiSearchRequest) -> Dict[str, Any]:
        params: Dict[str, Any] = {}

        if request.id_list:
            try:
                params["id_list"] = InputValidation.validate_id_list(request.id_list)
            except ValueError as e:
                raise InvalidInputError(str(e))
        elif request.query.strip():
            try:
                query = InputValidation.validate_query(request.query)
            except ValueError as e:
                raise InvalidInputError(str(e))
            params["search_query"] = f"all:{query}"
        else:
            raise InvalidInputError(
                "arXiv search requires either a search query or ID list"
            )

        if request.start is not None:
            params["start"] = request.start

        max_results = request.max_results or 10
        params["max_results"] = min(max_results, self.settings.max_results_cap)

        if request.sort_by is not None:
            params["sortBy"] = request.sort_by.value
        if request.sort_order is not None:
            params["sortOrder"] = request.sort_order.value

        return params

    def _parse_feed(self, feed: Any) -> List[NormalizedResult]:
        results = []
        for entry in feed.entries:
            try:
                entry_id = entry.get("id", "")
                # http://arxiv.org/abs/2301.12345v1 -> 2301.12345v1
                arxiv_id = entry_id.rstrip("/").split("/")[-1]

                paper_url = None
                for link in entry.get("links", []):
                    if link.get("type") == "text/html":
                        paper_url = link.get("href")
                        break
                if not paper_url:
                    paper_url = f"https://arxiv.org/abs/{arxiv_id}"

                authors = [a.get("name", "") for a in entry.get("authors", [])]
                published = entry.get("published")

                raw: Dict[str, Any] = {"arxiv_id": arxiv_id}
                if published:
                    raw["published"] = published
                if authors:
                    raw["authors"] = ", ".join(authors)

                results.append(
                    NormalizedResult(
                        url=paper_url,
                        title=normalize_text(entry.get("title", "")),
                        snippet=normalize_text(entry.get("summary", "")) or None,
                        domain="arxiv.org",
                        published_date=published,
                        provider=self.name,
                        raw=raw,
                    )
                )
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning(
                    "arxiv_entry_parse_error",
                    error=str(e),
                    entry_id=getattr(entry, "id", "unknown"),
                )
                continue

        return results

    def config(self) -> Dict[str, str]:
        return {
            "provider": self.name,
            "base_url": self.settings.base_url,
            "max_results": str(self.settings.max_results_cap),
        }
