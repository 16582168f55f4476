"""DuckDuckGo provider that scrapes the HTML results page.

No API key is required. Result links on the HTML endpoint are wrapped in a
redirect (//duckduckgo.com/l/?uddg=<encoded-url>) which is unwrapped here.
"""

from typing import Dict, List, Optional
from urllib.parse import parse_qs, unquote, urlparse

import structlog
from bs4 import BeautifulSoup

from websearch.models.config import DuckDuckGoSettings
from websearch.models.search import MultiSearchRequest, NormalizedResult, SafeSearch
from websearch.services.providers.base import SearchProvider
from websearch.utils import debug
from websearch.utils.exceptions import InvalidInputError
from websearch.utils.http import extract_domain, normalize_text, request_text
from websearch.utils.security import InputValidation

logger = structlog.get_logger()

# DuckDuckGo "kp" values for safe search
SAFE_SEARCH_PARAM = {
    SafeSearch.STRICT: "1",
    SafeSearch.MODERATE: "-1",
    SafeSearch.OFF: "-2",
}


def unwrap_redirect(href: str) -> str:
    """Return the target of a DuckDuckGo redirect link, or href unchanged."""
    if href.startswith("//"):
        href = "https:" + href
    parsed = urlparse(href)
    if parsed.netloc.endswith("duckduckgo.com") and parsed.path.startswith("/l/"):
        target = parse_qs(parsed.query).get("uddg")
        if target:
            return unquote(target[0])
    return href


class DuckDuckGoProvider(SearchProvider):
    """Search the web by scraping DuckDuckGo's HTML endpoint"""

    def __init__(self, settings: Optional[DuckDuckGoSettings] = None):
        self.settings = settings or DuckDuckGoSettings()

    @property
    def name(self) -> str:
        return "duckduckgo"

    async def search(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        form = self._build_form(request)

        debug.log_request(request.debug, "duckduckgo_request", query=form["q"])
        html = await request_text(
            self.name,
            "POST",
            self.settings.base_url,
            form=form,
            headers={
                "User-Agent": self.settings.user_agent,
                "Referer": "https://html.duckduckgo.com/",
            },
            timeout_ms=request.timeout,
        )
        debug.log_response(request.debug, "duckduckgo_response", length=len(html))

        return self.parse_results(html, request.max_results or 10)

    def _build_form(self, request: MultiSearchRequest) -> Dict[str, str]:
        try:
            query = InputValidation.validate_query(request.query)
        except ValueError as e:
            raise InvalidInputError(str(e))
        if not query:
            raise InvalidInputError("Query cannot be empty")

        form = {"q": query, "b": "", "kl": request.region or "wt-wt"}
        if request.safe_search is not None:
            form["kp"] = SAFE_SEARCH_PARAM[request.safe_search]
        return form

    def parse_results(self, html: str, max_results: int) -> List[NormalizedResult]:
        """Extract results from a DuckDuckGo HTML page"""
        soup = BeautifulSoup(html, "html.parser")
        results: List[NormalizedResult] = []

        for container in soup.select("div.result"):
            if len(results) >= max_results:
                break

            link = container.select_one("h2.result__title a") or container.select_one(
                "a.result__a"
            )
            if link is None or not link.get("href"):
                continue

            url = unwrap_redirect(str(link["href"]))
            # Ads and internal links point back at DuckDuckGo or a search page
            if "duckduckgo.com" in url or "google.com/search" in url:
                continue

            snippet_el = container.select_one(".result__snippet")
            snippet = normalize_text(snippet_el.get_text(" ")) if snippet_el else None

            results.append(
                NormalizedResult(
                    url=url,
                    title=normalize_text(link.get_text(" ")),
                    snippet=snippet or None,
                    domain=extract_domain(url),
                    provider=self.name,
                )
            )

        logger.debug("duckduckgo_parsed", count=len(results))
        return results

    def config(self) -> Dict[str, str]:
        return {
            "provider": self.name,
            "base_url": self.settings.base_url,
            "search_type": "text",
        }
