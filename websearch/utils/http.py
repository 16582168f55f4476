"""Shared aiohttp transport for provider adapters.

Maps transport and status failures onto the library's exception types so
every adapter reports errors the same way:
- 401/403 -> AuthenticationError
- 429 -> RateLimitError
- other non-2xx -> HttpError (status code and body attached)
- client timeout -> SearchTimeoutError
- invalid JSON -> ParseError
"""

import asyncio
import json
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

import aiohttp
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from websearch.utils.exceptions import (
    AuthenticationError,
    HttpError,
    ParseError,
    RateLimitError,
    SearchTimeoutError,
)

logger = structlog.get_logger()

USER_AGENT = "websearch-python/0.1"
DEFAULT_TIMEOUT_MS = 15000
MAX_ERROR_BODY = 2000


@retry(
    stop=stop_after_attempt(2),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
    retry=retry_if_exception_type(aiohttp.ClientConnectionError),
    reraise=True,
)
async def _send(
    session: aiohttp.ClientSession, method: str, url: str, **kwargs: Any
) -> Tuple[int, str]:
    async with session.request(method, url, **kwargs) as response:
        return response.status, await response.text()


def check_status(provider: str, status: int, body: str) -> None:
    """Raise the error matching a non-success HTTP status."""
    if 200 <= status < 300:
        return

    snippet = body[:MAX_ERROR_BODY] if body else None
    if status in (401, 403):
        raise AuthenticationError(
            f"{provider} rejected the credentials (status {status})"
        )
    if status == 429:
        raise RateLimitError(f"{provider} rate limit exceeded")

    logger.error("provider_http_error", provider=provider, status=status)
    raise HttpError(
        f"{provider} API returned error: {status}",
        status_code=status,
        response_body=snippet,
    )


async def request_text(
    provider: str,
    method: str,
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    json_body: Optional[Dict[str, Any]] = None,
    form: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout_ms: Optional[int] = None,
) -> str:
    """Execute one HTTP request and return the response body.

    Args:
        provider: Provider name used in error messages.
        method: HTTP method.
        url: Target URL.
        params: Query string parameters.
        json_body: JSON request body.
        form: Form-encoded request body.
        headers: Extra request headers.
        timeout_ms: Total request timeout in milliseconds.

    Raises:
        SearchTimeoutError: Client-side timeout elapsed.
        HttpError: Transport failure or unexpected status.
        AuthenticationError: 401/403.
        RateLimitError: 429.
    """
    timeout_ms = timeout_ms or DEFAULT_TIMEOUT_MS
    request_headers = {"User-Agent": USER_AGENT}
    if headers:
        request_headers.update(headers)

    kwargs: Dict[str, Any] = {"headers": request_headers}
    if params:
        kwargs["params"] = {k: str(v) for k, v in params.items() if v is not None}
    if json_body is not None:
        kwargs["json"] = json_body
    if form is not None:
        kwargs["data"] = form

    timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            status, body = await _send(session, method, url, **kwargs)
    except asyncio.TimeoutError:
        raise SearchTimeoutError(timeout_ms, provider=provider)
    except aiohttp.ClientError as e:
        logger.warning("provider_transport_error", provider=provider, error=str(e))
        raise HttpError(f"{provider} request failed: {e}")

    check_status(provider, status, body)
    return body


async def request_json(
    provider: str, method: str, url: str, **kwargs: Any
) -> Dict[str, Any]:
    """Execute one HTTP request and decode a JSON object response body.

    Raises:
        ParseError: The body is not valid JSON or not a JSON object.
    """
    body = await request_text(provider, method, url, **kwargs)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ParseError(f"{provider} returned invalid JSON: {e}")
    if not isinstance(data, dict):
        raise ParseError(
            f"{provider} returned JSON {type(data).__name__}, expected an object"
        )
    return data


def extract_domain(url: str) -> Optional[str]:
    """Host part of a URL without a leading 'www.'."""
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    if not host:
        return None
    return host[4:] if host.startswith("www.") else host


def normalize_text(text: str) -> str:
    """Collapse runs of whitespace into single spaces."""
    return " ".join(text.split())
