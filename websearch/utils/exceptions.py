"""Exception hierarchy for multi-provider web search

This module defines every error the library raises:
- Orchestration errors (no providers, all providers failed, timeouts)
- Adapter errors (HTTP, parsing, authentication, rate limits)
- Configuration errors

All exceptions inherit from SearchError so callers can catch every
search-related failure in a single except block when needed.
"""

from typing import Dict, Optional


class SearchError(Exception):
    """Base exception for all search errors

    Use this to catch any failure coming out of a search:
    ```python
    try:
        results = await orchestrator.search(request)
    except SearchError as e:
        logger.error("search_failed", error=str(e))
    ```
    """

    pass


class ConfigurationError(SearchError):
    """Invalid configuration

    Raised when:
    - An unknown strategy name is configured
    - Timeout or concurrency values are out of range
    - A provider is added after the first search
    - Two providers share the same name
    - A provider is missing a required credential
    """

    pass


class NoProvidersConfiguredError(SearchError):
    """A search was attempted with an empty provider list"""

    def __init__(self, message: str = "No providers configured") -> None:
        super().__init__(message)


class SearchTimeoutError(SearchError):
    """A provider call exceeded its deadline

    Carries the configured timeout so callers can branch on deadline
    exceedance specifically.
    """

    def __init__(self, timeout_ms: int, provider: Optional[str] = None) -> None:
        self.timeout_ms = timeout_ms
        self.provider = provider
        super().__init__(f"Request timed out after {timeout_ms}ms")


class AllProvidersFailedError(SearchError):
    """Every provider queried by an aggregate search failed.

    Raised when:
    - Aggregate strategy ran every provider and none succeeded
    """

    def __init__(
        self,
        message: str = "All providers failed",
        provider_errors: Optional[Dict[str, str]] = None,
    ) -> None:
        if provider_errors:
            error_details = ", ".join(f"{p}: {e}" for p, e in provider_errors.items())
            message = f"{message} | Provider errors: {error_details}"
        super().__init__(message)
        self.provider_errors = provider_errors or {}


class ProviderError(SearchError):
    """Backend-specific provider failure"""

    pass


class HttpError(ProviderError):
    """HTTP request to a backend failed

    Raised when:
    - Backend returns a non-success status
    - Connection cannot be established
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(f"HTTP request failed: {message}")
        self.status_code = status_code
        self.response_body = response_body


class InvalidInputError(ProviderError):
    """Request parameters are not acceptable to the backend"""

    pass


class ParseError(ProviderError):
    """Backend payload (JSON, XML, HTML) could not be parsed"""

    pass


class RateLimitError(ProviderError):
    """Rate limit exceeded (HTTP 429)"""

    pass


class AuthenticationError(ProviderError):
    """Backend rejected the credentials (HTTP 401/403)"""

    pass
