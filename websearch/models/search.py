"""Normalized request and result models shared by every provider."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class SafeSearch(str, Enum):
    OFF = "off"
    MODERATE = "moderate"
    STRICT = "strict"


class SortBy(str, Enum):
    """Sort field for results (used by arXiv)"""

    RELEVANCE = "relevance"
    LAST_UPDATED_DATE = "lastUpdatedDate"
    SUBMITTED_DATE = "submittedDate"


class SortOrder(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class DebugOptions(BaseModel):
    """Per-request debug logging switches"""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(False, description="Enable verbose logging")
    log_requests: bool = Field(False, description="Log request details")
    log_responses: bool = Field(False, description="Log response details")


class MultiSearchRequest(BaseModel):
    """A normalized search request, immutable for the duration of one search"""

    model_config = ConfigDict(frozen=True)

    query: str = Field("", description="Free-text search query")
    id_list: Optional[str] = Field(
        None, description="Comma-delimited identifier list (arXiv IDs)"
    )
    max_results: Optional[int] = Field(10, ge=1, description="Result-count cap")
    language: Optional[str] = Field(None, description="Language/locale hint")
    region: Optional[str] = Field(None, description="Country/region hint")
    safe_search: Optional[SafeSearch] = None
    page: Optional[int] = Field(1, ge=1, description="Result page number")
    start: Optional[int] = Field(None, ge=0, description="Pagination offset")
    sort_by: Optional[SortBy] = None
    sort_order: Optional[SortOrder] = None
    timeout: Optional[int] = Field(
        15000, gt=0, description="Adapter HTTP timeout in milliseconds"
    )
    debug: Optional[DebugOptions] = None

    @property
    def has_selector(self) -> bool:
        """Whether the request carries a query or an identifier list."""
        return bool(self.query.strip()) or bool(self.id_list)


class NormalizedResult(BaseModel):
    """A single search result in the common schema"""

    url: str
    title: str
    snippet: Optional[str] = None
    domain: Optional[str] = None
    published_date: Optional[str] = None
    provider: Optional[str] = Field(
        None, description="Name of the provider that produced this result"
    )
    raw: Optional[Dict[str, Any]] = Field(
        None, description="Backend-specific payload for diagnostics"
    )

    def to_display_dict(self, include_raw: bool = False) -> Dict[str, Any]:
        """Dump for JSON output, dropping the raw payload unless requested."""
        data = self.model_dump(exclude_none=True)
        if not include_raw:
            data.pop("raw", None)
        return data
