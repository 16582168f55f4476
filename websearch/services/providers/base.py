from abc import ABC, abstractmethod
from typing import Dict, List

from websearch.models.search import MultiSearchRequest, NormalizedResult


class SearchProvider(ABC):
    """Abstract base class for search backends

    All providers must implement this interface so the orchestrator can
    treat web engines, AI search APIs and paper indexes interchangeably.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable lowercase identifier, used as stats key and sort key"""
        pass

    @abstractmethod
    async def search(self, request: MultiSearchRequest) -> List[NormalizedResult]:
        """Execute one search

        Args:
            request: Normalized request (query or ID list, caps, hints)

        Returns:
            Results in the common schema; the result cap is best effort

        Raises:
            SearchError: Any backend failure (HTTP, parsing, auth, timeout)
        """
        pass

    def config(self) -> Dict[str, str]:
        """Non-secret description of current settings (credentials masked)"""
        return {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
