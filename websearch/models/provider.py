"""Provider models for multi-provider orchestration."""

from enum import Enum

from pydantic import BaseModel, Field


class StrategyKind(str, Enum):
    """How the orchestrator uses its provider list for one search"""

    FAILOVER = "failover"  # First success in registration order
    LOAD_BALANCE = "load_balance"  # Round-robin, one provider per call
    AGGREGATE = "aggregate"  # Query all, merge by provider name
    RACE = "race"  # Fastest success wins, losers cancelled


class ProviderStats(BaseModel):
    """Rolling statistics for a single provider."""

    total_requests: int = Field(0, ge=0, description="Invocations issued")
    successful_requests: int = Field(0, ge=0, description="Successful completions")
    failed_requests: int = Field(
        0, ge=0, description="Failed completions, including timeouts"
    )
    avg_response_time_ms: float = Field(
        0.0, ge=0.0, description="Mean latency over successful completions"
    )

    @property
    def success_rate(self) -> float:
        """Fraction of requests that succeeded (0.0 when none issued)."""
        if self.total_requests == 0:
            return 0.0
        return self.successful_requests / self.total_requests
