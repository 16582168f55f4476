from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from websearch.models.provider import StrategyKind


def _unset_to_none(v: Optional[str]) -> Optional[str]:
    """Treat blank keys and unresolved ${VAR} placeholders as missing"""
    if v is None or not v.strip() or v.strip().startswith("${"):
        return None
    return v.strip()


class ProviderName(str, Enum):
    ARXIV = "arxiv"
    DUCKDUCKGO = "duckduckgo"
    BRAVE = "brave"
    TAVILY = "tavily"
    GOOGLE = "google"
    SERPAPI = "serpapi"
    EXA = "exa"


class OrchestratorConfig(BaseModel):
    """Configuration for multi-provider orchestration"""

    model_config = ConfigDict(frozen=True)

    strategy: StrategyKind = Field(
        StrategyKind.FAILOVER, description="How providers are used per search"
    )
    timeout_per_provider: float = Field(
        10.0,
        gt=0.0,
        le=600.0,
        description="Deadline for a single provider call, in seconds",
    )
    max_concurrent: int = Field(
        3,
        ge=1,
        le=64,
        description="Providers in flight at once (aggregate and race only)",
    )

    @property
    def timeout_ms(self) -> int:
        """Per-provider timeout in whole milliseconds"""
        return int(round(self.timeout_per_provider * 1000))


class ArxivSettings(BaseModel):
    """arXiv Atom API settings"""

    base_url: str = Field("https://export.arxiv.org/api/query")
    max_results_cap: int = Field(50, ge=1, le=2000)
    requests_per_minute: int = Field(20, ge=1, description="arXiv asks for 3s spacing")


class DuckDuckGoSettings(BaseModel):
    """DuckDuckGo HTML endpoint settings"""

    base_url: str = Field("https://html.duckduckgo.com/html")
    user_agent: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )


class BraveSettings(BaseModel):
    """Brave Search API settings"""

    api_key: Optional[str] = Field(None, description="Brave subscription token")
    base_url: str = Field("https://api.search.brave.com/res/v1/web/search")

    @field_validator("api_key")
    @classmethod
    def drop_unset_placeholder(cls, v: Optional[str]) -> Optional[str]:
        return _unset_to_none(v)


class TavilySettings(BaseModel):
    """Tavily Search API settings"""

    api_key: Optional[str] = Field(None, description="Tavily API key (tvly-...)")
    base_url: str = Field("https://api.tavily.com/search")
    search_depth: Literal["basic", "advanced"] = "basic"
    include_answer: bool = True

    @field_validator("api_key")
    @classmethod
    def drop_unset_placeholder(cls, v: Optional[str]) -> Optional[str]:
        return _unset_to_none(v)


class GoogleSettings(BaseModel):
    """Google Custom Search JSON API settings"""

    api_key: Optional[str] = Field(None, description="Google API key")
    cx: Optional[str] = Field(None, description="Programmable Search Engine ID")
    base_url: str = Field("https://www.googleapis.com/customsearch/v1")

    @field_validator("api_key", "cx")
    @classmethod
    def drop_unset_placeholder(cls, v: Optional[str]) -> Optional[str]:
        return _unset_to_none(v)


class SerpApiSettings(BaseModel):
    """SerpAPI settings"""

    api_key: Optional[str] = Field(None, description="SerpAPI key")
    engine: str = Field("google", min_length=1, description="SerpAPI engine name")
    base_url: str = Field("https://serpapi.com/search.json")

    @field_validator("api_key")
    @classmethod
    def drop_unset_placeholder(cls, v: Optional[str]) -> Optional[str]:
        return _unset_to_none(v)


class ExaSettings(BaseModel):
    """Exa search API settings"""

    api_key: Optional[str] = Field(None, description="Exa API key")
    base_url: str = Field("https://api.exa.ai/search")
    model: Literal["keyword", "embeddings"] = "keyword"
    include_contents: bool = Field(
        False, description="Ask for page text, used as the snippet"
    )

    @field_validator("api_key")
    @classmethod
    def drop_unset_placeholder(cls, v: Optional[str]) -> Optional[str]:
        return _unset_to_none(v)


class ProviderSettings(BaseModel):
    """Per-provider settings plus the registration order"""

    enabled: List[ProviderName] = Field(
        default_factory=lambda: [ProviderName.DUCKDUCKGO, ProviderName.ARXIV],
        description="Providers to register, in order",
    )
    arxiv: ArxivSettings = Field(default_factory=lambda: ArxivSettings())
    duckduckgo: DuckDuckGoSettings = Field(default_factory=lambda: DuckDuckGoSettings())
    brave: BraveSettings = Field(default_factory=lambda: BraveSettings())
    tavily: TavilySettings = Field(default_factory=lambda: TavilySettings())
    google: GoogleSettings = Field(default_factory=lambda: GoogleSettings())
    serpapi: SerpApiSettings = Field(default_factory=lambda: SerpApiSettings())
    exa: ExaSettings = Field(default_factory=lambda: ExaSettings())

    @field_validator("enabled")
    @classmethod
    def validate_unique(cls, v: List[ProviderName]) -> List[ProviderName]:
        if len(set(v)) != len(v):
            raise ValueError("Provider names in 'enabled' must be unique")
        return v


class WebSearchConfig(BaseModel):
    """Root configuration model"""

    model_config = ConfigDict(extra="forbid")

    orchestrator: OrchestratorConfig = Field(
        default_factory=lambda: OrchestratorConfig()
    )
    providers: ProviderSettings = Field(default_factory=lambda: ProviderSettings())
    log_level: str = Field("INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    json_logs: bool = Field(False, description="Render logs as JSON")
