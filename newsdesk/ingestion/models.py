"""Data models for ingestion."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import IngestSource


class CandidateArticle(BaseModel):
    """Adapter output, keyword- and date-filtered but not yet stored."""

    title: str = Field(..., min_length=1, description="Sanitized article title")
    url: str = Field(..., min_length=1, description="Canonical URL, used as dedup key")
    outlet: str = Field(..., description="Outlet name")
    outlet_domain: str = Field(..., description="Outlet hostname")
    published_at: datetime = Field(..., description="Publication timestamp (UTC)")
    snippet: Optional[str] = Field(None, description="Plain-text snippet")
    image_url: Optional[str] = Field(None, description="Absolute http(s) image URL")
    author: Optional[str] = Field(None, description="Author name")
    source: IngestSource = Field(..., description="Producing adapter")

    @property
    def search_text(self) -> str:
        """Text the keyword filter runs over."""
        return f"{self.title} {self.snippet or ''}"


class FetchOptions(BaseModel):
    """Filters shared by every adapter call."""

    keywords: List[str] = Field(default_factory=list, description="Keyword snapshot for the run")
    date_from: Optional[datetime] = Field(None, description="Inclusive lower bound")
    date_to: Optional[datetime] = Field(None, description="Inclusive upper bound")


class AdapterResult(BaseModel):
    """Result of one adapter invocation."""

    articles: List[CandidateArticle] = Field(default_factory=list, description="Surviving candidates")
    raw_fetched: int = Field(0, description="Items returned before filtering")
    error: Optional[str] = Field(None, description="Error message if the fetch failed")


class SourceResult(BaseModel):
    """Per-source line of an ingestion summary."""

    source: str = Field(..., description="Feed name or adapter label")
    articles_raw: int = Field(0, description="Items before keyword filtering")
    articles_found: int = Field(0, description="Items that matched at least one keyword")
    articles_created: int = Field(0, description="New articles stored")
    articles_duped: int = Field(0, description="Items already stored")
    errors: List[str] = Field(default_factory=list, description="Adapter errors")


class KeywordStat(BaseModel):
    """How many created articles a keyword matched."""

    term: str
    count: int


class IngestionSummary(BaseModel):
    """Aggregate outcome of one ingestion run."""

    results: List[SourceResult] = Field(default_factory=list)
    total_found: int = 0
    total_created: int = 0
    total_duped: int = 0
    keyword_stats: List[KeywordStat] = Field(default_factory=list)
    finished_at: datetime
