"""Article model for curated news records."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import DBModel


class ArticleStatus(str, Enum):
    """Curation status of a stored article."""

    QUEUED = "QUEUED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    NEEDS_MANUAL = "NEEDS_MANUAL"


class IngestSource(str, Enum):
    """Where an article entered the system."""

    RSS = "RSS"
    NEWS_API = "NEWS_API"
    MANUAL = "MANUAL"
    URL = "URL"


class Article(DBModel):
    """Article model."""

    title: str = Field(..., description="Article title")
    outlet: str = Field(..., description="Publishing outlet name")
    outlet_domain: str = Field(..., description="Outlet hostname")
    published_at: datetime = Field(..., description="Publication timestamp")
    url: str = Field(..., description="Canonical URL, unique")
    keywords_matched: List[str] = Field(default_factory=list, description="Keywords that matched")
    snippet: Optional[str] = Field(None, description="Short plain-text description")
    manual_summary: Optional[str] = Field(None, description="Curator-written summary")
    status: ArticleStatus = Field(ArticleStatus.QUEUED, description="Curation status")
    priority: bool = Field(False, description="Pinned by a curator")
    tags: List[str] = Field(default_factory=list, description="Curator tags")
    ingest_source: IngestSource = Field(IngestSource.RSS, description="Ingestion path")
    image_url: Optional[str] = Field(None, description="Absolute http(s) image URL")
    author: Optional[str] = Field(None, description="Author name")
    section: Optional[str] = Field(None, description="Dashboard section (cardrooms, tribal, gaming)")
