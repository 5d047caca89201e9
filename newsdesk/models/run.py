"""Ingest run model for per-adapter provenance."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import DBModel


class IngestRun(DBModel):
    """One adapter invocation within an ingestion run."""

    source: str = Field(..., description="Adapter source tag (RSS, NEWS_API)")
    feed_url: Optional[str] = Field(None, description="Feed URL for RSS runs")
    started_at: datetime = Field(..., description="When the run started")
    finished_at: Optional[datetime] = Field(None, description="When the adapter finished")
    articles_found: int = Field(0, description="Candidates after filtering")
    articles_created: int = Field(0, description="New articles stored")
    articles_duped: int = Field(0, description="Candidates already stored")
    error: Optional[str] = Field(None, description="Adapter error, if any")
