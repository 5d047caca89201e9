"""Tracked keyword model."""

from pydantic import Field

from .base import DBModel


class Keyword(DBModel):
    """Keyword used for relevance filtering."""

    term: str = Field(..., description="Keyword phrase, unique")
    enabled: bool = Field(True, description="Whether the keyword is active")
