"""Data models for page metadata extraction."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UrlMetadata(BaseModel):
    """Public metadata read from a single web page."""

    url: str = Field(..., description="Resolved canonical URL")
    original_url: str = Field(..., description="URL exactly as submitted")
    title: Optional[str] = Field(None, description="Article headline")
    outlet: Optional[str] = Field(None, description="Publisher name")
    outlet_domain: str = Field("", description="Hostname without www.")
    published_at: Optional[datetime] = Field(None, description="Publication timestamp")
    snippet: Optional[str] = Field(None, description="Short description, at most 500 chars")
    image_url: Optional[str] = Field(None, description="Absolute http(s) image URL")
    author: Optional[str] = Field(None, description="Author name")
    is_paywalled: bool = Field(False, description="Whether an access gate was detected")
    fetch_error: Optional[str] = Field(None, description="Error message if the fetch failed")

    @classmethod
    def failed(
        cls,
        original_url: str,
        url: str,
        message: str,
        outlet_domain: str = "",
        status_code: Optional[int] = None,
    ) -> "UrlMetadata":
        """Build the result for a fetch that produced no usable page."""
        return cls(
            url=url,
            original_url=original_url,
            outlet_domain=outlet_domain,
            is_paywalled=status_code in (401, 403),
            fetch_error=message,
        )
