"""Page metadata extraction and paywall detection."""

from .html_meta import JsonLdArticle, ParsedPage, find_meta, parse_page
from .metadata import MetadataFetcher, fetch_url_metadata
from .models import UrlMetadata
from .paywall import detect_paywall

__all__ = [
    "JsonLdArticle",
    "MetadataFetcher",
    "ParsedPage",
    "UrlMetadata",
    "detect_paywall",
    "fetch_url_metadata",
    "find_meta",
    "parse_page",
]
