"""Article ingestion for the news desk."""

from .image_refresh import ImageRefreshResult, refresh_images
from .keywords import DEFAULT_KEYWORDS, has_keyword_match, load_tracked_keywords, match_keywords
from .models import (
    AdapterResult,
    CandidateArticle,
    FetchOptions,
    IngestionSummary,
    KeywordStat,
    SourceResult,
)
from .news_api import NewsApiAdapter, NewsApiError, build_or_query
from .orchestrator import IngestionOrchestrator
from .rss_fetcher import RSSFetcher
from .url_ingest import (
    DuplicateArticleError,
    InvalidUrlError,
    UnusableContentError,
    UrlIngestError,
    ingest_url,
)

__all__ = [
    "AdapterResult",
    "CandidateArticle",
    "DEFAULT_KEYWORDS",
    "DuplicateArticleError",
    "FetchOptions",
    "ImageRefreshResult",
    "IngestionOrchestrator",
    "IngestionSummary",
    "InvalidUrlError",
    "KeywordStat",
    "NewsApiAdapter",
    "NewsApiError",
    "RSSFetcher",
    "SourceResult",
    "UnusableContentError",
    "UrlIngestError",
    "build_or_query",
    "has_keyword_match",
    "ingest_url",
    "load_tracked_keywords",
    "match_keywords",
    "refresh_images",
]
