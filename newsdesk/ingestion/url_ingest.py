"""
Single-URL ingestion.

A curator submits one article URL. Public page metadata is fetched and stored
as a new article. Paywalled pages are stored too, flagged ``NEEDS_MANUAL`` so
a curator fills in the summary by hand.
"""

import logging
from typing import Any, Optional

import pendulum

from ..extraction import MetadataFetcher
from ..models import Article, ArticleStatus, AuditAction, IngestSource
from ..utils.sanitize import sanitize_and_truncate, sanitize_text
from ..utils.urls import is_http_url, normalize_url, outlet_domain
from .keywords import load_tracked_keywords, match_keywords

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 500


class UrlIngestError(ValueError):
    """A submitted URL could not be turned into an article."""


class InvalidUrlError(UrlIngestError):
    """The input is not an http or https URL."""


class DuplicateArticleError(UrlIngestError):
    """The URL is already stored."""

    def __init__(self, message: str, article: Article) -> None:
        super().__init__(message)
        self.article = article


class UnusableContentError(UrlIngestError):
    """The fetch failed and yielded no title."""


async def ingest_url(
    store: Any,
    url: str,
    actor_email: str,
    fetcher: Optional[MetadataFetcher] = None,
) -> Article:
    """
    Fetch metadata for ``url`` and store it as a new article.

    Args:
        store: Persistence object
        url: URL as submitted
        actor_email: Curator recorded in the audit log
        fetcher: Metadata fetcher, default-configured when omitted

    Returns:
        The created article

    Raises:
        InvalidUrlError: ``url`` is not http(s)
        DuplicateArticleError: the raw or normalized URL is already stored
        UnusableContentError: the fetch failed without producing a title
    """
    raw_url = (url or "").strip()
    if not raw_url or not is_http_url(raw_url):
        raise InvalidUrlError("Must be a valid http or https URL")

    normalized_url = normalize_url(raw_url)
    existing = store.find_article_by_urls([raw_url, normalized_url])
    if existing:
        raise DuplicateArticleError("This URL is already in the system.", existing)

    meta = await (fetcher or MetadataFetcher()).fetch_metadata(normalized_url)
    if meta.fetch_error and not meta.title:
        raise UnusableContentError(meta.fetch_error)

    status = ArticleStatus.NEEDS_MANUAL if meta.is_paywalled else ArticleStatus.QUEUED

    domain = sanitize_text(meta.outlet_domain or outlet_domain(normalized_url))
    outlet = sanitize_text(meta.outlet or domain)
    title = sanitize_text(meta.title or f"Article from {domain}")
    snippet = sanitize_and_truncate(meta.snippet, SNIPPET_LENGTH) if meta.snippet else None
    published_at = meta.published_at or pendulum.now("UTC")

    matched = match_keywords(f"{title} {snippet or ''}", load_tracked_keywords(store))

    article = store.create_article(
        {
            "title": title,
            "outlet": outlet,
            "outlet_domain": domain,
            "url": normalized_url,
            "published_at": published_at,
            "snippet": snippet,
            "manual_summary": None,
            "keywords_matched": matched,
            "tags": [],
            "priority": False,
            "status": status,
            "ingest_source": IngestSource.URL,
            "image_url": meta.image_url,
            "author": sanitize_text(meta.author) if meta.author else None,
        }
    )

    store.write_audit_log(
        AuditAction.URL_INGESTED,
        actor_email,
        article_id=article.id,
        details={
            "url": normalized_url,
            "status": status.value,
            "isPaywalled": meta.is_paywalled,
            "fetchError": meta.fetch_error,
            "kwMatches": matched,
        },
    )
    logger.info("Ingested %s as %s (article %s)", normalized_url, status.value, article.id)
    return article
