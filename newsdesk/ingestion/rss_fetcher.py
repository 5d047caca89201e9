"""
RSS/Atom feed adapter.

Reads publicly available feeds only. Nothing beyond the feed document is
fetched and only what the feed itself provides is kept: title, link, a short
description, author, date and image.
"""

import asyncio
import calendar
import logging
import time
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple

import feedparser
import httpx

from ..config import FeedConfig
from ..models import IngestSource
from ..utils.dates import parse_timestamp, within_window
from ..utils.sanitize import sanitize_and_truncate, sanitize_text
from ..utils.urls import normalize_url, resolve_http_url
from .keywords import match_keywords
from .models import AdapterResult, CandidateArticle, FetchOptions

logger = logging.getLogger(__name__)

RSS_TIMEOUT = 15.0
USER_AGENT = "NewsDeskBot/1.0 (compliant RSS reader; contact: admin@example.com)"
SNIPPET_LENGTH = 500


def _struct_to_datetime(value: time.struct_time) -> datetime:
    return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)


def entry_published_at(entry: Any) -> Optional[datetime]:
    """
    Resolve an entry's publication time.

    Entries with no date at all are treated as published now; entries whose
    date is present but unreadable return None and are dropped.
    """
    for key in ("published", "updated"):
        raw = entry.get(key)
        parsed = entry.get(f"{key}_parsed")
        if parsed:
            try:
                return _struct_to_datetime(parsed)
            except (OverflowError, ValueError):
                return None
        if raw:
            return parse_timestamp(raw)
    return datetime.now(timezone.utc)


def entry_description(entry: Any) -> str:
    """Description, falling back to ``content:encoded``."""
    summary = entry.get("summary")
    if summary:
        return summary
    for content in entry.get("content") or []:
        if content.get("value"):
            return content["value"]
    return ""


def entry_image(entry: Any) -> Optional[str]:
    """Image from an ``image/*`` enclosure or ``media:content``."""
    for enclosure in entry.get("enclosures") or []:
        if str(enclosure.get("type", "")).startswith("image/") and enclosure.get("href"):
            return enclosure["href"]
    for media in entry.get("media_content") or []:
        if media.get("url"):
            return media["url"]
    return None


class RSSFetcher:
    """Fetch and parse RSS and Atom feeds."""

    def __init__(
        self,
        timeout: float = RSS_TIMEOUT,
        user_agent: str = USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize RSS fetcher."""
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    def parse_entry(
        self,
        entry: Any,
        feed: FeedConfig,
        options: FetchOptions,
    ) -> Optional[CandidateArticle]:
        """Turn one feed entry into a candidate, or None if it is filtered out."""
        title = sanitize_text(entry.get("title") or "")
        link = (entry.get("link") or entry.get("id") or "").strip()
        snippet = sanitize_and_truncate(entry_description(entry), SNIPPET_LENGTH)
        author = sanitize_text(entry.get("author") or "")

        if not title or not link:
            return None

        published_at = entry_published_at(entry)
        if published_at is None:
            return None

        if not within_window(published_at, options.date_from, options.date_to):
            return None

        if not match_keywords(f"{title} {snippet}", options.keywords):
            return None

        return CandidateArticle(
            title=title,
            url=normalize_url(link),
            outlet=feed.outlet,
            outlet_domain=feed.domain,
            published_at=published_at,
            snippet=snippet or None,
            image_url=resolve_http_url(entry_image(entry), link),
            author=author or None,
            source=IngestSource.RSS,
        )

    async def fetch_feed(self, feed: FeedConfig, options: FetchOptions) -> AdapterResult:
        """
        Fetch a single feed and return its matching entries.

        Never raises: a failed feed yields no articles and an error string.
        """
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/rss+xml, application/atom+xml, application/xml, text/xml, */*",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
                transport=self.transport,
            ) as client:
                response = await asyncio.wait_for(client.get(feed.url), self.timeout)

            if not response.is_success:
                return AdapterResult(error=f"HTTP {response.status_code} from {feed.url}")

            parsed = feedparser.parse(response.content)
            if not parsed.get("version"):
                return AdapterResult(error=f"No channel/feed element found in {feed.url}")

            entries = parsed.entries
            articles = []
            for entry in entries:
                article = self.parse_entry(entry, feed, options)
                if article:
                    articles.append(article)

            return AdapterResult(articles=articles, raw_fetched=len(entries))

        except (httpx.TimeoutException, asyncio.TimeoutError):
            return AdapterResult(error=f"Failed to fetch {feed.url}: timed out after {self.timeout:g}s")
        except httpx.HTTPError as e:
            return AdapterResult(error=f"Failed to fetch {feed.url}: {e}")
        except Exception as e:
            logger.exception("Unexpected error processing feed %s", feed.url)
            return AdapterResult(error=f"Failed to fetch {feed.url}: {e}")

    async def fetch_all_feeds(
        self, feeds: List[FeedConfig], options: FetchOptions
    ) -> List[Tuple[FeedConfig, AdapterResult]]:
        """Fetch enabled feeds one after another, paired with their results."""
        results = []
        for feed in feeds:
            if not feed.enabled:
                continue
            logger.info("Fetching %s", feed.name)
            results.append((feed, await self.fetch_feed(feed, options)))
        return results
