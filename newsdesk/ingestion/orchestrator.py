"""
Ingestion orchestrator.

Runs every enabled feed, then the news-search API, against one keyword
snapshot and persists what survives the filters. Each adapter invocation is
recorded as an ingest run with its counts and error.
"""

import asyncio
import logging
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import pendulum

from ..config import FeedConfig
from ..models import ArticleStatus, AuditAction
from .keywords import load_tracked_keywords, match_keywords
from .models import (
    AdapterResult,
    CandidateArticle,
    FetchOptions,
    IngestionSummary,
    KeywordStat,
    SourceResult,
)
from .news_api import NewsApiAdapter
from .rss_fetcher import RSSFetcher

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system@ingestion"
NEWS_API_LABEL = "News API"


class IngestionOrchestrator:
    """Coordinates the adapters and persists their results."""

    def __init__(
        self,
        store: Any,
        feeds: List[FeedConfig],
        rss_fetcher: Optional[RSSFetcher] = None,
        news_api: Optional[NewsApiAdapter] = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            store: Persistence object (``PostgresStore`` or a test double)
            feeds: Feeds to read; disabled entries are skipped
            rss_fetcher: Feed adapter, default-configured when omitted
            news_api: API adapter; None or keyless means the API is skipped
        """
        self.store = store
        self.feeds = feeds
        self.rss_fetcher = rss_fetcher or RSSFetcher()
        self.news_api = news_api

    def run_sync(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> IngestionSummary:
        """Synchronous wrapper for ``run``."""
        return asyncio.run(self.run(date_from, date_to))

    async def run(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> IngestionSummary:
        """Run all enabled adapters once."""
        run_start = pendulum.now("UTC")
        keywords = load_tracked_keywords(self.store)
        logger.info("Loaded %d keywords for ingestion", len(keywords))

        options = FetchOptions(keywords=keywords, date_from=date_from, date_to=date_to)
        results: List[SourceResult] = []
        keyword_hits: Counter = Counter()

        feeds = [feed for feed in self.feeds if feed.enabled]
        logger.info("Starting RSS ingestion for %d feeds", len(feeds))

        for feed in feeds:
            run_id = self._start_run("RSS", feed.url, run_start)
            fetched = await self.rss_fetcher.fetch_feed(feed, options)
            logger.info(
                "Feed %s: %d raw, %d matched%s",
                feed.name,
                fetched.raw_fetched,
                len(fetched.articles),
                f", error: {fetched.error}" if fetched.error else "",
            )
            results.append(self._record(feed.name, run_id, fetched, keywords, keyword_hits))

        if self.news_api is not None and self.news_api.enabled:
            run_id = self._start_run("NEWS_API", None, run_start)
            fetched = await self.news_api.fetch(options)
            logger.info(
                "News API (%s): %d raw, %d matched%s",
                self.news_api.provider,
                fetched.raw_fetched,
                len(fetched.articles),
                f", error: {fetched.error}" if fetched.error else "",
            )
            results.append(self._record(NEWS_API_LABEL, run_id, fetched, keywords, keyword_hits))

        # Counter.most_common keeps first-seen order among equal counts
        stats = [KeywordStat(term=term, count=count) for term, count in keyword_hits.most_common()]

        summary = IngestionSummary(
            results=results,
            total_found=sum(r.articles_found for r in results),
            total_created=sum(r.articles_created for r in results),
            total_duped=sum(r.articles_duped for r in results),
            keyword_stats=stats,
            finished_at=pendulum.now("UTC"),
        )
        logger.info(
            "Ingestion complete: %d found, %d created, %d duplicates",
            summary.total_found,
            summary.total_created,
            summary.total_duped,
        )
        return summary

    def _record(
        self,
        label: str,
        run_id: Optional[int],
        fetched: AdapterResult,
        keywords: List[str],
        keyword_hits: Counter,
    ) -> SourceResult:
        """Persist one adapter's survivors and close its run record."""
        created, duped, hits = self._persist(fetched.articles, keywords)
        keyword_hits.update(hits)
        self._finish_run(run_id, fetched, created, duped)
        return SourceResult(
            source=label,
            articles_raw=fetched.raw_fetched,
            articles_found=len(fetched.articles),
            articles_created=created,
            articles_duped=duped,
            errors=[fetched.error] if fetched.error else [],
        )

    def _persist(
        self, articles: List[CandidateArticle], keywords: List[str]
    ) -> Tuple[int, int, Dict[str, int]]:
        """
        Store new candidates.

        Returns:
            (created, duplicates, keyword hit counts over created articles)
        """
        created = 0
        duped = 0
        hits: Dict[str, int] = {}

        for article in articles:
            try:
                matched = match_keywords(article.search_text, keywords)

                if self.store.find_article_by_url(article.url):
                    duped += 1
                    continue

                stored = self.store.create_article(
                    {
                        "title": article.title,
                        "outlet": article.outlet,
                        "outlet_domain": article.outlet_domain,
                        "published_at": article.published_at,
                        "url": article.url,
                        "keywords_matched": matched,
                        "snippet": article.snippet,
                        "image_url": article.image_url,
                        "author": article.author,
                        "status": ArticleStatus.QUEUED,
                        "ingest_source": article.source,
                        "priority": False,
                        "tags": [],
                    }
                )
                self.store.write_audit_log(
                    AuditAction.INGESTED,
                    SYSTEM_ACTOR,
                    article_id=stored.id,
                    details={"source": article.source.value, "url": article.url},
                )
            except Exception:
                logger.exception("Failed to persist article %s", article.url)
                continue

            for term in matched:
                hits[term] = hits.get(term, 0) + 1
            created += 1

        return created, duped, hits

    def _start_run(
        self, source: str, feed_url: Optional[str], started_at: datetime
    ) -> Optional[int]:
        try:
            return self.store.create_ingest_run(source, feed_url, started_at)
        except Exception:
            logger.exception("Could not record ingest run for %s", feed_url or source)
            return None

    def _finish_run(
        self, run_id: Optional[int], fetched: AdapterResult, created: int, duped: int
    ) -> None:
        if run_id is None:
            return
        try:
            self.store.finalize_ingest_run(
                run_id,
                found=len(fetched.articles),
                created=created,
                duped=duped,
                error=fetched.error,
            )
        except Exception:
            logger.exception("Could not finalize ingest run %s", run_id)
