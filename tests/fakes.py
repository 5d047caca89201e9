"""Test doubles: an in-memory store and canned HTTP responses."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Callable, Dict, List, Optional, Union

import httpx

from newsdesk.ingestion.keywords import DEFAULT_KEYWORDS
from newsdesk.models import Article, AuditLogEntry, IngestRun, Keyword


class FakeStore:
    """In-memory stand-in for ``PostgresStore``."""

    def __init__(self, keywords: Optional[List[str]] = None, keywords_error: Optional[Exception] = None):
        self.articles: List[Article] = []
        self.audit: List[AuditLogEntry] = []
        self.runs: Dict[int, IngestRun] = {}
        self.keywords: List[Keyword] = [
            Keyword(id=i + 1, term=term, enabled=True)
            for i, term in enumerate(DEFAULT_KEYWORDS if keywords is None else keywords)
        ]
        self.keywords_error = keywords_error
        self.fail_urls: set = set()
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def find_article_by_url(self, url):
        return self.find_article_by_urls([url])

    def find_article_by_urls(self, urls):
        for article in self.articles:
            if article.url in urls:
                return article
        return None

    def create_article(self, fields):
        if fields["url"] in self.fail_urls:
            raise RuntimeError(f"insert failed for {fields['url']}")
        if self.find_article_by_url(fields["url"]):
            raise ValueError(f"duplicate key value violates unique constraint: {fields['url']}")
        now = self._tick()
        article = Article(id=len(self.articles) + 1, created_at=now, updated_at=now, **fields)
        self.articles.append(article)
        return article

    def add_article(self, url: str, title: str = "Stored article", image_url: Optional[str] = None) -> Article:
        return self.create_article(
            {
                "title": title,
                "outlet": "Example",
                "outlet_domain": "example.com",
                "published_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
                "url": url,
                "image_url": image_url,
            }
        )

    def list_articles_missing_image(self, limit=100):
        missing = [a for a in self.articles if not a.image_url]
        missing.sort(key=lambda a: a.created_at, reverse=True)
        return missing[:limit]

    def update_article_image(self, article_id, image_url):
        for article in self.articles:
            if article.id == article_id:
                article.image_url = image_url

    def list_enabled_keywords(self):
        if self.keywords_error:
            raise self.keywords_error
        return [k.term for k in self.keywords if k.enabled]

    def create_ingest_run(self, source, feed_url=None, started_at=None):
        run_id = len(self.runs) + 1
        self.runs[run_id] = IngestRun(
            id=run_id,
            source=source,
            feed_url=feed_url,
            started_at=started_at or self._tick(),
        )
        return run_id

    def finalize_ingest_run(self, run_id, found, created, duped, error=None):
        run = self.runs[run_id]
        run.finished_at = self._tick()
        run.articles_found = found
        run.articles_created = created
        run.articles_duped = duped
        run.error = error

    def write_audit_log(self, action, actor_email, article_id=None, details=None):
        entry = AuditLogEntry(
            id=len(self.audit) + 1,
            article_id=article_id,
            action=action,
            actor_email=actor_email,
            timestamp=self._tick(),
            details=details or {},
        )
        self.audit.append(entry)
        return entry.id


Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response], Exception]


def html_response(html: str, status_code: int = 200, content_type: str = "text/html; charset=utf-8") -> httpx.Response:
    return httpx.Response(status_code, headers={"content-type": content_type}, content=html.encode("utf-8"))


def routed_transport(routes: Dict[str, Route], requests: Optional[List[httpx.Request]] = None) -> httpx.MockTransport:
    """
    Serve canned responses keyed by URL without query string.

    A value may be a response, a callable taking the request, or an exception
    to raise. Unknown URLs get a 404.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        key = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        route = routes.get(key)
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        return route

    return httpx.MockTransport(handler)


class SlowStream(httpx.AsyncByteStream):
    """A response body that trickles out one chunk per ``delay`` seconds."""

    def __init__(self, chunk: bytes, count: int, delay: float):
        self.chunk = chunk
        self.count = count
        self.delay = delay

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for _ in range(self.count):
            await asyncio.sleep(self.delay)
            yield self.chunk


def slow_response(content_type: str, chunk: bytes = b"x" * 10, count: int = 20, delay: float = 0.1) -> httpx.Response:
    return httpx.Response(200, headers={"content-type": content_type}, stream=SlowStream(chunk, count, delay))
