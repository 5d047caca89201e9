"""
News-search API adapter.

Supports two providers, chosen by configuration:
    newsapi   -> newsapi.org  (default)
    newsdata  -> newsdata.io

Without an API key the adapter is idle: it returns an empty result and no
error.

Keywords are sent as quoted phrases joined with OR, as many as fit in the
provider's query budget. The provider's matching is broader than ours, so every
returned item is re-checked locally against the full keyword list and the date
window before it is kept. Only metadata is kept; article links are never
followed.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..models import IngestSource
from ..utils.dates import parse_timestamp, within_window
from ..utils.sanitize import sanitize_and_truncate, sanitize_text
from ..utils.urls import is_http_url, normalize_url, outlet_domain, resolve_http_url
from .keywords import match_keywords
from .models import AdapterResult, CandidateArticle, FetchOptions

logger = logging.getLogger(__name__)

NEWSAPI_URL = "https://newsapi.org/v2/everything"
NEWSDATA_URL = "https://newsdata.io/api/1/news"
NEWSAPI_QUERY_BUDGET = 490
NEWSDATA_QUERY_BUDGET = 500
API_TIMEOUT = 20.0
USER_AGENT = "NewsDesk/1.0"
SNIPPET_LENGTH = 500
REMOVED_TITLE = "[Removed]"

PROVIDERS = ("newsapi", "newsdata")


class NewsApiError(Exception):
    """The provider answered with an error or an unreadable body."""


@dataclass
class QueryPlan:
    """An OR query and how many keywords made it in."""

    query: str
    included: int


def build_or_query(keywords: List[str], budget_chars: int = NEWSAPI_QUERY_BUDGET) -> QueryPlan:
    """
    Build ``"a" OR "b" OR ...`` from keywords, in order, within ``budget_chars``.

    Stops at the first keyword that would overflow the budget.
    """
    parts: List[str] = []
    used = 0
    for keyword in keywords:
        part = f'"{keyword}"'
        separator = " OR " if parts else ""
        if used + len(separator) + len(part) > budget_chars:
            break
        parts.append(part)
        used += len(separator) + len(part)
    return QueryPlan(query=" OR ".join(parts), included=len(parts))


class NewsApiAdapter:
    """Fetch keyword matches from a third-party news-search API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        provider: str = "newsapi",
        timeout: float = API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the adapter; an empty ``api_key`` disables it."""
        self.api_key = api_key or ""
        self.provider = (provider or "newsapi").lower()
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(
        cls,
        api_config: Dict[str, Any],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "NewsApiAdapter":
        """Build from ``Config.get_news_api_config()``."""
        return cls(
            api_key=api_config.get("api_key"),
            provider=api_config.get("provider", "newsapi"),
            timeout=api_config.get("timeout", API_TIMEOUT),
            transport=transport,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def fetch(self, options: FetchOptions) -> AdapterResult:
        """
        Fetch articles from the configured provider.

        Never raises: provider failures come back as the result's error.
        """
        if not self.enabled:
            return AdapterResult()

        try:
            if self.provider == "newsdata":
                articles, raw_fetched = await self._fetch_newsdata(options)
            else:
                articles, raw_fetched = await self._fetch_newsapi(options)
            return AdapterResult(articles=articles, raw_fetched=raw_fetched)
        except (httpx.TimeoutException, asyncio.TimeoutError):
            return AdapterResult(error=f"{self.provider}: request timed out after {self.timeout:g}s")
        except (httpx.HTTPError, NewsApiError) as e:
            return AdapterResult(error=str(e) or e.__class__.__name__)
        except Exception as e:
            logger.exception("Unexpected error from %s", self.provider)
            return AdapterResult(error=f"{self.provider}: unexpected error: {e}")

    def _plan(self, options: FetchOptions, budget: int) -> QueryPlan:
        plan = build_or_query(options.keywords, budget)
        if plan.included < len(options.keywords):
            logger.info(
                "%s query included %d/%d keywords (query budget limit)",
                self.provider,
                plan.included,
                len(options.keywords),
            )
        return plan

    async def _get_json(
        self, url: str, params: Dict[str, str], label: str
    ) -> Tuple[httpx.Response, Dict[str, Any]]:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": USER_AGENT},
            transport=self.transport,
        ) as client:
            response = await asyncio.wait_for(client.get(url, params=params), self.timeout)

        try:
            data = response.json()
        except ValueError:
            raise NewsApiError(f"{label} HTTP {response.status_code}: non-JSON response")
        if not isinstance(data, dict):
            raise NewsApiError(f"{label} HTTP {response.status_code}: unexpected response shape")
        return response, data

    def _candidate(
        self,
        options: FetchOptions,
        raw_title: Optional[str],
        raw_url: Optional[str],
        description: Optional[str],
        published: Optional[str],
        outlet: Optional[str],
        image_url: Optional[str],
        author: Optional[str],
        fallback_domain: Optional[str] = None,
    ) -> Optional[CandidateArticle]:
        """Re-validate one provider item; None means drop it."""
        if not raw_title or not raw_url or raw_title == REMOVED_TITLE:
            return None

        title = sanitize_text(raw_title)
        snippet = sanitize_and_truncate(description or "", SNIPPET_LENGTH)
        if not title:
            return None

        published_at = parse_timestamp(published)
        if published_at is None:
            return None
        if not within_window(published_at, options.date_from, options.date_to):
            return None

        # Full keyword list, not just the subset that fit in the query.
        if not match_keywords(f"{title} {snippet}", options.keywords):
            return None

        if is_http_url(raw_url):
            domain = outlet_domain(raw_url)
        elif fallback_domain:
            domain = fallback_domain
        else:
            return None

        return CandidateArticle(
            title=title,
            url=normalize_url(raw_url),
            outlet=sanitize_text(outlet or "") or domain,
            outlet_domain=domain,
            published_at=published_at,
            snippet=snippet or None,
            image_url=resolve_http_url(image_url, raw_url),
            author=sanitize_text(author) if author else None,
            source=IngestSource.NEWS_API,
        )

    async def _fetch_newsapi(self, options: FetchOptions) -> Tuple[List[CandidateArticle], int]:
        plan = self._plan(options, NEWSAPI_QUERY_BUDGET)
        if not plan.query:
            return [], 0

        params = {
            "q": plan.query,
            "language": "en",
            "sortBy": "publishedAt",
            "pageSize": "100",
            "apiKey": self.api_key,
        }
        if options.date_from:
            params["from"] = options.date_from.isoformat()
        if options.date_to:
            params["to"] = options.date_to.isoformat()

        response, data = await self._get_json(NEWSAPI_URL, params, "newsapi.org")
        if not response.is_success or data.get("status") != "ok":
            detail = data.get("message") or f"HTTP {response.status_code}"
            code = f" [{data['code']}]" if data.get("code") else ""
            raise NewsApiError(f"newsapi.org{code}: {detail}")

        raw = data.get("articles") or []
        articles = []
        for item in raw:
            source = item.get("source") or {}
            article = self._candidate(
                options,
                raw_title=item.get("title"),
                raw_url=item.get("url"),
                description=item.get("description") or item.get("content"),
                published=item.get("publishedAt"),
                outlet=source.get("name") if isinstance(source, dict) else None,
                image_url=item.get("urlToImage"),
                author=item.get("author"),
            )
            if article:
                articles.append(article)
        return articles, len(raw)

    async def _fetch_newsdata(self, options: FetchOptions) -> Tuple[List[CandidateArticle], int]:
        plan = self._plan(options, NEWSDATA_QUERY_BUDGET)
        if not plan.query:
            return [], 0

        params = {"q": plan.query, "language": "en", "apikey": self.api_key}
        # newsdata.io takes plain YYYY-MM-DD dates
        if options.date_from:
            params["from_date"] = options.date_from.date().isoformat()
        if options.date_to:
            params["to_date"] = options.date_to.date().isoformat()

        response, data = await self._get_json(NEWSDATA_URL, params, "newsdata.io")
        if not response.is_success or data.get("status") != "success":
            detail = data.get("message") or f"HTTP {response.status_code}"
            raise NewsApiError(f"newsdata.io: {detail}")

        raw = data.get("results") or []
        articles = []
        for item in raw:
            creators = item.get("creator")
            if not isinstance(creators, list):
                creators = [creators] if creators else []
            source_url = item.get("source_url") or ""
            article = self._candidate(
                options,
                raw_title=item.get("title"),
                raw_url=item.get("link"),
                description=item.get("description") or item.get("content"),
                published=item.get("pubDate"),
                outlet=item.get("source_id"),
                image_url=item.get("image_url"),
                author=creators[0] if creators else None,
                fallback_domain=outlet_domain(source_url) or source_url or item.get("source_id"),
            )
            if article:
                articles.append(article)
        return articles, len(raw)
