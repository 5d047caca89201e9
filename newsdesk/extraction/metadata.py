"""
Fetch a publicly accessible page and extract article metadata.

Sources, in the precedence encoded by the field chains below: JSON-LD
structured data, Open Graph tags, Twitter Card tags, plain meta tags and the
``<title>`` element.

Compliance rules enforced here:
- public HTTP/HTTPS only, no credentials or cookies are ever sent
- one page per request, links are never followed beyond HTTP redirects
- the body is read up to a hard byte cap and never stored
- a descriptive User-Agent and a strict timeout on every request
"""

import asyncio
import logging
from typing import Callable, List, Optional, Sequence, Tuple

import httpx

from ..utils.dates import parse_timestamp
from ..utils.urls import is_http_url, normalize_url, outlet_domain, resolve_http_url
from .html_meta import ParsedPage, parse_page
from .models import UrlMetadata
from .paywall import detect_paywall

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 12.0
MAX_RESPONSE_BYTES = 5 * 1024 * 1024
SNIPPET_LENGTH = 500
USER_AGENT = "NewsDesk-MetaBot/1.0 (compliant metadata reader; contact: admin@example.com)"

HTML_CONTENT_TYPES = ("text/html", "application/xhtml")

Extractor = Callable[[ParsedPage], Optional[str]]
FieldChain = Sequence[Tuple[str, Extractor]]


def _json_ld(attr: str) -> Extractor:
    def extract(page: ParsedPage) -> Optional[str]:
        return getattr(page.json_ld, attr) if page.json_ld else None

    return extract


def _meta(*keys: str) -> Extractor:
    return lambda page: page.meta(*keys)


TITLE_CHAIN: FieldChain = (
    ("json-ld headline", _json_ld("headline")),
    ("og:title", _meta("og:title")),
    ("twitter:title", _meta("twitter:title")),
    ("title element", lambda page: page.title),
)

OUTLET_CHAIN: FieldChain = (
    ("json-ld publisher", _json_ld("publisher_name")),
    ("og:site_name", _meta("og:site_name")),
)

SNIPPET_CHAIN: FieldChain = (
    ("og:description", _meta("og:description")),
    ("twitter:description", _meta("twitter:description")),
    ("meta description", _meta("description")),
)

IMAGE_CHAIN: FieldChain = (
    ("og:image", _meta("og:image", "og:image:secure_url")),
    ("json-ld image", _json_ld("image")),
    ("twitter:image", _meta("twitter:image", "twitter:image:src")),
)

PUBLISHED_CHAIN: FieldChain = (
    ("json-ld datePublished", _json_ld("date_published")),
    ("article:published_time", _meta("article:published_time")),
    ("article:modified_time", _meta("article:modified_time")),
    ("date", _meta("date")),
    ("pubdate", _meta("pubdate")),
)

AUTHOR_CHAIN: FieldChain = (("json-ld author", _json_ld("author_name")),)

CANONICAL_CHAIN: FieldChain = (
    ("og:url", _meta("og:url")),
    ("link canonical", lambda page: page.canonical),
)


def first_present(chain: FieldChain, page: ParsedPage) -> Optional[str]:
    """Return the first non-empty value produced by a field chain."""
    for _, extract in chain:
        value = extract(page)
        if value and value.strip():
            return value.strip()
    return None


def candidates(chain: FieldChain, page: ParsedPage) -> List[str]:
    """Return every non-empty value of a field chain, in precedence order."""
    values = []
    for _, extract in chain:
        value = extract(page)
        if value and value.strip():
            values.append(value.strip())
    return values


def describe_content_type(content_type: str) -> str:
    """Friendly message for a response that is not a web page."""
    lowered = content_type.lower()
    if "pdf" in lowered:
        return "This URL points to a PDF, not a webpage."
    if "json" in lowered:
        return "This URL returns JSON, not a webpage."
    return f"Unexpected content type: {content_type.split(';')[0].strip() or 'unknown'}"


class MetadataFetcher:
    """Fetch one page and turn its markup into ``UrlMetadata``."""

    def __init__(
        self,
        timeout: float = FETCH_TIMEOUT,
        max_bytes: int = MAX_RESPONSE_BYTES,
        user_agent: str = USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize metadata fetcher."""
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.user_agent = user_agent
        self.transport = transport

    def _headers(self) -> dict:
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Cache-Control": "no-cache",
        }

    async def _read_capped(self, response: httpx.Response) -> bytes:
        """Read the body until it ends or reaches the byte cap."""
        chunks = []
        total = 0
        async for chunk in response.aiter_bytes():
            chunks.append(chunk)
            total += len(chunk)
            if total >= self.max_bytes:
                logger.info("Response from %s truncated at %d bytes", response.url, total)
                break
        return b"".join(chunks)[: self.max_bytes]

    @staticmethod
    def _decode(body: bytes, encoding: Optional[str]) -> str:
        try:
            return body.decode(encoding or "utf-8", errors="replace")
        except LookupError:
            return body.decode("utf-8", errors="replace")

    async def _get_page(self, url: str) -> Tuple[int, str, Optional[str]]:
        """GET one page; the HTML is None when the content type is not a web page."""
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers=self._headers(),
            transport=self.transport,
        ) as client:
            async with client.stream("GET", url) as response:
                content_type = response.headers.get("content-type", "")
                if not any(ct in content_type.lower() for ct in HTML_CONTENT_TYPES):
                    return response.status_code, content_type, None
                body = await self._read_capped(response)
                return response.status_code, content_type, self._decode(body, response.charset_encoding)

    async def fetch_metadata(self, raw_url: str) -> UrlMetadata:
        """
        Fetch a URL and extract its metadata.

        Never raises: every failure is reported through ``fetch_error``. The
        timeout bounds the whole request, body included.
        """
        original_url = (raw_url or "").strip()
        normalized_url = normalize_url(original_url)

        if not is_http_url(normalized_url):
            return UrlMetadata.failed(original_url, normalized_url, "Invalid URL")
        domain = outlet_domain(normalized_url)

        try:
            status_code, content_type, html = await asyncio.wait_for(
                self._get_page(normalized_url), self.timeout
            )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            message = (
                f"Request timed out ({self.timeout:g}s). "
                "The site may be slow or blocking bots."
            )
            return UrlMetadata.failed(original_url, normalized_url, message, outlet_domain=domain)
        except httpx.HTTPError as e:
            message = f"Network error: {e}" if str(e) else "Network error"
            return UrlMetadata.failed(original_url, normalized_url, message, outlet_domain=domain)
        except Exception as e:
            logger.exception("Unexpected error fetching %s", normalized_url)
            return UrlMetadata.failed(
                original_url, normalized_url, f"Unexpected error: {e}", outlet_domain=domain
            )

        if html is None:
            return UrlMetadata.failed(
                original_url,
                normalized_url,
                describe_content_type(content_type),
                outlet_domain=domain,
                status_code=status_code,
            )

        return self.build_metadata(html, status_code, original_url, normalized_url)

    def build_metadata(
        self,
        html: str,
        status_code: int,
        original_url: str,
        normalized_url: str,
    ) -> UrlMetadata:
        """Compose the metadata result from a fetched document."""
        page = parse_page(html)
        domain = outlet_domain(normalized_url)

        resolved_url = normalized_url
        canonical = first_present(CANONICAL_CHAIN, page)
        absolute = resolve_http_url(canonical, normalized_url)
        if absolute:
            resolved_url = normalize_url(absolute)

        snippet = first_present(SNIPPET_CHAIN, page)
        if snippet:
            snippet = snippet[:SNIPPET_LENGTH].strip() or None

        published_at = None
        for value in candidates(PUBLISHED_CHAIN, page):
            published_at = parse_timestamp(value)
            if published_at:
                break

        is_paywalled = detect_paywall(html, status_code)

        return UrlMetadata(
            url=resolved_url,
            original_url=original_url,
            title=first_present(TITLE_CHAIN, page),
            outlet=first_present(OUTLET_CHAIN, page) or domain,
            outlet_domain=domain,
            published_at=published_at,
            # Text from an access-gated page is never surfaced.
            snippet=None if is_paywalled else snippet,
            image_url=resolve_http_url(first_present(IMAGE_CHAIN, page), resolved_url),
            author=first_present(AUTHOR_CHAIN, page),
            is_paywalled=is_paywalled,
            fetch_error=None,
        )


async def fetch_url_metadata(raw_url: str, fetcher: Optional[MetadataFetcher] = None) -> UrlMetadata:
    """Fetch metadata for one URL with a default-configured fetcher."""
    return await (fetcher or MetadataFetcher()).fetch_metadata(raw_url)
