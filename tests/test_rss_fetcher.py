"""Tests for the RSS/Atom adapter."""

from datetime import datetime, timezone

import time

import httpx
import pytest

from newsdesk.config import FeedConfig
from newsdesk.ingestion import FetchOptions, RSSFetcher
from newsdesk.ingestion.rss_fetcher import entry_published_at
from newsdesk.models import IngestSource

from fakes import routed_transport, slow_response
from samples import ATOM_FEED, RSS_FEED

FEED = FeedConfig(
    name="LA Times California",
    url="https://www.latimes.com/california/rss2.0.xml",
    outlet="Los Angeles Times",
    domain="latimes.com",
)
KEYWORDS = ["California casino", "Kyle Kirkland"]


def xml_response(body: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, headers={"content-type": "application/rss+xml"}, content=body.encode())


def fetcher_for(route) -> RSSFetcher:
    return RSSFetcher(transport=routed_transport({FEED.url: route}))


@pytest.mark.asyncio
async def test_filters_and_maps_entries():
    result = await fetcher_for(xml_response(RSS_FEED)).fetch_feed(FEED, FetchOptions(keywords=KEYWORDS))

    assert result.error is None
    assert result.raw_fetched == 4
    assert [a.title for a in result.articles] == [
        "California casino revenue climbs & tribes expand",
        "Cardroom leaders meet in Sacramento",
    ]

    casino = result.articles[0]
    assert casino.url == "https://www.latimes.com/california/story/casino-revenue?id=7"
    assert casino.snippet == "Revenue at tribal venues rose again."
    assert casino.author == "Maria Lopez"
    assert casino.image_url == "https://ca-times.brightspotcdn.com/casino.jpg"
    assert casino.published_at == datetime(2025, 1, 20, 10, 0, tzinfo=timezone.utc)
    assert casino.outlet == "Los Angeles Times"
    assert casino.outlet_domain == "latimes.com"
    assert casino.source == IngestSource.RSS

    kirkland = result.articles[1]
    assert kirkland.image_url == "https://www.latimes.com/images/kirkland.jpg"


@pytest.mark.asyncio
async def test_date_window():
    options = FetchOptions(
        keywords=KEYWORDS,
        date_from=datetime(2025, 1, 1, tzinfo=timezone.utc),
        date_to=datetime(2025, 1, 31, tzinfo=timezone.utc),
    )
    result = await fetcher_for(xml_response(RSS_FEED)).fetch_feed(FEED, options)
    assert [a.url for a in result.articles] == [
        "https://www.latimes.com/california/story/casino-revenue?id=7"
    ]


@pytest.mark.asyncio
async def test_atom_feed():
    result = await fetcher_for(xml_response(ATOM_FEED)).fetch_feed(FEED, FetchOptions(keywords=KEYWORDS))
    assert result.raw_fetched == 2
    assert len(result.articles) == 2
    assert result.articles[0].published_at == datetime(2025, 1, 21, 9, 0, tzinfo=timezone.utc)
    assert result.articles[1].snippet == "The CGA president joins the advisory group."


@pytest.mark.asyncio
async def test_no_keywords_matches_nothing():
    result = await fetcher_for(xml_response(RSS_FEED)).fetch_feed(FEED, FetchOptions())
    assert result.raw_fetched == 4
    assert result.articles == []


@pytest.mark.asyncio
async def test_http_error_status():
    result = await fetcher_for(httpx.Response(503, text="unavailable")).fetch_feed(
        FEED, FetchOptions(keywords=KEYWORDS)
    )
    assert result.error == f"HTTP 503 from {FEED.url}"
    assert result.articles == []
    assert result.raw_fetched == 0


@pytest.mark.asyncio
async def test_not_a_feed():
    result = await fetcher_for(xml_response("just some plain text")).fetch_feed(
        FEED, FetchOptions(keywords=KEYWORDS)
    )
    assert result.error == f"No channel/feed element found in {FEED.url}"


@pytest.mark.asyncio
async def test_network_failure():
    result = await fetcher_for(httpx.ConnectError("connection refused")).fetch_feed(
        FEED, FetchOptions(keywords=KEYWORDS)
    )
    assert result.error == f"Failed to fetch {FEED.url}: connection refused"


@pytest.mark.asyncio
async def test_slow_feed_body_hits_overall_deadline():
    fetcher = RSSFetcher(timeout=0.2, transport=routed_transport({FEED.url: slow_response("application/rss+xml")}))
    started = time.monotonic()
    result = await fetcher.fetch_feed(FEED, FetchOptions(keywords=KEYWORDS))
    assert time.monotonic() - started < 1.5
    assert result.error == f"Failed to fetch {FEED.url}: timed out after 0.2s"
    assert result.articles == []


@pytest.mark.asyncio
async def test_sends_feed_user_agent():
    requests = []
    fetcher = RSSFetcher(
        user_agent="TestBot/1.0",
        transport=routed_transport({FEED.url: xml_response(RSS_FEED)}, requests),
    )
    await fetcher.fetch_feed(FEED, FetchOptions(keywords=KEYWORDS))
    assert requests[0].headers["user-agent"] == "TestBot/1.0"


class TestEntryPublishedAt:
    def test_missing_date_means_now(self):
        before = datetime.now(timezone.utc)
        assert entry_published_at({}) >= before

    def test_unparseable_date_drops_entry(self):
        assert entry_published_at({"published": "sometime last week"}) is None

    def test_raw_string_parsed_when_feedparser_could_not(self):
        assert entry_published_at({"updated": "2025-01-20T10:00:00Z"}) == datetime(
            2025, 1, 20, 10, 0, tzinfo=timezone.utc
        )


@pytest.mark.asyncio
async def test_fetch_all_feeds_skips_disabled_and_keeps_order():
    other = FeedConfig(name="Broken", url="https://example.com/feed.xml", outlet="Example", domain="example.com")
    disabled = FeedConfig(
        name="Off", url="https://off.example.com/rss", outlet="Off", domain="off.example.com", enabled=False
    )
    requests = []
    fetcher = RSSFetcher(
        transport=routed_transport(
            {FEED.url: xml_response(RSS_FEED), other.url: httpx.Response(500, text="boom")}, requests
        )
    )

    results = await fetcher.fetch_all_feeds([FEED, disabled, other], FetchOptions(keywords=KEYWORDS))

    assert [feed.name for feed, _ in results] == ["LA Times California", "Broken"]
    assert results[0][1].error is None
    assert results[1][1].error == f"HTTP 500 from {other.url}"
    assert len(requests) == 2
