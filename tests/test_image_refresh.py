"""Tests for the bulk image refresh."""

import pytest

from newsdesk.extraction import MetadataFetcher
from newsdesk.ingestion import image_refresh, refresh_images

from fakes import html_response, routed_transport


def page_with_image(image: str) -> str:
    return f'<html><head><meta property="og:image" content="{image}"></head></html>'


@pytest.fixture
def no_sleep(monkeypatch):
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr(image_refresh.asyncio, "sleep", fake_sleep)
    return delays


@pytest.mark.asyncio
async def test_updates_found_images_and_counts_misses(store, no_sleep):
    store.add_article("https://a.example/1")
    store.add_article("https://b.example/2", image_url="https://b.example/has.jpg")
    store.add_article("https://c.example/3")
    store.add_article("https://d.example/4")

    requests = []
    fetcher = MetadataFetcher(
        transport=routed_transport(
            {
                "https://a.example/1": html_response(page_with_image("/img/one.jpg")),
                "https://c.example/3": html_response("<title>No image</title>"),
                "https://d.example/4": html_response(page_with_image("https://cdn.example/four.jpg")),
            },
            requests,
        )
    )

    result = await refresh_images(store, fetcher=fetcher, delay=0.25)

    assert (result.total, result.updated, result.failed) == (3, 2, 1)
    # newest first
    assert [str(r.url) for r in requests] == [
        "https://d.example/4",
        "https://c.example/3",
        "https://a.example/1",
    ]
    images = {a.url: a.image_url for a in store.articles}
    assert images["https://a.example/1"] == "https://a.example/img/one.jpg"
    assert images["https://c.example/3"] is None
    assert images["https://d.example/4"] == "https://cdn.example/four.jpg"
    # a pause between requests, none before the first
    assert no_sleep == [0.25, 0.25]


@pytest.mark.asyncio
async def test_limit_leaves_rest_for_next_call(store, no_sleep):
    for i in range(3):
        store.add_article(f"https://ex.example/{i}")
    fetcher = MetadataFetcher(
        transport=routed_transport(
            {f"https://ex.example/{i}": html_response(page_with_image(f"/{i}.jpg")) for i in range(3)}
        )
    )

    first = await refresh_images(store, fetcher=fetcher, limit=2, delay=0)
    assert (first.total, first.updated) == (2, 2)
    assert [a.url for a in store.list_articles_missing_image()] == ["https://ex.example/0"]

    second = await refresh_images(store, fetcher=fetcher, limit=2, delay=0)
    assert (second.total, second.updated) == (1, 1)
    assert no_sleep == []


@pytest.mark.asyncio
async def test_fetch_error_counts_as_failed(store, no_sleep):
    store.add_article("https://gone.example/a")
    fetcher = MetadataFetcher(transport=routed_transport({}))
    result = await refresh_images(store, fetcher=fetcher)
    assert (result.total, result.updated, result.failed) == (1, 0, 1)


@pytest.mark.asyncio
async def test_nothing_to_do(store):
    result = await refresh_images(store, fetcher=MetadataFetcher(transport=routed_transport({})))
    assert (result.total, result.updated, result.failed) == (0, 0, 0)
