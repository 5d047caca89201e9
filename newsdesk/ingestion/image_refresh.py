"""Backfill missing article images from page metadata."""

import asyncio
import logging
from typing import Any, Optional

from pydantic import BaseModel

from ..extraction import MetadataFetcher

logger = logging.getLogger(__name__)

MAX_ARTICLES = 100
REQUEST_DELAY = 0.25


class ImageRefreshResult(BaseModel):
    """Counts from one refresh pass."""

    total: int = 0
    updated: int = 0
    failed: int = 0


async def refresh_images(
    store: Any,
    fetcher: Optional[MetadataFetcher] = None,
    limit: int = MAX_ARTICLES,
    delay: float = REQUEST_DELAY,
) -> ImageRefreshResult:
    """
    Look up an image for up to ``limit`` articles that have none.

    Articles are processed newest first, one at a time, with ``delay`` seconds
    between requests. Anything left over is picked up by the next call.
    """
    fetcher = fetcher or MetadataFetcher()
    articles = store.list_articles_missing_image(limit)
    result = ImageRefreshResult(total=len(articles))

    for i, article in enumerate(articles):
        if i > 0 and delay > 0:
            await asyncio.sleep(delay)

        try:
            meta = await fetcher.fetch_metadata(article.url)
            if not meta.image_url:
                result.failed += 1
                continue
            store.update_article_image(article.id, meta.image_url)
            result.updated += 1
        except Exception:
            logger.exception("Image refresh failed for article %s", article.id)
            result.failed += 1

    logger.info(
        "Image refresh: %d checked, %d updated, %d without image",
        result.total,
        result.updated,
        result.failed,
    )
    return result
