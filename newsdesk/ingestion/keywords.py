"""
Keyword tracking.

Keywords live in the database and are edited from the CLI. Every ingestion
run reads the enabled list once and passes that snapshot to the adapters.
Matching is a case-insensitive substring test: no tokenizing, no stemming,
no word boundaries.
"""

import logging
from typing import List

logger = logging.getLogger(__name__)

DEFAULT_KEYWORDS: List[str] = [
    "California Gaming Association",
    "California Gaming Assn",
    "Kyle Kirkland",
    "California cardroom",
    "California casino",
    "California tribal casino",
    "California gambling",
    "California Sports betting",
    "California wage law",
    "California labor law",
    "SB 549 California",
]


def match_keywords(text: str, keywords: List[str]) -> List[str]:
    """Return the keywords found in ``text``, in keyword-list order."""
    if not text or not keywords:
        return []
    normalized = text.lower()
    return [kw for kw in keywords if kw.lower() in normalized]


def has_keyword_match(text: str, keywords: List[str]) -> bool:
    """Check if any keyword appears in ``text``."""
    return len(match_keywords(text, keywords)) > 0


def load_tracked_keywords(store) -> List[str]:
    """
    Load enabled keywords from the store.

    Falls back to ``DEFAULT_KEYWORDS`` when the store cannot be read, so
    ingestion keeps working while the database is down.
    """
    try:
        return list(store.list_enabled_keywords())
    except Exception as e:
        logger.warning("Keyword store unavailable, using defaults: %s", e)
        return list(DEFAULT_KEYWORDS)
