"""
Heuristic paywall detection.

Best-effort only: the patterns miss some gates and occasionally flag pages
that merely talk about subscriptions.
"""

import re

BLOCKING_STATUS_CODES = {401, 403}

# Markup hooks publishers use to mount or style an access gate.
STRUCTURAL_PATTERNS = [
    re.compile(
        r"""class\s*=\s*["'][^"']*\b(?:paywall|paywalled|subscription-wall|subscriber-only|"""
        r"""locked-content|premium-content|gate-content|metered-paywall|access-denied)\b[^"']*["']""",
        re.IGNORECASE,
    ),
    re.compile(
        r"""id\s*=\s*["'][^"']*\b(?:paywall|subscription-wall|subscriber-only)\b[^"']*["']""",
        re.IGNORECASE,
    ),
    re.compile(r"data-(?:paywall|premium|locked|subscriber)[^=>\s]*", re.IGNORECASE),
    re.compile(
        r"""aria-label\s*=\s*["'][^"']*\b(?:subscriber|paywall|premium)\b[^"']*["']""",
        re.IGNORECASE,
    ),
]

# Reader-facing copy shown by a subscription gate.
TEXT_PATTERNS = [
    re.compile(r"subscribers?\s+only", re.IGNORECASE),
    re.compile(r"subscribe\s+to\s+(?:continue|read|access)", re.IGNORECASE),
    re.compile(r"(?:already\s+a\s+subscriber|existing\s+subscriber)", re.IGNORECASE),
    re.compile(
        r"this\s+(?:article|content|story)\s+is\s+(?:for|available\s+to)\s+subscribers",
        re.IGNORECASE,
    ),
    re.compile(r"(?:create\s+an?\s+account|sign\s+up)\s+to\s+(?:continue|read|access)", re.IGNORECASE),
    re.compile(r"(?:register|log\s*in|sign\s*in)\s+to\s+(?:continue|read|access)", re.IGNORECASE),
    re.compile(r"exclusive\s+content\s+for\s+(?:members|subscribers)", re.IGNORECASE),
    re.compile(
        r"start\s+(?:your\s+)?(?:free\s+)?(?:trial|subscription)\s+to\s+read", re.IGNORECASE
    ),
    re.compile(
        r"you(?:'ve|’ve|\s+have)\s+reached\s+(?:your\s+)?(?:free\s+)?(?:article|monthly)\s+limit",
        re.IGNORECASE,
    ),
]


def count_hits(patterns, html: str) -> int:
    """Count how many patterns match somewhere in the document."""
    return sum(1 for pattern in patterns if pattern.search(html))


def detect_paywall(html: str, status_code: int) -> bool:
    """
    Classify a fetched page as access-restricted.

    A 401/403 is always a gate. Otherwise one structural marker is enough,
    while reader-facing text needs two distinct hits.
    """
    if status_code in BLOCKING_STATUS_CODES:
        return True

    structural_hits = count_hits(STRUCTURAL_PATTERNS, html or "")
    if structural_hits >= 1:
        return True

    # With no marker present, text alone must hit twice.
    return count_hits(TEXT_PATTERNS, html or "") >= 2
