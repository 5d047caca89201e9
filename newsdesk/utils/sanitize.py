"""Plain-text sanitization for untrusted feed and page text."""

import re

TAG_RE = re.compile(r"<[A-Za-z/!?][^>]*(?:>|$)")
WHITESPACE_RE = re.compile(r"\s+")
NAMED_ENTITY_RE = re.compile(r"&(?:amp|lt|gt|quot|apos|nbsp|#039|#39);", re.IGNORECASE)
DECIMAL_ENTITY_RE = re.compile(r"&#(\d+);")
HEX_ENTITY_RE = re.compile(r"&#x([0-9a-f]+);", re.IGNORECASE)

ENTITY_MAP = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#039;": "'",
    "&#39;": "'",
    "&apos;": "'",
    "&nbsp;": " ",
}

ELLIPSIS = "…"


def _code_point(value: str, base: int) -> str:
    try:
        return chr(int(value, base))
    except (ValueError, OverflowError):
        return ""


def decode_entities(value: str) -> str:
    """Decode the common named entities plus decimal and hex references."""
    if not value:
        return ""
    value = NAMED_ENTITY_RE.sub(lambda m: ENTITY_MAP.get(m.group(0).lower(), m.group(0)), value)
    value = DECIMAL_ENTITY_RE.sub(lambda m: _code_point(m.group(1), 10), value)
    return HEX_ENTITY_RE.sub(lambda m: _code_point(m.group(1), 16), value)


def sanitize_text(value: str) -> str:
    """
    Strip all markup from a string and return clean plain text.

    Tags are removed before and after entity decoding so that encoded markup
    such as ``&lt;script&gt;`` cannot reappear as a live tag. A ``<`` opens a tag
    only when a letter, ``/``, ``!`` or ``?`` follows it; any other angle
    bracket is dropped and the text around it kept.
    """
    if not value:
        return ""
    text = decode_entities(TAG_RE.sub("", value))
    text = TAG_RE.sub("", text).replace("<", "").replace(">", "")
    return WHITESPACE_RE.sub(" ", text).strip()


def sanitize_and_truncate(value: str, max_length: int) -> str:
    """Sanitize, then cut to ``max_length`` characters plus an ellipsis."""
    clean = sanitize_text(value)
    if len(clean) <= max_length:
        return clean
    return clean[:max_length].rstrip() + ELLIPSIS
