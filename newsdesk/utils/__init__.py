"""Shared text, URL and date helpers."""

from .dates import ensure_utc, parse_timestamp, within_window
from .sanitize import decode_entities, sanitize_and_truncate, sanitize_text
from .urls import is_http_url, normalize_url, outlet_domain, resolve_http_url

__all__ = [
    "decode_entities",
    "ensure_utc",
    "is_http_url",
    "normalize_url",
    "outlet_domain",
    "parse_timestamp",
    "resolve_http_url",
    "sanitize_and_truncate",
    "sanitize_text",
    "within_window",
]
