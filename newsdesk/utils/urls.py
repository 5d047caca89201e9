"""URL canonicalization helpers for ingestion and dedup."""

from typing import Optional
from urllib.parse import unquote_plus, urljoin, urlsplit, urlunsplit

TRACKING_PARAMS = {
    "fbclid",
    "gclid",
    "_ga",
    "_gl",
    "ref",
    "mc_cid",
    "mc_eid",
    "yclid",
    "msclkid",
    "igshid",
    "twclid",
    "s_kwcid",
}

TRACKING_PREFIXES = ("utm_", "hsa_")

HTTP_SCHEMES = ("http", "https")


def is_tracking_param(key: str) -> bool:
    """Return True if a query parameter key is a known tracker."""
    key = unquote_plus(key).lower()
    return key in TRACKING_PARAMS or key.startswith(TRACKING_PREFIXES)


def _lower_host(netloc: str) -> str:
    if "@" in netloc:
        userinfo, host = netloc.rsplit("@", 1)
        return f"{userinfo}@{host.lower()}"
    return netloc.lower()


def normalize_url(url: str) -> str:
    """
    Canonicalize a URL for dedup.

    - Remove the fragment
    - Strip tracking query parameters, keep the rest verbatim and in order
    - Lowercase scheme and host, use "/" for an empty path

    Input that does not parse as an absolute URL is returned unchanged.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url

    kept = [
        pair
        for pair in parts.query.split("&")
        if pair and not is_tracking_param(pair.split("=", 1)[0])
    ]
    scheme = parts.scheme.lower()
    path = parts.path
    if not path and scheme in HTTP_SCHEMES:
        path = "/"

    return urlunsplit((scheme, _lower_host(parts.netloc), path, "&".join(kept), ""))


def is_http_url(url: str) -> bool:
    """Return True for an absolute http or https URL with a host."""
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        return False
    return parts.scheme.lower() in HTTP_SCHEMES and bool(hostname)


def outlet_domain(url: str) -> str:
    """Extract the bare hostname (without ``www.``) from a URL."""
    try:
        hostname = urlsplit(url).hostname or ""
    except ValueError:
        return ""
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname


def resolve_http_url(raw_url: Optional[str], base_url: str) -> Optional[str]:
    """
    Resolve a possibly relative URL against ``base_url``.

    Returns None unless the result is an absolute http/https URL. The value is
    never passed through the text sanitizer: that would mangle ``&`` in
    CDN query strings.
    """
    if not raw_url or not raw_url.strip():
        return None
    try:
        resolved = urljoin(base_url, raw_url.strip())
    except ValueError:
        return None
    if not is_http_url(resolved):
        return None
    return resolved
