"""
Head-level metadata scanners.

Documents are loaded with trafilatura's tolerant HTML loader and read through
the resulting lxml tree: meta tags, the ``<title>`` element, the canonical
link and JSON-LD blocks. A JSON-LD block that fails to parse is skipped and
its neighbours are still read.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import lxml.html
from lxml import etree
from lxml.html import HtmlElement
from trafilatura.utils import load_html

ARTICLE_TYPES = {
    "article",
    "newsarticle",
    "reportage",
    "satiricalarticle",
    "scholarlyarticle",
    "technicalarticle",
    "webpage",
    "webpageelement",
}

JSON_LD_TYPE = "application/ld+json"

MetaTag = Dict[str, str]
Document = Any  # markup string or an already loaded tree


@dataclass
class JsonLdArticle:
    """Fields pulled from the first article-like JSON-LD item."""

    headline: Optional[str] = None
    date_published: Optional[str] = None
    publisher_name: Optional[str] = None
    author_name: Optional[str] = None
    image: Optional[str] = None


@dataclass
class ParsedPage:
    """Everything the metadata extractor reads from one HTML document."""

    meta_tags: List[MetaTag] = field(default_factory=list)
    title: Optional[str] = None
    canonical: Optional[str] = None
    json_ld: Optional[JsonLdArticle] = None

    def meta(self, *keys: str) -> Optional[str]:
        return find_meta(self.meta_tags, *keys)


def load_tree(document: Document) -> Optional[HtmlElement]:
    """
    Load markup into an lxml tree; None for empty or unparseable input.

    trafilatura refuses some head-only fragments, so lxml's own document
    parser gets a second try at them.
    """
    if isinstance(document, HtmlElement):
        return document
    if not document or not document.strip():
        return None
    tree = load_html(document)
    if tree is not None:
        return tree
    try:
        return lxml.html.document_fromstring(document)
    except (etree.ParserError, ValueError):
        return None


def parse_meta_tags(document: Document) -> List[MetaTag]:
    """Return every ``<meta>`` tag as a map of lowercased attribute names."""
    tree = load_tree(document)
    if tree is None:
        return []
    return [
        {name.lower(): value for name, value in element.attrib.items()}
        for element in tree.iter("meta")
    ]


def find_meta(tags: List[MetaTag], *keys: str) -> Optional[str]:
    """
    Look up a meta tag's content by its ``property`` or ``name`` attribute.

    Keys are tried in order; the first non-empty content wins.
    """
    for key in keys:
        wanted = key.lower()
        for tag in tags:
            if tag.get("property", "").lower() == wanted or tag.get("name", "").lower() == wanted:
                content = tag.get("content", "").strip()
                if content:
                    return content
                break
    return None


def parse_title(document: Document) -> Optional[str]:
    """Extract ``<title>`` text."""
    tree = load_tree(document)
    if tree is None:
        return None
    element = tree.find(".//title")
    if element is None:
        return None
    return element.text_content().strip() or None


def parse_canonical(document: Document) -> Optional[str]:
    """Extract the ``<link rel="canonical">`` href."""
    tree = load_tree(document)
    if tree is None:
        return None
    for link in tree.iter("link"):
        rel = (link.get("rel") or "").lower().split()
        href = (link.get("href") or "").strip()
        if "canonical" in rel and href:
            return href
    return None


def parse_json_ld_blocks(document: Document) -> List[Any]:
    """Parse every JSON-LD block; a block that is not valid JSON is skipped."""
    tree = load_tree(document)
    if tree is None:
        return []

    items: List[Any] = []
    for script in tree.iter("script"):
        if (script.get("type") or "").strip().lower() != JSON_LD_TYPE:
            continue
        try:
            parsed = json.loads((script.text or "").strip())
        except ValueError:
            continue
        if isinstance(parsed, list):
            items.extend(parsed)
        else:
            items.append(parsed)
    return items


def _name_of(value: Any) -> Optional[str]:
    if isinstance(value, dict) and "name" in value:
        return str(value["name"])
    if isinstance(value, str):
        return value
    return None


def _item_type(item: Dict[str, Any]) -> Optional[str]:
    item_type = item.get("@type")
    if isinstance(item_type, list):
        item_type = item_type[0] if item_type else None
    return item_type if isinstance(item_type, str) else None


def find_article_json_ld(items: List[Any]) -> Optional[JsonLdArticle]:
    """Find the first article-like item, looking one level into ``@graph``."""
    flat: List[Any] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        graph = item.get("@graph")
        if isinstance(graph, list):
            flat.extend(graph)
        else:
            flat.append(item)

    for item in flat:
        if not isinstance(item, dict):
            continue
        item_type = _item_type(item)
        if not item_type or item_type.lower() not in ARTICLE_TYPES:
            continue

        author = item.get("author")
        if isinstance(author, list):
            author = author[0] if author else None

        image = item.get("image")
        if isinstance(image, dict) and "url" in image:
            image = str(image["url"])
        elif not isinstance(image, str):
            image = None

        date_published = item.get("datePublished")
        if not isinstance(date_published, str):
            date_published = item.get("dateModified")
        if not isinstance(date_published, str):
            date_published = None

        headline = item.get("headline")
        return JsonLdArticle(
            headline=headline if isinstance(headline, str) else None,
            date_published=date_published,
            publisher_name=_name_of(item.get("publisher")),
            author_name=_name_of(author),
            image=image,
        )

    return None


def parse_page(html: str) -> ParsedPage:
    """Load the document once and run every scanner over it."""
    tree = load_tree(html)
    if tree is None:
        return ParsedPage()
    return ParsedPage(
        meta_tags=parse_meta_tags(tree),
        title=parse_title(tree),
        canonical=parse_canonical(tree),
        json_ld=find_article_json_ld(parse_json_ld_blocks(tree)),
    )
