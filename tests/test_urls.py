"""Tests for URL canonicalization."""

import pytest

from newsdesk.utils.urls import is_http_url, normalize_url, outlet_domain, resolve_http_url


class TestNormalizeUrl:
    def test_strips_utm_params(self):
        raw = "https://calmatters.org/article/?utm_source=email&utm_medium=newsletter&utm_campaign=daily"
        assert normalize_url(raw) == "https://calmatters.org/article/"

    def test_strips_click_ids_and_ref(self):
        raw = "https://site.com/page?utm_source=fb&fbclid=123&ref=homepage&id=99&gclid=x&_ga=2.1"
        assert normalize_url(raw) == "https://site.com/page?id=99"

    def test_preserves_other_params_verbatim(self):
        raw = "https://example.com/search?q=california+gaming&page=2"
        assert normalize_url(raw) == raw

    def test_strips_fragment(self):
        assert normalize_url("https://example.com/article?id=42#comments") == "https://example.com/article?id=42"

    def test_lowercases_scheme_and_host_only(self):
        assert normalize_url("HTTPS://WWW.Example.COM/Story/ABC") == "https://www.example.com/Story/ABC"

    def test_empty_path_becomes_slash(self):
        assert normalize_url("https://example.com") == "https://example.com/"

    def test_clean_url_unchanged(self):
        clean = "https://calmatters.org/politics/2024/01/cga-article/"
        assert normalize_url(clean) == clean

    def test_idempotent(self):
        once = normalize_url("https://Example.com?utm_source=x&b=2#top")
        assert normalize_url(once) == once

    @pytest.mark.parametrize("value", ["not-a-url", "", "calmatters.org/article"])
    def test_unparseable_returned_unchanged(self, value):
        assert normalize_url(value) == value


@pytest.mark.parametrize(
    "url,expected",
    [
        ("http://example.com/article", True),
        ("https://calmatters.org/story", True),
        ("javascript:alert(1)", False),
        ("data:text/html,<h1>hi</h1>", False),
        ("ftp://files.example.com/doc.pdf", False),
        ("calmatters.org/article", False),
        ("", False),
    ],
)
def test_is_http_url(url, expected):
    assert is_http_url(url) is expected


def test_outlet_domain():
    assert outlet_domain("https://www.latimes.com/article") == "latimes.com"
    assert outlet_domain("https://politics.calmatters.org/story") == "politics.calmatters.org"
    assert outlet_domain("not-a-url") == ""


class TestResolveHttpUrl:
    def test_relative_resolved_against_base(self):
        assert resolve_http_url("/img/a.jpg", "https://ex.com/news/story") == "https://ex.com/img/a.jpg"

    def test_protocol_relative(self):
        assert resolve_http_url("//cdn.ex.com/a.jpg", "https://ex.com/") == "https://cdn.ex.com/a.jpg"

    def test_query_string_kept_intact(self):
        url = "https://cdn.ex.com/a.jpg?w=800&h=600"
        assert resolve_http_url(url, "https://ex.com/") == url

    @pytest.mark.parametrize("raw", [None, "", "   ", "javascript:alert(1)", "data:image/png;base64,AAAA"])
    def test_rejects_non_http(self, raw):
        assert resolve_http_url(raw, "https://ex.com/") is None
