"""Tests for paywall heuristics."""

import pytest

from newsdesk.extraction.paywall import detect_paywall

from samples import FREE_CONTENT, PAYWALL_CLASS, PAYWALL_TEXT, RICH_ARTICLE


@pytest.mark.parametrize("status_code", [401, 403])
def test_blocking_status(status_code):
    assert detect_paywall("<html></html>", status_code)


def test_free_pages_not_flagged():
    assert not detect_paywall(FREE_CONTENT, 200)
    assert not detect_paywall(RICH_ARTICLE, 200)


def test_class_marker():
    assert detect_paywall(PAYWALL_CLASS, 200)


def test_data_attribute_marker():
    assert detect_paywall('<div data-paywall="true"><p>Story</p></div>', 200)


def test_two_text_hits():
    assert detect_paywall(PAYWALL_TEXT, 200)


def test_single_soft_hint_not_flagged():
    assert not detect_paywall("<p>Already a subscriber? Log in to manage your account.</p>", 200)


def test_empty_document():
    assert not detect_paywall("", 200)
