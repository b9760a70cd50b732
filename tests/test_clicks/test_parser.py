"""Tests for the click payload parser."""

from datetime import datetime

from browser_sync.clicks.models import EXTERNAL_LINK, INTERNAL_LINK, MAX_LINK_TEXT
from browser_sync.clicks.parser import parse_click


def _raw(**overrides):
    raw = {
        "destinationUrl": "https://other.example.net/article",
        "destinationTitle": "Article",
        "sourceUrl": "https://blog.example.com/post",
        "sourceTitle": "Post",
        "linkText": "read more",
        "clickType": "external_link",
        "timestamp": 1715959800000,
        "domain": "blog.example.com",
        "isNewTab": True,
    }
    raw.update(overrides)
    return raw


def test_parse_valid_click():
    click = parse_click(_raw())
    assert click is not None
    assert click.destination_url == "https://other.example.net/article"
    assert click.click_type == EXTERNAL_LINK
    assert click.is_new_tab is True
    assert click.timestamp == datetime.fromtimestamp(1715959800)


def test_parse_truncates_link_text():
    click = parse_click(_raw(linkText="x" * 500))
    assert len(click.link_text) == MAX_LINK_TEXT


def test_parse_skips_special_links():
    assert parse_click(_raw(destinationUrl="javascript:void(0)")) is None
    assert parse_click(_raw(destinationUrl="mailto:a@example.com")) is None
    assert parse_click(_raw(destinationUrl="https://example.com/#")) is None
    assert parse_click(_raw(destinationUrl="")) is None


def test_parse_ignores_non_text_fields():
    assert parse_click(_raw(destinationUrl=42)) is None

    click = parse_click(_raw(linkText=7, destinationTitle=None, clickType=["x"]))
    assert click.link_text == ""
    assert click.destination_title == "Link"
    assert click.click_type == EXTERNAL_LINK


def test_parse_infers_click_type_from_origin():
    click = parse_click(_raw(clickType=None, destinationUrl="https://blog.example.com/other"))
    assert click.click_type == INTERNAL_LINK

    click = parse_click(_raw(clickType="internal"))
    assert click.click_type == INTERNAL_LINK


def test_parse_defaults(fixed_now):
    click = parse_click(
        {"destinationUrl": "https://example.com/a", "sourceUrl": "https://src.example.org/"},
        now=fixed_now,
    )
    assert click.timestamp == fixed_now
    assert click.domain == "src.example.org"
    assert click.destination_title == "Link"


def test_to_dict_uses_wire_keys():
    data = parse_click(_raw()).to_dict()
    assert data["destinationUrl"] == "https://other.example.net/article"
    assert data["clickType"] == "external_link"
    assert data["timestamp"] == 1715959800000
    assert data["isNewTab"] is True
