"""Parse raw click payloads from the page-side tracker into ClickEvents."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlparse

from browser_sync.clicks.models import (
    EXTERNAL_LINK,
    INTERNAL_LINK,
    MAX_LINK_TEXT,
    ClickEvent,
)
from browser_sync.timeutil import normalize_timestamp

_SKIPPED_PREFIXES = ("javascript:", "mailto:", "tel:")


def parse_click(raw: dict, now: datetime | None = None) -> ClickEvent | None:
    """Normalize one click payload; returns None for links that aren't tracked."""
    destination = _text(raw, "destinationUrl")
    if not destination or destination == "#" or destination.endswith("#"):
        return None
    if destination.lower().startswith(_SKIPPED_PREFIXES):
        return None

    source = _text(raw, "sourceUrl")
    link_text = _text(raw, "linkText")[:MAX_LINK_TEXT]
    title = _text(raw, "destinationTitle") or link_text or "Link"

    timestamp = normalize_timestamp(raw.get("timestamp")) or now or datetime.now()
    domain = _text(raw, "domain") or (urlparse(source).hostname or "")

    return ClickEvent(
        destination_url=destination,
        destination_title=title,
        source_url=source,
        source_title=_text(raw, "sourceTitle"),
        link_text=link_text,
        click_type=_click_type(_text(raw, "clickType"), source, destination),
        timestamp=timestamp,
        domain=domain,
        is_new_tab=bool(raw.get("isNewTab")),
    )


def _text(raw: dict, key: str) -> str:
    """String field from the page payload; anything else reads as empty."""
    value = raw.get(key)
    return value.strip() if isinstance(value, str) else ""


def _click_type(kind: str, source: str, destination: str) -> str:
    kind = kind.lower()
    if kind in {"internal", INTERNAL_LINK}:
        return INTERNAL_LINK
    if kind in {"external", EXTERNAL_LINK}:
        return EXTERNAL_LINK
    if source and _origin(source) == _origin(destination):
        return INTERNAL_LINK
    return EXTERNAL_LINK


def _origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}".lower()
