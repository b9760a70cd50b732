"""Data models for the link click module."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

INTERNAL_LINK = "internal_link"
EXTERNAL_LINK = "external_link"

MAX_LINK_TEXT = 200


@dataclass(frozen=True)
class ClickEvent:
    """A single observed link click."""

    destination_url: str
    destination_title: str
    source_url: str
    source_title: str
    link_text: str
    click_type: str  # INTERNAL_LINK | EXTERNAL_LINK
    timestamp: datetime
    domain: str
    is_new_tab: bool = False

    def to_dict(self) -> dict:
        """Wire form expected by the link-clicks collection."""
        return {
            "destinationUrl": self.destination_url,
            "destinationTitle": self.destination_title,
            "sourceUrl": self.source_url,
            "sourceTitle": self.source_title,
            "linkText": self.link_text,
            "clickType": self.click_type,
            "timestamp": int(self.timestamp.timestamp() * 1000),
            "domain": self.domain,
            "isNewTab": self.is_new_tab,
        }
