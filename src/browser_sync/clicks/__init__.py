"""Link click tracking and buffered delivery."""

from browser_sync.clicks.buffer import ClickBuffer
from browser_sync.clicks.models import ClickEvent, EXTERNAL_LINK, INTERNAL_LINK
from browser_sync.clicks.parser import parse_click

__all__ = [
    "ClickBuffer",
    "ClickEvent",
    "EXTERNAL_LINK",
    "INTERNAL_LINK",
    "parse_click",
]
