"""Data models for the history module."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from browser_sync.timeutil import to_utc_iso


@dataclass(frozen=True)
class ActivityRecord:
    """One history entry prepared for the remote history collection."""

    url: str
    title: str
    visit_count: int
    last_visit_time: datetime  # naive, local time

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "title": self.title,
            "visit_count": self.visit_count,
            "last_visit_time": to_utc_iso(self.last_visit_time),
        }
