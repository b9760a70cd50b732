"""Parse raw activity log items into ActivityRecords."""

from __future__ import annotations

from browser_sync.history.models import ActivityRecord
from browser_sync.timeutil import normalize_timestamp

DEFAULT_TITLE = "Untitled"


def parse_history_item(raw: dict) -> ActivityRecord | None:
    """Normalize one raw history item; returns None when it can't be synced."""
    url = (raw.get("url") or "").strip()
    if not url:
        return None

    last_visit_time = normalize_timestamp(raw.get("last_visit_time"))
    if last_visit_time is None:
        return None

    title = (raw.get("title") or "").strip() or DEFAULT_TITLE
    try:
        visit_count = int(raw.get("visit_count") or 1)
    except (TypeError, ValueError):
        visit_count = 1

    return ActivityRecord(
        url=url,
        title=title,
        visit_count=max(1, visit_count),
        last_visit_time=last_visit_time,
    )
