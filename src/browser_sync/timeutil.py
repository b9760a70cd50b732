"""Timestamp coercion shared by the history, click and session models."""

from __future__ import annotations

from datetime import datetime, timezone

import dateutil.parser


def normalize_timestamp(value) -> datetime | None:
    """Coerce a datetime, epoch milliseconds or ISO string to naive local time."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, (int, float)):
            parsed = datetime.fromtimestamp(float(value) / 1000)
        else:
            parsed = dateutil.parser.isoparse(str(value))
    except (ValueError, OSError, OverflowError):
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def to_utc_iso(value: datetime) -> str:
    """RFC 3339 UTC form, e.g. ``2024-01-01T12:00:00Z``."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def start_of_day(now: datetime) -> datetime:
    """Midnight at the start of ``now``'s calendar day."""
    return now.replace(hour=0, minute=0, second=0, microsecond=0)
