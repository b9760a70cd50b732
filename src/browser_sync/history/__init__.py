"""Browser history collection for the daily history sync."""

from browser_sync.history.models import ActivityRecord
from browser_sync.history.parser import parse_history_item
from browser_sync.history.reader import ChromeHistoryLog

__all__ = [
    "ActivityRecord",
    "parse_history_item",
    "ChromeHistoryLog",
]
