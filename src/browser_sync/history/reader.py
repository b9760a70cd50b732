"""Read-only activity log backed by Chrome's History database."""

from __future__ import annotations

import asyncio
import logging
import shutil
import sqlite3
import tempfile
from datetime import datetime
from pathlib import Path

from browser_sync.exceptions import HistoryReadError
from browser_sync.host import ActivityLog

logger = logging.getLogger(__name__)

CHROME_BASE_PATH = Path.home() / "Library" / "Application Support" / "Google" / "Chrome"
DEFAULT_HISTORY_PATH = CHROME_BASE_PATH / "Default" / "History"

# Seconds from 1601-01-01 to 1970-01-01 (Chrome epoch).
CHROME_EPOCH_OFFSET = 11644473600


class ChromeHistoryLog(ActivityLog):
    """Answer activity log searches from a Chrome profile's History DB.

    Args:
        history_path: Path to the profile's ``History`` file.
    """

    def __init__(self, history_path: Path | str | None = None) -> None:
        self.history_path = Path(history_path) if history_path else DEFAULT_HISTORY_PATH

    async def search(
        self,
        start_time: datetime,
        end_time: datetime,
        max_results: int,
    ) -> list[dict]:
        return await asyncio.to_thread(
            self.search_sync, start_time, end_time, max_results
        )

    def search_sync(
        self,
        start_time: datetime,
        end_time: datetime,
        max_results: int,
    ) -> list[dict]:
        """Blocking variant of :meth:`search`."""
        if not self.history_path.exists():
            logger.info("Chrome history DB not found at %s", self.history_path)
            return []

        db_copy = self._copy_chrome_db(self.history_path)
        conn: sqlite3.Connection | None = None
        try:
            conn = sqlite3.connect(str(db_copy))
            conn.row_factory = sqlite3.Row
            rows = conn.execute(
                """
                SELECT
                    COALESCE(url, '') AS url,
                    COALESCE(title, '') AS title,
                    COALESCE(visit_count, 1) AS visit_count,
                    last_visit_time
                FROM urls
                WHERE last_visit_time >= ? AND last_visit_time <= ?
                ORDER BY last_visit_time DESC
                LIMIT ?
                """,
                (
                    self._to_chrome_ts(start_time),
                    self._to_chrome_ts(end_time),
                    max(1, max_results),
                ),
            ).fetchall()
        except sqlite3.Error as e:
            raise HistoryReadError(f"Failed querying Chrome history: {e}") from e
        finally:
            if conn is not None:
                conn.close()
            db_copy.unlink(missing_ok=True)

        items: list[dict] = []
        for row in rows:
            visited = self._chrome_ts_to_datetime(row["last_visit_time"])
            if visited is None:
                continue
            items.append({
                "url": row["url"],
                "title": row["title"],
                "visit_count": int(row["visit_count"] or 1),
                "last_visit_time": visited,
            })
        return items

    @staticmethod
    def _copy_chrome_db(path: Path) -> Path:
        """Chrome locks History DB; query a temporary copy instead."""
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(prefix="chrome-history-", suffix=".db", delete=False) as tmp:
                tmp_path = Path(tmp.name)
            shutil.copy2(path, tmp_path)
            return tmp_path
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise HistoryReadError(f"Failed to copy Chrome history DB {path}: {e}") from e

    @staticmethod
    def _to_chrome_ts(value: datetime) -> int:
        return int((value.timestamp() + CHROME_EPOCH_OFFSET) * 1_000_000)

    @staticmethod
    def _chrome_ts_to_datetime(ts: int | None) -> datetime | None:
        if not ts:
            return None
        try:
            unix_ts = (int(ts) / 1_000_000) - CHROME_EPOCH_OFFSET
            return datetime.fromtimestamp(unix_ts)
        except (ValueError, OSError, OverflowError):
            return None
