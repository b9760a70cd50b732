"""Decide when history and buffered clicks are pushed to the remote service."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from browser_sync.clicks.buffer import ClickBuffer
from browser_sync.exceptions import RemoteSyncError
from browser_sync.history.models import ActivityRecord
from browser_sync.history.parser import parse_history_item
from browser_sync.host import ActivityLog
from browser_sync.remote.client import RemoteSyncClient
from browser_sync.timeutil import normalize_timestamp, start_of_day
from browser_sync.urls import is_trackable_url

logger = logging.getLogger(__name__)

IDLE_ACTIVE = "active"
TAB_COMPLETE = "complete"
MAIN_FRAME = 0


class SyncCoordinator:
    """Owns the sync mutex and every timer that triggers a sync.

    History sync triggers: startup, a periodic timer, the host going from
    idle to active, a debounced tab-update/navigation signal, and explicit
    calls to :meth:`sync_history`. At most one history sync runs at a time;
    a trigger that arrives while one is running is dropped, not queued.

    The click buffer is flushed at startup and on its own periodic timer.

    Args:
        activity_log: Host history to read today's entries from.
        client: Remote client used for history delivery.
        click_buffer: Buffer flushed by the click timers, if any.
        history_interval: Seconds between periodic history syncs.
        click_flush_interval: Seconds between periodic click flushes.
        debounce_delay: Quiet period after the last navigation before syncing.
        max_results: Cap on history items requested per sync.
        clock: Returns "now"; swapped out in tests.
    """

    def __init__(
        self,
        activity_log: ActivityLog,
        client: RemoteSyncClient,
        click_buffer: ClickBuffer | None = None,
        *,
        history_interval: float = 10 * 60,
        click_flush_interval: float = 5 * 60,
        debounce_delay: float = 3.0,
        max_results: int = 1000,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._activity_log = activity_log
        self._client = client
        self._click_buffer = click_buffer
        self.history_interval = history_interval
        self.click_flush_interval = click_flush_interval
        self.debounce_delay = debounce_delay
        self.max_results = max_results
        self._clock = clock

        self._is_syncing = False
        self._debounce_handle: asyncio.TimerHandle | None = None
        self._periodic_tasks: list[asyncio.Task] = []
        self._background: set[asyncio.Task] = set()

    @property
    def is_syncing(self) -> bool:
        return self._is_syncing

    @property
    def debounce_pending(self) -> bool:
        return self._debounce_handle is not None

    @property
    def running(self) -> bool:
        return bool(self._periodic_tasks)

    # ---- Lifecycle ----

    async def start(self) -> None:
        """Run the startup sync and flush, then start the periodic timers."""
        if self._periodic_tasks:
            logger.warning("SyncCoordinator.start() called but timers are already running")
            return
        self._periodic_tasks = [
            asyncio.create_task(
                self._run_every(self.history_interval, self.sync_history),
                name="history-sync-timer",
            ),
            asyncio.create_task(
                self._run_every(self.click_flush_interval, self.flush_clicks),
                name="click-flush-timer",
            ),
        ]
        await self.sync_history()
        await self.flush_clicks()

    async def stop(self) -> None:
        """Cancel the timers, any pending debounce and in-flight triggered syncs."""
        self.cancel_debounce()
        tasks = self._periodic_tasks + list(self._background)
        self._periodic_tasks = []
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._background.clear()

    # ---- History sync ----

    async def collect_history(self) -> list[ActivityRecord]:
        """Today's history entries, from local midnight up to now."""
        now = normalize_timestamp(self._clock()) or datetime.now()
        since = start_of_day(now)
        raw_items = await self._activity_log.search(since, now, self.max_results)

        records: list[ActivityRecord] = []
        for raw in raw_items:
            record = parse_history_item(raw)
            # The host's time filter may be approximate; re-check the window.
            if record is None or record.last_visit_time < since:
                continue
            records.append(record)
        return records

    async def sync_history(self) -> int | None:
        """Push today's history in one request.

        Returns the synced count (0 when there was nothing to send or the
        attempt failed), or None when another sync was already running.
        """
        if self._is_syncing:
            logger.debug("History sync already in flight, trigger dropped")
            return None

        self._is_syncing = True
        try:
            records = await self.collect_history()
            if not records:
                logger.debug("No history to sync for today")
                return 0
            synced = await self._client.sync_history(records)
            logger.info("History synced: %d entries", synced)
            return synced
        except Exception as e:
            logger.warning("History sync failed: %s", e)
            return 0
        finally:
            self._is_syncing = False

    # ---- Click buffer ----

    async def flush_clicks(self) -> int:
        """Flush buffered clicks if there are any; failures stay buffered."""
        if self._click_buffer is None or not len(self._click_buffer):
            return 0
        try:
            return await self._click_buffer.flush()
        except RemoteSyncError as e:
            logger.warning(
                "Click flush failed, %d clicks kept for retry: %s",
                len(self._click_buffer),
                e,
            )
            return 0

    # ---- Debounce ----

    def schedule_debounced_sync(self) -> None:
        """(Re)start the quiet-period timer; only the last one fires."""
        loop = asyncio.get_running_loop()
        self.cancel_debounce()
        self._debounce_handle = loop.call_later(self.debounce_delay, self._fire_debounced)

    def cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

    def _fire_debounced(self) -> None:
        self._debounce_handle = None
        self._spawn(self.sync_history(), name="debounced-history-sync")

    # ---- Host lifecycle signals ----

    def on_tab_updated(self, tab_id: int, status: str | None, url: str | None) -> bool:
        """Debounce a sync when a tab finishes loading a user page."""
        if status != TAB_COMPLETE or not is_trackable_url(url):
            return False
        logger.debug("Tab %s loaded %s, debouncing history sync", tab_id, url)
        self.schedule_debounced_sync()
        return True

    def on_navigation_completed(self, frame_id: int, url: str | None) -> bool:
        """Debounce a sync when the main frame finishes a navigation."""
        if frame_id != MAIN_FRAME or not is_trackable_url(url):
            return False
        self.schedule_debounced_sync()
        return True

    async def on_idle_state_changed(self, state: str) -> int | None:
        """Sync right away when the user comes back."""
        if state != IDLE_ACTIVE:
            return None
        return await self.sync_history()

    # ---- Internals ----

    async def _run_every(self, interval: float, action: Callable[[], Awaitable]) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await action()
            except Exception as e:
                logger.error("Periodic %s failed: %s", getattr(action, "__name__", action), e)

    def _spawn(self, coro, name: str) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task
