"""Wire the buffer, coordinator, reconciler and intent channel together."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from browser_sync.clicks.buffer import ClickBuffer
from browser_sync.config import AgentSettings
from browser_sync.coordinator import SyncCoordinator
from browser_sync.host import ActivityLog, TabHost
from browser_sync.intents import IntentHandler
from browser_sync.remote.client import RemoteSyncClient
from browser_sync.sessions.reconciler import SessionReconciler

logger = logging.getLogger(__name__)


class BrowserSyncAgent:
    """One agent per browser process.

    Host lifecycle signals go to the ``on_*`` methods; UI intents go to
    :meth:`handle`.

    Usage:
        async with BrowserSyncAgent(tabs, history) as agent:
            await agent.handle({"action": "triggerSync"})
    """

    def __init__(
        self,
        tabs: TabHost,
        activity_log: ActivityLog,
        settings: AgentSettings | None = None,
        client: RemoteSyncClient | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings or AgentSettings()
        self.client = client or RemoteSyncClient(
            base_url=self.settings.api_base,
            timeout=self.settings.request_timeout,
        )
        self.click_buffer = ClickBuffer(self.client, threshold=self.settings.click_threshold)
        self.coordinator = SyncCoordinator(
            activity_log,
            self.client,
            self.click_buffer,
            history_interval=self.settings.history_interval,
            click_flush_interval=self.settings.click_flush_interval,
            debounce_delay=self.settings.debounce_delay,
            max_results=self.settings.history_max_results,
            clock=clock,
        )
        self.reconciler = SessionReconciler(
            tabs,
            anchor_hosts=self.settings.anchor_hosts,
            creation_delay=self.settings.tab_creation_delay,
        )
        self.intents = IntentHandler(
            tabs,
            self.client,
            self.reconciler,
            self.click_buffer,
            self.coordinator,
            clock=clock,
        )

    async def start(self) -> None:
        """Process startup: sync history, flush clicks, start timers."""
        logger.info("Starting browser sync agent against %s", self.settings.api_base)
        await self.coordinator.start()

    async def stop(self) -> None:
        await self.coordinator.stop()
        if len(self.click_buffer):
            logger.warning("Stopping with %d unsent clicks", len(self.click_buffer))

    async def handle(self, message: dict) -> dict:
        return await self.intents.handle(message)

    def on_tab_updated(self, tab_id: int, status: str | None, url: str | None) -> bool:
        return self.coordinator.on_tab_updated(tab_id, status, url)

    def on_navigation_completed(self, frame_id: int, url: str | None) -> bool:
        return self.coordinator.on_navigation_completed(frame_id, url)

    async def on_idle_state_changed(self, state: str) -> int | None:
        return await self.coordinator.on_idle_state_changed(state)

    async def __aenter__(self) -> BrowserSyncAgent:
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.stop()
