"""Converge the live tab set to a stored session snapshot."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from browser_sync.config import DEFAULT_ANCHOR_HOSTS
from browser_sync.host import Tab, TabHost
from browser_sync.sessions.models import RestoreReport, SessionSnapshot, SessionTab
from browser_sync.urls import is_anchor_url, is_restorable_url

logger = logging.getLogger(__name__)


class SessionReconciler:
    """Replace the current window's tabs with a snapshot's tabs.

    The agent's own tab (the anchor) survives the restore and is refocused
    at the end. Tabs are created one at a time, in snapshot order, with a
    short pause between creations so the browser isn't flooded.

    Args:
        tabs: Host tab API.
        anchor_hosts: Host addresses identifying the agent's own tab.
        creation_delay: Seconds to wait between consecutive tab creations.
        sleep: Awaitable sleep used for the pause.
    """

    def __init__(
        self,
        tabs: TabHost,
        anchor_hosts: Iterable[str] = DEFAULT_ANCHOR_HOSTS,
        creation_delay: float = 0.1,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._tabs = tabs
        self.anchor_hosts = tuple(anchor_hosts)
        self.creation_delay = creation_delay
        self._sleep = sleep

    async def restore(self, snapshot: SessionSnapshot) -> RestoreReport:
        window = await self._tabs.current_window()
        live_tabs = list(window.tabs)

        anchor = self.find_anchor(live_tabs)
        to_close = [tab.id for tab in live_tabs if anchor is None or tab.id != anchor.id]
        if to_close:
            await self._tabs.close_many(to_close)

        created = 0
        valid_tabs = self.restorable_tabs(snapshot)
        for position, saved in enumerate(valid_tabs):
            try:
                await self._tabs.create(saved.url, active=position == 0, window_id=window.id)
                created += 1
            except Exception as e:
                logger.error("Failed to create tab for %s: %s", saved.url, e)
            if position < len(valid_tabs) - 1 and self.creation_delay > 0:
                await self._sleep(self.creation_delay)

        if anchor is not None:
            await self._tabs.focus(anchor.id)

        report = RestoreReport(
            tabs_created=created,
            tabs_closed=len(to_close),
            session_name=snapshot.name,
        )
        logger.info(
            "%s (closed %d, skipped %d)",
            report.message,
            report.tabs_closed,
            len(snapshot.tabs) - created,
        )
        return report

    def find_anchor(self, live_tabs: list[Tab]) -> Tab | None:
        """First live tab pointing at the agent's own host, if any."""
        for tab in live_tabs:
            if is_anchor_url(tab.url, self.anchor_hosts):
                return tab
        return None

    @staticmethod
    def restorable_tabs(snapshot: SessionSnapshot) -> list[SessionTab]:
        """Snapshot entries that can be reopened, in snapshot order."""
        return [tab for tab in snapshot.tabs if is_restorable_url(tab.url)]
