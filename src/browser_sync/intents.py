"""Inbound intents from UI collaborators (popup, page scripts, menus)."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from browser_sync.clicks.buffer import ClickBuffer
from browser_sync.clicks.parser import parse_click
from browser_sync.coordinator import SyncCoordinator
from browser_sync.exceptions import (
    BrowserSyncError,
    InvalidIntentError,
    UnknownIntentError,
)
from browser_sync.host import TabHost
from browser_sync.remote.client import RemoteSyncClient
from browser_sync.sessions.models import SessionSnapshot
from browser_sync.sessions.reconciler import SessionReconciler
from browser_sync.sessions.snapshot import build_snapshot, latest_snapshot, update_snapshot

logger = logging.getLogger(__name__)


class IntentHandler:
    """Answer ``{action: ..., ...payload}`` messages with ``{success, result|error}``.

    Errors from this package become failure responses; anything else is a
    bug and propagates.
    """

    def __init__(
        self,
        tabs: TabHost,
        client: RemoteSyncClient,
        reconciler: SessionReconciler,
        click_buffer: ClickBuffer,
        coordinator: SyncCoordinator,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._tabs = tabs
        self._client = client
        self._reconciler = reconciler
        self._click_buffer = click_buffer
        self._coordinator = coordinator
        self._clock = clock
        self._handlers: dict[str, Callable[[dict], Awaitable[dict]]] = {
            "ping": self._ping,
            "saveSession": self._save_session,
            "updateLatestSession": self._update_latest_session,
            "restoreSession": self._restore_session,
            "trackLinkClicks": self._track_link_clicks,
            "triggerSync": self._trigger_sync,
            "saveBookmark": self._save_bookmark,
        }

    async def handle(self, message: dict) -> dict:
        action = message.get("action") if isinstance(message, dict) else None
        try:
            handler = self._handlers.get(action) if isinstance(action, str) else None
            if handler is None:
                raise UnknownIntentError(f"Unknown action: {action!r}")
            result = await handler(message)
        except BrowserSyncError as e:
            logger.warning("Intent %s failed: %s", action, e)
            return {"success": False, "error": str(e)}
        return {"success": True, "result": result}

    async def _ping(self, message: dict) -> dict:
        return {"pong": True}

    async def _save_session(self, message: dict) -> dict:
        tabs = await self._tabs.query_all()
        snapshot = build_snapshot(tabs, name=_text(message, "sessionName") or None, now=self._clock())
        saved = await self._client.create_session(snapshot)
        logger.info('Session "%s" saved: %d tabs', snapshot.name, len(snapshot.tabs))
        return {
            "message": f'Session "{snapshot.name}" saved with {len(snapshot.tabs)} tabs',
            "session": saved.to_dict(),
        }

    async def _update_latest_session(self, message: dict) -> dict:
        latest = latest_snapshot(await self._client.list_sessions())
        if latest is None:
            raise InvalidIntentError("No session to update")
        tabs = await self._tabs.query_all()
        updated = update_snapshot(latest, tabs, now=self._clock())
        saved = await self._client.update_session(updated)
        return {
            "message": f'Updated "{updated.name}" with {len(updated.tabs)} tabs',
            "session": saved.to_dict(),
        }

    async def _restore_session(self, message: dict) -> dict:
        raw = message.get("session")
        if not raw:
            raise InvalidIntentError("restoreSession needs a session")
        snapshot = SessionSnapshot.from_dict(raw)
        report = await self._reconciler.restore(snapshot)
        return report.to_dict()

    async def _track_link_clicks(self, message: dict) -> dict:
        raw_clicks = message.get("clicks") or []
        if not isinstance(raw_clicks, list):
            raise InvalidIntentError("clicks must be a list")
        now = self._clock()
        events = [
            event
            for event in (parse_click(raw, now=now) for raw in raw_clicks if isinstance(raw, dict))
            if event is not None
        ]
        pending = await self._click_buffer.enqueue(events)
        return {"buffered": len(events), "pending": pending}

    async def _trigger_sync(self, message: dict) -> dict:
        synced = await self._coordinator.sync_history()
        return {"synced_count": synced or 0, "skipped": synced is None}

    async def _save_bookmark(self, message: dict) -> dict:
        url = _text(message, "url")
        title = _text(message, "title")
        if not url or not title:
            raise InvalidIntentError("Please fill in title and URL")

        tags = message.get("tags") or []
        if isinstance(tags, str):
            tags = [tag.strip() for tag in tags.split(",")]
        if not isinstance(tags, list):
            tags = []
        tags = [str(tag).strip() for tag in tags if str(tag).strip()]

        return await self._client.create_bookmark(
            url=url,
            title=title,
            description=_text(message, "description"),
            tags=tags,
        )


def _text(message: dict, key: str) -> str:
    value = message.get(key)
    return value.strip() if isinstance(value, str) else ""
