"""Async HTTP client for the remote persistence service."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import httpx

from browser_sync.clicks.models import ClickEvent
from browser_sync.config import DEFAULT_API_BASE
from browser_sync.exceptions import (
    InvalidSessionError,
    RemoteSyncError,
    RemoteTimeoutError,
)
from browser_sync.history.models import ActivityRecord
from browser_sync.sessions.models import SessionSnapshot

logger = logging.getLogger(__name__)


class RemoteSyncClient:
    """Thin wrapper over the remote bookmark, session, history and click collections.

    Every call is a single request. Nothing is retried here; callers decide
    when to try again.

    Args:
        base_url: API root, e.g. ``http://localhost:4381/api``.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def create_bookmark(
        self,
        url: str,
        title: str,
        description: str = "",
        tags: Iterable[str] = (),
    ) -> dict:
        """Store one bookmark."""
        body = {
            "url": url,
            "title": title,
            "description": description,
            "tags": list(tags),
        }
        data = await self._request("POST", "/bookmarks", body)
        return data if isinstance(data, dict) else body

    async def create_session(self, snapshot: SessionSnapshot) -> SessionSnapshot:
        """Store a new snapshot; returns it as the remote saw it."""
        data = await self._request("POST", "/sessions", snapshot.to_dict())
        return self._session_from(data, snapshot)

    async def update_session(self, snapshot: SessionSnapshot) -> SessionSnapshot:
        """Replace a stored snapshot identified by ``snapshot.id``."""
        if snapshot.id is None:
            raise InvalidSessionError("Cannot update a session without an id")
        data = await self._request("PUT", f"/sessions/{snapshot.id}", snapshot.to_dict())
        return self._session_from(data, snapshot)

    async def list_sessions(self) -> list[SessionSnapshot]:
        data = await self._request("GET", "/sessions")
        if not data:
            return []
        if not isinstance(data, list):
            raise RemoteSyncError("Unexpected sessions payload")
        return [SessionSnapshot.from_dict(item) for item in data]

    async def sync_history(self, records: list[ActivityRecord]) -> int:
        """Push one batch of history records; returns the synced count."""
        data = await self._request(
            "POST",
            "/history/sync",
            {"history": [record.to_dict() for record in records]},
        )
        return self._synced_count(data, len(records))

    async def sync_link_clicks(self, clicks: list[ClickEvent]) -> int:
        """Push one batch of link clicks; returns the synced count."""
        data = await self._request(
            "POST",
            "/link-clicks/sync",
            {"clicks": [click.to_dict() for click in clicks]},
        )
        return self._synced_count(data, len(clicks))

    async def _request(self, method: str, path: str, body: dict | None = None) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    path,
                    json=body,
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                if not response.content:
                    return None
                return response.json()
        except httpx.TimeoutException as e:
            raise RemoteTimeoutError(f"{method} {path} timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise RemoteSyncError(
                f"{method} {path} failed: HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise RemoteSyncError(f"{method} {path} failed: {e}") from e

    @staticmethod
    def _session_from(data: Any, fallback: SessionSnapshot) -> SessionSnapshot:
        if isinstance(data, dict):
            return SessionSnapshot.from_dict(data)
        return fallback

    @staticmethod
    def _synced_count(data: Any, default: int) -> int:
        if isinstance(data, dict):
            try:
                return int(data.get("synced_count", default))
            except (TypeError, ValueError):
                logger.warning("Non-numeric synced_count in response: %r", data.get("synced_count"))
        return default
