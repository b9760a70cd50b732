"""Build and update session snapshots from the live tab set."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from browser_sync.host import Tab
from browser_sync.sessions.models import SessionSnapshot, SessionTab


def build_snapshot(
    tabs: list[Tab],
    name: str | None = None,
    now: datetime | None = None,
) -> SessionSnapshot:
    """Capture every live tab, in query order, as a new snapshot."""
    now = now or datetime.now()
    session_tabs = _to_session_tabs(tabs)
    return SessionSnapshot(
        name=(name or "").strip() or f"Session {now:%Y-%m-%d %H:%M:%S}",
        description=f"{len(session_tabs)} tabs saved",
        tabs=session_tabs,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


def update_snapshot(
    snapshot: SessionSnapshot,
    tabs: list[Tab],
    now: datetime | None = None,
) -> SessionSnapshot:
    """Return a copy of ``snapshot`` whose tab list is the live tab set."""
    session_tabs = _to_session_tabs(tabs)
    return replace(
        snapshot,
        description=f"{len(session_tabs)} tabs updated",
        tabs=session_tabs,
        updated_at=now or datetime.now(),
    )


def latest_snapshot(snapshots: list[SessionSnapshot]) -> SessionSnapshot | None:
    """Most recently created snapshot, or None."""
    if not snapshots:
        return None
    return max(snapshots, key=lambda s: s.created_at or datetime.min)


def _to_session_tabs(tabs: list[Tab]) -> list[SessionTab]:
    return [
        SessionTab(url=tab.url or "", title=tab.title or "", active=tab.active, index=position)
        for position, tab in enumerate(tabs)
    ]
