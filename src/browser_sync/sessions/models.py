"""Data models for the sessions module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from browser_sync.exceptions import InvalidSessionError
from browser_sync.timeutil import normalize_timestamp, to_utc_iso


@dataclass(frozen=True)
class SessionTab:
    """One saved tab inside a snapshot."""

    url: str
    title: str = ""
    active: bool = False
    index: int = 0

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "title": self.title,
            "active": self.active,
            "index": self.index,
        }

    @classmethod
    def from_dict(cls, raw: dict, position: int = 0) -> SessionTab:
        url = raw.get("url") or ""
        title = raw.get("title") or ""
        if not isinstance(url, str) or not isinstance(title, str):
            raise InvalidSessionError(f"Tab {position} has a non-text url or title")
        index = raw.get("index")
        return cls(
            url=url.strip(),
            title=title,
            active=bool(raw.get("active")),
            index=int(index) if index is not None else position,
        )


@dataclass
class SessionSnapshot:
    """A named, timestamped tab set stored by the remote service."""

    name: str
    description: str = ""
    tabs: list[SessionTab] = field(default_factory=list)
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    id: int | None = None

    def to_dict(self) -> dict:
        data: dict = {
            "name": self.name,
            "description": self.description,
            "tabs": [tab.to_dict() for tab in self.tabs],
            "is_active": self.is_active,
        }
        if self.id is not None:
            data["id"] = self.id
        if self.created_at is not None:
            data["created_at"] = to_utc_iso(self.created_at)
        if self.updated_at is not None:
            data["updated_at"] = to_utc_iso(self.updated_at)
        return data

    @classmethod
    def from_dict(cls, raw: dict) -> SessionSnapshot:
        """Build a snapshot from a remote or intent payload."""
        if not isinstance(raw, dict):
            raise InvalidSessionError("Session payload must be an object")
        tabs = raw.get("tabs")
        if tabs is None:
            tabs = []
        if not isinstance(tabs, list):
            raise InvalidSessionError("Session tabs must be a list")

        raw_id = raw.get("id")
        try:
            session_id = int(raw_id) if raw_id is not None else None
            parsed_tabs = [
                SessionTab.from_dict(tab, position)
                for position, tab in enumerate(tabs)
                if isinstance(tab, dict)
            ]
        except (TypeError, ValueError) as e:
            raise InvalidSessionError(f"Malformed session payload: {e}") from e

        return cls(
            name=raw.get("name") or "",
            description=raw.get("description") or "",
            tabs=parsed_tabs,
            is_active=bool(raw.get("is_active", True)),
            created_at=normalize_timestamp(raw.get("created_at")),
            updated_at=normalize_timestamp(raw.get("updated_at")),
            id=session_id,
        )


@dataclass(frozen=True)
class RestoreReport:
    """Outcome of one session restore."""

    tabs_created: int
    tabs_closed: int
    session_name: str = ""

    @property
    def message(self) -> str:
        return f'Restored session "{self.session_name}" with {self.tabs_created} tabs'

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "tabsCreated": self.tabs_created,
            "tabsClosed": self.tabs_closed,
        }
