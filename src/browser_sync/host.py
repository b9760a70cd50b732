"""Abstract host platform capability surface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Tab:
    """One open browser tab as reported by the host."""

    id: int
    url: str
    title: str = ""
    active: bool = False
    window_id: int | None = None
    index: int = 0


@dataclass(frozen=True)
class BrowserWindow:
    """A host window together with its tabs."""

    id: int
    tabs: list[Tab] = field(default_factory=list)


class ActivityLog(ABC):
    """Append-only log of visited pages (the browser history)."""

    @abstractmethod
    async def search(
        self,
        start_time: datetime,
        end_time: datetime,
        max_results: int,
    ) -> list[dict]:
        """Return raw items with url, title, visit_count, last_visit_time."""
        ...


class TabHost(ABC):
    """Query and mutate the host's open tabs."""

    @abstractmethod
    async def query_all(self) -> list[Tab]:
        """All open tabs across every window."""
        ...

    @abstractmethod
    async def current_window(self) -> BrowserWindow:
        """The focused window, populated with its tabs."""
        ...

    @abstractmethod
    async def create(self, url: str, active: bool, window_id: int | None = None) -> Tab:
        """Open a new tab."""
        ...

    @abstractmethod
    async def close_many(self, tab_ids: list[int]) -> None:
        """Close several tabs in one call."""
        ...

    @abstractmethod
    async def focus(self, tab_id: int) -> None:
        """Make a tab the active one in its window."""
        ...
