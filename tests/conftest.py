"""Shared fakes for the host platform and the remote service."""

import asyncio
from dataclasses import replace
from datetime import datetime

import pytest

from browser_sync.clicks.models import EXTERNAL_LINK, ClickEvent
from browser_sync.exceptions import RemoteSyncError, TabOperationError
from browser_sync.host import ActivityLog, BrowserWindow, Tab, TabHost


class FakeTabHost(TabHost):
    """In-memory tab host recording every mutating call."""

    def __init__(self, tabs=None, window_id=1, fail_urls=()):
        self.tabs = list(tabs or [])
        self.window_id = window_id
        self.fail_urls = set(fail_urls)
        self.calls = []
        self._next_id = 100

    async def query_all(self):
        return list(self.tabs)

    async def current_window(self):
        return BrowserWindow(id=self.window_id, tabs=list(self.tabs))

    async def create(self, url, active, window_id=None):
        self.calls.append(("create", url, active, window_id))
        if url in self.fail_urls:
            raise TabOperationError(f"cannot open {url}")
        tab = Tab(id=self._next_id, url=url, active=active, window_id=window_id)
        self._next_id += 1
        self.tabs.append(tab)
        return tab

    async def close_many(self, tab_ids):
        self.calls.append(("close_many", list(tab_ids)))
        self.tabs = [tab for tab in self.tabs if tab.id not in tab_ids]

    async def focus(self, tab_id):
        self.calls.append(("focus", tab_id))


class FakeActivityLog(ActivityLog):
    def __init__(self, items=None, error=None):
        self.items = list(items or [])
        self.error = error
        self.searches = []

    async def search(self, start_time, end_time, max_results):
        self.searches.append((start_time, end_time, max_results))
        if self.error is not None:
            raise self.error
        return list(self.items)


class FakeRemote:
    """Stands in for RemoteSyncClient.

    Set ``history_gate``/``click_gate`` to an asyncio.Event to hold a
    request open until the test releases it.
    """

    def __init__(self):
        self.history_batches = []
        self.history_attempts = 0
        self.click_batches = []
        self.click_attempts = 0
        self.fail_history = False
        self.fail_clicks = False
        self.history_gate = None
        self.click_gate = None
        self.sessions = []
        self.updated_sessions = []
        self.bookmarks = []

    async def sync_history(self, records):
        self.history_attempts += 1
        if self.history_gate is not None:
            await self.history_gate.wait()
        if self.fail_history:
            raise RemoteSyncError("POST /history/sync failed: HTTP 503")
        self.history_batches.append(list(records))
        return len(records)

    async def sync_link_clicks(self, clicks):
        self.click_attempts += 1
        if self.click_gate is not None:
            await self.click_gate.wait()
        if self.fail_clicks:
            raise RemoteSyncError("POST /link-clicks/sync failed: HTTP 503")
        self.click_batches.append(list(clicks))
        return len(clicks)

    async def create_session(self, snapshot):
        saved = replace(snapshot, id=len(self.sessions) + 1)
        self.sessions.append(saved)
        return saved

    async def update_session(self, snapshot):
        self.updated_sessions.append(snapshot)
        return snapshot

    async def list_sessions(self):
        return list(self.sessions)

    async def create_bookmark(self, url, title, description="", tags=()):
        bookmark = {"url": url, "title": title, "description": description, "tags": list(tags)}
        self.bookmarks.append(bookmark)
        return bookmark


@pytest.fixture
def fixed_now():
    return datetime(2024, 5, 17, 15, 30, 0)


@pytest.fixture
def remote():
    return FakeRemote()


@pytest.fixture
def tab_host():
    return FakeTabHost(
        tabs=[
            Tab(id=1, url="http://localhost:4381/sessions", title="Sessions", active=True, window_id=1),
            Tab(id=2, url="https://news.example.com/", title="News", window_id=1, index=1),
            Tab(id=3, url="https://docs.example.org/guide", title="Guide", window_id=1, index=2),
        ]
    )


@pytest.fixture
def make_tab_host():
    return FakeTabHost


@pytest.fixture
def make_activity_log():
    return FakeActivityLog


@pytest.fixture
def make_click(fixed_now):
    def _make(n: int) -> ClickEvent:
        return ClickEvent(
            destination_url=f"https://example.com/{n}",
            destination_title=f"Page {n}",
            source_url="https://source.example.org/",
            source_title="Source",
            link_text=f"link {n}",
            click_type=EXTERNAL_LINK,
            timestamp=fixed_now,
            domain="source.example.org",
        )

    return _make


async def wait_until(predicate, timeout=1.0):
    """Spin the loop until ``predicate()`` holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0)


@pytest.fixture
def until():
    return wait_until
