"""Tests for the remote sync client."""

import json
from datetime import datetime

import httpx
import pytest

from browser_sync.exceptions import InvalidSessionError, RemoteSyncError, RemoteTimeoutError
from browser_sync.history.models import ActivityRecord
from browser_sync.remote.client import RemoteSyncClient
from browser_sync.sessions.models import SessionSnapshot, SessionTab


def _client(handler):
    return RemoteSyncClient(
        base_url="http://localhost:4381/api",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_sync_history_posts_batch():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"synced_count": 1})

    record = ActivityRecord("https://example.com/", "Example", 2, datetime(2024, 5, 17, 9, 0))
    count = await _client(handler).sync_history([record])

    assert count == 1
    assert seen["method"] == "POST"
    assert seen["path"] == "/api/history/sync"
    assert seen["body"]["history"][0]["url"] == "https://example.com/"
    assert seen["body"]["history"][0]["visit_count"] == 2


@pytest.mark.asyncio
async def test_sync_link_clicks_uses_wire_keys(make_click):
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"synced_count": 2, "total_count": 40})

    count = await _client(handler).sync_link_clicks([make_click(0), make_click(1)])

    assert count == 2
    assert seen["path"] == "/api/link-clicks/sync"
    assert seen["body"]["clicks"][1]["destinationUrl"] == "https://example.com/1"


@pytest.mark.asyncio
async def test_missing_synced_count_falls_back_to_batch_size(make_click):
    client = _client(lambda request: httpx.Response(200, json={}))
    assert await client.sync_link_clicks([make_click(0)]) == 1


@pytest.mark.asyncio
async def test_non_success_status_raises(make_click):
    client = _client(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(RemoteSyncError, match="HTTP 500"):
        await client.sync_link_clicks([make_click(0)])


@pytest.mark.asyncio
async def test_connection_error_raises(make_click):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteSyncError, match="failed"):
        await _client(handler).sync_link_clicks([make_click(0)])


@pytest.mark.asyncio
async def test_timeout_raises_timeout_error(make_click):
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(RemoteTimeoutError):
        await _client(handler).sync_link_clicks([make_click(0)])


@pytest.mark.asyncio
async def test_invalid_json_raises():
    client = _client(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(RemoteSyncError):
        await client.list_sessions()


@pytest.mark.asyncio
async def test_create_session_returns_stored_snapshot():
    def handler(request):
        body = json.loads(request.content)
        body["id"] = 31
        return httpx.Response(201, json=body)

    snapshot = SessionSnapshot(name="Work", tabs=[SessionTab(url="https://a.example.com/")])
    saved = await _client(handler).create_session(snapshot)

    assert saved.id == 31
    assert saved.tabs[0].url == "https://a.example.com/"


@pytest.mark.asyncio
async def test_update_session_puts_by_id():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        return httpx.Response(200, json=json.loads(request.content))

    saved = await _client(handler).update_session(SessionSnapshot(name="Work", id=7))

    assert seen == {"method": "PUT", "path": "/api/sessions/7"}
    assert saved.id == 7


@pytest.mark.asyncio
async def test_update_session_requires_id():
    client = _client(lambda request: httpx.Response(200, json={}))
    with pytest.raises(InvalidSessionError):
        await client.update_session(SessionSnapshot(name="Work"))


@pytest.mark.asyncio
async def test_list_sessions():
    payload = [
        {"id": 1, "name": "A", "tabs": [], "created_at": "2024-05-01T10:00:00Z"},
        {"id": 2, "name": "B", "tabs": [{"url": "https://b.example.com/"}]},
    ]
    sessions = await _client(lambda request: httpx.Response(200, json=payload)).list_sessions()
    assert [s.name for s in sessions] == ["A", "B"]


@pytest.mark.asyncio
async def test_list_sessions_null_body():
    sessions = await _client(lambda request: httpx.Response(200, json=None)).list_sessions()
    assert sessions == []


@pytest.mark.asyncio
async def test_create_bookmark():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": 3, **seen["body"]})

    result = await _client(handler).create_bookmark("https://a.example.com/", "A", tags=["x"])
    assert seen["path"] == "/api/bookmarks"
    assert seen["body"]["tags"] == ["x"]
    assert result["id"] == 3
