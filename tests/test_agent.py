"""Tests for agent wiring."""

import pytest

from browser_sync.agent import BrowserSyncAgent
from browser_sync.config import AgentSettings


@pytest.mark.asyncio
async def test_agent_lifecycle(tab_host, remote, make_activity_log, fixed_now):
    log = make_activity_log([{"url": "https://example.com/", "last_visit_time": fixed_now}])
    settings = AgentSettings(click_threshold=3, debounce_delay=0.01)

    async with BrowserSyncAgent(tab_host, log, settings=settings, client=remote, clock=lambda: fixed_now) as agent:
        assert remote.history_attempts == 1
        assert agent.coordinator.running
        assert agent.click_buffer.threshold == 3
        assert agent.reconciler.anchor_hosts == settings.anchor_hosts

        response = await agent.handle({"action": "ping"})
        assert response["success"] is True
        assert agent.on_tab_updated(1, "complete", "https://example.com/next")
        assert not agent.on_navigation_completed(2, "https://example.com/frame")
        assert await agent.on_idle_state_changed("idle") is None

    assert not agent.coordinator.running


def test_agent_builds_client_from_settings(tab_host, make_activity_log):
    settings = AgentSettings(api_base="http://sync.internal:9000/api", request_timeout=4)
    agent = BrowserSyncAgent(tab_host, make_activity_log(), settings=settings)
    assert agent.client.base_url == "http://sync.internal:9000/api"
    assert agent.client.timeout == 4
