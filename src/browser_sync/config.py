"""Agent settings with environment-driven defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from browser_sync.exceptions import ConfigError

DEFAULT_API_BASE = "http://localhost:4381/api"
DEFAULT_ANCHOR_HOSTS = ("localhost:4381", "127.0.0.1:4381")


@dataclass
class AgentSettings:
    """Timing, threshold and endpoint settings for one agent.

    Intervals and delays are in seconds.
    """

    api_base: str = DEFAULT_API_BASE
    request_timeout: float = 10.0
    history_interval: float = 10 * 60
    click_flush_interval: float = 5 * 60
    debounce_delay: float = 3.0
    click_threshold: int = 10
    history_max_results: int = 1000
    tab_creation_delay: float = 0.1
    anchor_hosts: tuple[str, ...] = field(default=DEFAULT_ANCHOR_HOSTS)

    def __post_init__(self) -> None:
        if not self.api_base:
            raise ConfigError("api_base must not be empty")
        if self.click_threshold < 1:
            raise ConfigError(f"click_threshold must be >= 1, got {self.click_threshold}")
        for name in (
            "request_timeout",
            "history_interval",
            "click_flush_interval",
        ):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")
        if self.debounce_delay < 0 or self.tab_creation_delay < 0:
            raise ConfigError("delays must not be negative")

    @classmethod
    def from_env(cls, **overrides) -> AgentSettings:
        """Build settings from BROWSER_SYNC_* environment variables.

        Keyword overrides win over the environment.
        """
        values: dict = {}
        api_base = os.environ.get("BROWSER_SYNC_API_BASE")
        if api_base:
            values["api_base"] = api_base.rstrip("/")

        float_vars = {
            "BROWSER_SYNC_TIMEOUT": "request_timeout",
            "BROWSER_SYNC_HISTORY_INTERVAL": "history_interval",
            "BROWSER_SYNC_CLICK_INTERVAL": "click_flush_interval",
            "BROWSER_SYNC_DEBOUNCE_DELAY": "debounce_delay",
        }
        for env_name, attr in float_vars.items():
            raw = os.environ.get(env_name)
            if raw:
                values[attr] = _parse_number(env_name, raw, float)

        raw_threshold = os.environ.get("BROWSER_SYNC_CLICK_THRESHOLD")
        if raw_threshold:
            values["click_threshold"] = _parse_number(
                "BROWSER_SYNC_CLICK_THRESHOLD", raw_threshold, int
            )

        raw_hosts = os.environ.get("BROWSER_SYNC_ANCHOR_HOSTS")
        if raw_hosts:
            hosts = tuple(h.strip() for h in raw_hosts.split(",") if h.strip())
            if hosts:
                values["anchor_hosts"] = hosts

        values.update(overrides)
        return cls(**values)


def _parse_number(name: str, raw: str, kind):
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
