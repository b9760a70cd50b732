"""URL predicates shared by history sync and session restore."""

from __future__ import annotations

from collections.abc import Iterable

# Host-internal and extension-internal pages can't be synced or reopened.
RESERVED_PREFIXES = (
    "chrome://",
    "chrome-extension://",
    "about:",
    "moz-extension://",
    "edge://",
)


def is_reserved_url(url: str | None) -> bool:
    """True for URLs that belong to the browser or an extension."""
    value = (url or "").strip().lower()
    return value.startswith(RESERVED_PREFIXES)


def is_trackable_url(url: str | None) -> bool:
    """True when a navigation to ``url`` should count as user activity."""
    return bool((url or "").strip()) and not is_reserved_url(url)


def is_restorable_url(url: str | None) -> bool:
    """True when a saved tab can be recreated as-is."""
    return is_trackable_url(url)


def is_anchor_url(url: str | None, anchor_hosts: Iterable[str]) -> bool:
    """True when ``url`` points at one of the agent's own host addresses."""
    if not url:
        return False
    return any(host and host in url for host in anchor_hosts)
