"""Client for the remote persistence service."""

from browser_sync.remote.client import RemoteSyncClient

__all__ = ["RemoteSyncClient"]
