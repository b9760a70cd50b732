"""Unified exception hierarchy for browser-sync."""


class BrowserSyncError(Exception):
    """Base exception for all browser-sync errors."""


# Configuration
class ConfigError(BrowserSyncError):
    """Invalid agent configuration."""


# Remote service
class RemoteSyncError(BrowserSyncError):
    """A request to the remote persistence service failed."""


class RemoteTimeoutError(RemoteSyncError):
    """The remote persistence service did not answer in time."""


# Host platform
class HostError(BrowserSyncError):
    """Base exception for host platform operations."""


class HistoryReadError(HostError):
    """Failed to read the host activity log."""


class TabOperationError(HostError):
    """A tab query, create, close or focus call failed."""


# Sessions
class SessionError(BrowserSyncError):
    """Base exception for session snapshot operations."""


class InvalidSessionError(SessionError):
    """A session snapshot payload is missing required fields."""


# Intents
class IntentError(BrowserSyncError):
    """Base exception for inbound intent handling."""


class InvalidIntentError(IntentError):
    """An intent payload was rejected before any network call."""


class UnknownIntentError(IntentError):
    """An intent named an action nobody handles."""
