"""Session snapshots: save the open tab set and restore it later."""

from browser_sync.sessions.models import RestoreReport, SessionSnapshot, SessionTab
from browser_sync.sessions.reconciler import SessionReconciler
from browser_sync.sessions.snapshot import build_snapshot, latest_snapshot, update_snapshot

__all__ = [
    "RestoreReport",
    "SessionSnapshot",
    "SessionTab",
    "SessionReconciler",
    "build_snapshot",
    "latest_snapshot",
    "update_snapshot",
]
