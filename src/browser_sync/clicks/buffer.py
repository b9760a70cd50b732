"""In-memory buffer of link clicks awaiting delivery."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from browser_sync.clicks.models import ClickEvent
from browser_sync.exceptions import RemoteSyncError

if TYPE_CHECKING:
    from browser_sync.remote.client import RemoteSyncClient

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 10


class ClickBuffer:
    """FIFO queue of clicks, flushed to the remote link-clicks collection.

    Delivery is at-least-once: a batch that fails is put back at the front
    of the queue, ahead of anything enqueued while it was in flight, so the
    next flush retries it first. Nothing is persisted; buffered clicks are
    lost if the process dies.

    Args:
        client: Remote client used to deliver batches.
        threshold: Buffer length that triggers an immediate flush.
    """

    def __init__(self, client: RemoteSyncClient, threshold: int = DEFAULT_THRESHOLD):
        self._client = client
        self.threshold = max(1, threshold)
        self._events: list[ClickEvent] = []
        self._flushing = False

    def __len__(self) -> int:
        return len(self._events)

    @property
    def pending(self) -> list[ClickEvent]:
        """Snapshot of the buffered clicks in delivery order."""
        return list(self._events)

    @property
    def is_flushing(self) -> bool:
        return self._flushing

    async def enqueue(self, events: Iterable[ClickEvent]) -> int:
        """Append clicks; flush right away once the threshold is reached.

        Returns the number of clicks still buffered afterwards.
        """
        self._events.extend(events)
        if len(self._events) >= self.threshold:
            try:
                await self.flush()
            except RemoteSyncError as e:
                logger.warning("Threshold flush failed, keeping %d clicks: %s", len(self._events), e)
        return len(self._events)

    async def flush(self) -> int:
        """Deliver everything buffered as one batch.

        Returns the count reported by the remote, or 0 when there was nothing
        to send or another flush is already in flight. Raises
        RemoteSyncError after requeueing the batch.
        """
        if not self._events:
            return 0
        if self._flushing:
            logger.debug("Flush already in flight, skipping")
            return 0

        # Take and clear with no await in between so concurrent enqueues
        # land in the fresh list.
        batch, self._events = self._events, []
        self._flushing = True
        delivered = False
        try:
            synced = await self._client.sync_link_clicks(batch)
            delivered = True
        finally:
            self._flushing = False
            if not delivered:
                self._events = batch + self._events

        logger.info("Link clicks synced: %d of %d", synced, len(batch))
        return synced
