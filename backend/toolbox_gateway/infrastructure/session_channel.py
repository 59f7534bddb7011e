"""Session Channel: push side of one open SSE stream.

Invariants:
    - send() never blocks and never raises; after close() it is a no-op returning False
    - close() is idempotent and wakes a reader waiting in receive()
    - Queue is bounded; a full queue drops the event and reports False
"""

import asyncio
import logging
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MAX_PENDING = 256

_CLOSED = object()


class SessionChannel:
    def __init__(self, max_pending: int = DEFAULT_MAX_PENDING):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_pending + 1)
        self._max_pending = max_pending
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, event: dict[str, Any]) -> bool:
        if self._closed:
            logger.debug("Dropped event for closed channel: %s", event.get("event"))
            return False
        if self._queue.qsize() >= self._max_pending:
            logger.warning("Channel backlog full, dropping event %s", event.get("event"))
            return False
        self._queue.put_nowait(event)
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def receive(self, timeout: float) -> dict[str, Any] | None:
        """Next event, or None on timeout or once the channel is closed."""
        if self._closed and self._queue.empty():
            return None
        try:
            item = await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None
        if item is _CLOSED:
            return None
        return item
