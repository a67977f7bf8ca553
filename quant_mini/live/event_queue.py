"""Bounded trade event queue between ingestion and the strategy engine.

Sending never blocks: when the buffer is full the incoming event is dropped
(tail drop), so a slow consumer can never stall the feed reader. Receiving
awaits until an event is buffered or the queue is closed. A closed queue
still delivers everything buffered before it reports end of stream.

Single-producer / single-consumer, used from one event loop.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quant_mini.core.domain.types import TradeEvent
    from quant_mini.core.metrics.aggregator import MetricsAggregator


class EventQueue:
    """Drop-on-full FIFO with an awaitable receive side."""

    def __init__(self, capacity: int, metrics: MetricsAggregator | None = None) -> None:
        if capacity < 1:
            raise ValueError(f"Invalid queue capacity: {capacity}")

        self.capacity = capacity
        self.dropped = 0

        self._metrics = metrics
        self._items: deque[TradeEvent] = deque()
        self._not_empty = asyncio.Event()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._items)

    def try_send(self, event: TradeEvent) -> bool:
        """Enqueue ``event`` if there is room; return False if it was not queued."""
        if self._closed:
            return False

        if len(self._items) >= self.capacity:
            self.dropped += 1
            if self._metrics is not None:
                self._metrics.incr_dropped()
            return False

        self._items.append(event)
        self._not_empty.set()
        return True

    async def recv(self) -> TradeEvent | None:
        """Return the next event, or None once closed and drained."""
        while not self._items:
            if self._closed:
                return None
            self._not_empty.clear()
            await self._not_empty.wait()

        return self._items.popleft()

    def close(self) -> None:
        """Mark the end of ingestion. Idempotent."""
        self._closed = True
        self._not_empty.set()
