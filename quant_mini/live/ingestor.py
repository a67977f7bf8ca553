"""Feed ingestion task.

Normalizes raw messages and pushes the resulting trade events into the
event queue without ever waiting on the consumer. The queue is closed when
the message source is exhausted, which is the only stop signal the strategy
engine receives.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, AsyncIterable

from quant_mini.live.feed import RawMessage, normalize_message

if TYPE_CHECKING:
    from quant_mini.core.metrics.aggregator import MetricsAggregator
    from quant_mini.live.event_queue import EventQueue

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestStats:
    received: int = 0
    forwarded: int = 0
    dropped: int = 0
    rejected: int = 0
    refused: int = 0


class FeedIngestor:
    """Producer side of the pipeline."""

    def __init__(
        self,
        *,
        symbol: str,
        queue: EventQueue,
        metrics: MetricsAggregator,
    ) -> None:
        self.symbol = symbol
        self.queue = queue
        self.metrics = metrics
        self.stats = IngestStats()

    def ingest(self, raw: RawMessage) -> bool:
        """Normalize and enqueue one raw message; return True if queued."""
        self.stats.received += 1

        outcome = normalize_message(raw, self.symbol)
        if outcome.event is None:
            self.stats.rejected += 1
            self.metrics.incr_rejected()
            LOGGER.debug(
                "Feed message rejected",
                extra={"reason": outcome.reject_reason, "detail": outcome.detail},
            )
            return False

        if self.queue.closed:
            self.stats.refused += 1
            return False

        if not self.queue.try_send(outcome.event):
            self.stats.dropped += 1
            return False

        self.stats.forwarded += 1
        return True

    async def run(self, messages: AsyncIterable[RawMessage]) -> IngestStats:
        """Consume ``messages`` until exhausted, then close the queue."""
        try:
            async for raw in messages:
                self.ingest(raw)
        finally:
            self.queue.close()
            LOGGER.info(
                "Ingestion ended",
                extra={
                    "received": self.stats.received,
                    "forwarded": self.stats.forwarded,
                    "dropped": self.stats.dropped,
                    "rejected": self.stats.rejected,
                    "refused": self.stats.refused,
                },
            )
        return self.stats
