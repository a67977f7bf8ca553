"""
Semantic test: drop-on-full backpressure.

Invariant:
The queue is a bounded, non-blocking buffer. Pushing C+1 events into a full
queue with no consumer drops exactly one event (the newest), keeps the
oldest C in order, and counts the drop in the metrics.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal

from quant_mini.core.domain.types import TradeEvent
from quant_mini.core.metrics.aggregator import MetricsAggregator
from quant_mini.live.event_queue import EventQueue


def _trade(trade_id: int) -> TradeEvent:
    return TradeEvent(
        symbol="BTCUSDT",
        trade_id=trade_id,
        price=Decimal("100"),
        quantity=Decimal("1"),
        exchange_time_ms=trade_id,
        is_buyer_maker=True,
    )


def test_full_queue_drops_exactly_one_event() -> None:
    capacity = 8
    metrics = MetricsAggregator()
    queue = EventQueue(capacity, metrics=metrics)

    accepted = [queue.try_send(_trade(i)) for i in range(capacity + 1)]

    assert accepted == [True] * capacity + [False]
    assert len(queue) == capacity
    assert queue.dropped == 1
    assert metrics.snapshot().events_dropped_total == 1

    async def drain() -> list[int]:
        queue.close()
        ids = []
        while True:
            event = await queue.recv()
            if event is None:
                return ids
            ids.append(event.trade_id)

    assert asyncio.run(drain()) == list(range(capacity))
