"""
Semantic test: closing the queue ends the consumer loop.

Invariant:
A waiting receiver is woken by close(). Events buffered before close() are
still delivered, then recv() returns None. Sends after close() are refused.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal

from quant_mini.core.domain.types import TradeEvent
from quant_mini.live.event_queue import EventQueue


def _trade(trade_id: int) -> TradeEvent:
    return TradeEvent(
        symbol="BTCUSDT",
        trade_id=trade_id,
        price=Decimal("100"),
        quantity=Decimal("1"),
        exchange_time_ms=trade_id,
        is_buyer_maker=False,
    )


def test_blocked_receiver_is_released_by_close() -> None:
    async def scenario() -> object:
        queue = EventQueue(4)
        receiver = asyncio.create_task(queue.recv())

        await asyncio.sleep(0)
        assert not receiver.done()

        queue.close()
        return await asyncio.wait_for(receiver, timeout=1.0)

    assert asyncio.run(scenario()) is None


def test_buffered_events_delivered_after_close() -> None:
    async def scenario() -> list[int | None]:
        queue = EventQueue(4)
        queue.try_send(_trade(1))
        queue.try_send(_trade(2))
        queue.close()

        assert queue.try_send(_trade(3)) is False

        got = []
        for _ in range(3):
            event = await queue.recv()
            got.append(None if event is None else event.trade_id)
        return got

    assert asyncio.run(scenario()) == [1, 2, None]


def test_receiver_wakes_on_send() -> None:
    async def scenario() -> int:
        queue = EventQueue(4)
        receiver = asyncio.create_task(queue.recv())
        await asyncio.sleep(0)

        queue.try_send(_trade(7))
        event = await asyncio.wait_for(receiver, timeout=1.0)
        return event.trade_id

    assert asyncio.run(scenario()) == 7
