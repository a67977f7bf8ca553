"""Strategy engine: the single consumer of the event queue.

The engine is a sequential reducer over trade events in queue order. It is
the sole owner of the strategy (price window, position state) and of the
paper ledger, and the sole writer of trade/decision metrics.

Invariant:
- After every fill the ledger position matches the strategy position state.
  A mismatch is a core invariant breach and terminates processing.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

from quant_mini.core.domain.ledger import LedgerInvariantError
from quant_mini.core.domain.position_state_machine import is_valid_transition
from quant_mini.core.domain.types import Signal
from quant_mini.core.events.events import DecisionEvent, PaperFillEvent

if TYPE_CHECKING:
    from quant_mini.core.domain.ledger import PaperLedger
    from quant_mini.core.domain.types import TradeEvent
    from quant_mini.core.events.event_bus import EventBus
    from quant_mini.core.metrics.aggregator import MetricsAggregator
    from quant_mini.live.event_queue import EventQueue
    from quant_mini.strategies.base import Decision, Strategy

LOGGER = logging.getLogger(__name__)


def wall_clock_ms() -> int:
    """Current wall-clock time in milliseconds since Unix epoch."""
    return time.time_ns() // 1_000_000


class StrategyEngine:
    """Drives strategy, ledger, metrics and event bus for each trade."""

    def __init__(
        self,
        *,
        strategy: Strategy,
        ledger: PaperLedger,
        metrics: MetricsAggregator,
        event_bus: EventBus,
        clock: Callable[[], int] = wall_clock_ms,
    ) -> None:
        self.strategy = strategy
        self.ledger = ledger
        self.metrics = metrics
        self._event_bus = event_bus
        self._clock = clock

    def process(self, event: TradeEvent) -> Decision:
        """Apply one trade event and return the strategy decision."""
        decision = self.strategy.on_trade(event.price)
        self.metrics.record_trade(event.price)

        if decision.signal is Signal.NONE:
            return decision

        if not is_valid_transition(decision.prev_state, decision.signal):
            raise LedgerInvariantError(
                f"Signal {decision.signal.value} is not a fill from {decision.prev_state.value}"
            )

        decided_at_ms = self._clock()
        latency_ms = max(0, decided_at_ms - event.exchange_time_ms)

        self.ledger.apply_fill(decision.signal, event.price)
        if self.ledger.position_state is not decision.next_state:
            raise LedgerInvariantError(
                f"Ledger position {self.ledger.position_state.value} diverged from "
                f"strategy state {decision.next_state.value}"
            )

        equity = self.ledger.equity(event.price)
        self.metrics.record_decision(latency_ms=latency_ms, pnl=equity)

        self._event_bus.emit(
            DecisionEvent(
                exchange_time_ms=event.exchange_time_ms,
                decided_at_ms=decided_at_ms,
                symbol=event.symbol,
                trade_id=event.trade_id,
                side=decision.signal.value,
                price=event.price,
                moving_average=decision.moving_average,
                upper_band=decision.upper_band,
                lower_band=decision.lower_band,
                prev_state=decision.prev_state.value,
                next_state=decision.next_state.value,
                latency_ms=latency_ms,
                equity=equity,
            )
        )
        self._event_bus.emit(
            PaperFillEvent(
                decided_at_ms=decided_at_ms,
                symbol=event.symbol,
                side=decision.signal.value,
                price=event.price,
                quantity=self.ledger.unit_size,
                cash=self.ledger.cash,
                position_qty=self.ledger.quantity,
            )
        )
        return decision

    async def run(self, queue: EventQueue) -> int:
        """Consume ``queue`` until it is closed and drained.

        Returns the number of events processed.
        """
        processed = 0
        while True:
            event = await queue.recv()
            if event is None:
                break
            self.process(event)
            processed += 1

        LOGGER.info("Strategy engine stopped", extra={"processed": processed})
        return processed
