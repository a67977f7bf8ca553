"""
Domain event models.

These events are immutable facts emitted by the strategy engine. They are
consumed by loggers and recorders, never by the engine itself.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class DecisionEvent:
    exchange_time_ms: int
    decided_at_ms: int
    symbol: str
    trade_id: int

    side: str
    price: Decimal
    moving_average: Decimal
    upper_band: Decimal
    lower_band: Decimal

    prev_state: str
    next_state: str

    latency_ms: int
    equity: Decimal


@dataclass(frozen=True, slots=True)
class PaperFillEvent:
    decided_at_ms: int
    symbol: str

    side: str
    price: Decimal
    quantity: Decimal

    cash: Decimal
    position_qty: Decimal
