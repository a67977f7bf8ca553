"""Core shared domain models.

This module defines the canonical models flowing through the live pipeline:
normalized trade events, strategy signals and position states. Trade events
are immutable once constructed and carry exact Decimal prices.
"""

# pylint: disable=missing-class-docstring
from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Signal(str, Enum):
    NONE = "none"
    BUY = "buy"
    SELL = "sell"


class PositionState(str, Enum):
    FLAT = "flat"
    LONG = "long"


# ---------------------------------------------------------------------------
# Market data
# ---------------------------------------------------------------------------


class TradeEvent(BaseModel):
    """One executed trade, already normalized from the wire."""

    symbol: str = Field(..., min_length=1)
    trade_id: int = Field(..., ge=0)

    price: Decimal = Field(..., gt=0)
    quantity: Decimal = Field(..., ge=0)

    exchange_time_ms: int = Field(
        ...,
        ge=0,
        description="Producer-assigned trade time in milliseconds since Unix epoch.",
    )
    is_buyer_maker: bool

    model_config = ConfigDict(extra="forbid", frozen=True)
