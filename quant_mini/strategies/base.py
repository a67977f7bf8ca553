"""Base strategy interface.

A strategy is a deterministic reducer over trade prices: it owns its price
window and position state and turns each trade into at most one signal. It
never touches the ledger or metrics; the strategy engine does.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quant_mini.core.domain.types import PositionState, Signal


@dataclass(frozen=True, slots=True)
class Decision:
    """Outcome of evaluating one trade.

    ``moving_average`` and the bands are None while the window is warming up.
    """

    signal: Signal
    prev_state: PositionState
    next_state: PositionState

    moving_average: Decimal | None = None
    upper_band: Decimal | None = None
    lower_band: Decimal | None = None


class Strategy(ABC):
    """Strategy protocol implemented by all concrete strategies."""

    @property
    @abstractmethod
    def position_state(self) -> PositionState:
        """Position the strategy believes it holds."""

    @abstractmethod
    def on_trade(self, price: Decimal) -> Decision:
        """Consume one trade price and return the resulting decision."""
