"""Paper trading ledger.

Simulated single-instrument, long-only execution with a fixed unit size.
There is no rejection path: callers only submit fills allowed by the
position state machine, so a precondition violation is an invariant breach.
"""

from __future__ import annotations

from decimal import Decimal

from quant_mini.core.domain.types import PositionState, Signal


class LedgerInvariantError(RuntimeError):
    """Raised when a fill contradicts the ledger's current position."""


class PaperLedger:
    """Cash and position bookkeeping for paper fills."""

    def __init__(self, unit_size: Decimal = Decimal(1)) -> None:
        self.unit_size = Decimal(unit_size)
        self.quantity = Decimal(0)
        self.cash = Decimal(0)

    @property
    def position_state(self) -> PositionState:
        return PositionState.LONG if self.quantity > 0 else PositionState.FLAT

    def apply_fill(self, signal: Signal, price: Decimal) -> None:
        """Apply a full fill of one unit at ``price``."""
        if signal is Signal.BUY:
            if self.quantity != 0:
                raise LedgerInvariantError(
                    f"BUY fill while already long (quantity={self.quantity})"
                )
            self.quantity = self.unit_size
            self.cash -= price * self.unit_size
            return

        if signal is Signal.SELL:
            if self.quantity != self.unit_size:
                raise LedgerInvariantError(
                    f"SELL fill without an open unit position (quantity={self.quantity})"
                )
            self.cash += price * self.unit_size
            self.quantity = Decimal(0)
            return

        raise LedgerInvariantError(f"Cannot fill signal {signal!r}")

    def equity(self, current_price: Decimal) -> Decimal:
        """Cash plus mark-to-market value of the open position."""
        return self.cash + self.quantity * current_price
