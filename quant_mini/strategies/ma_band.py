"""Moving-average band strategy with hysteresis."""

from __future__ import annotations

from decimal import Decimal

from quant_mini.core.domain.position_state_machine import next_state
from quant_mini.core.domain.types import PositionState, Signal
from quant_mini.core.domain.window import PriceWindow
from quant_mini.strategies.base import Decision, Strategy

BPS_DENOMINATOR = Decimal(10000)


class MovingAverageBandStrategy(Strategy):
    """Long-only crossover of a band around the moving average.

    Enters when the price closes strictly above ``ma * (1 + bps)`` and exits
    when it closes strictly below ``ma * (1 - bps)``. Prices on a band edge
    never trigger.
    """

    def __init__(self, *, window_size: int, threshold_bps: int) -> None:
        self.window = PriceWindow(window_size)
        self.threshold_bps = threshold_bps

        band = Decimal(threshold_bps) / BPS_DENOMINATOR
        self._upper_factor = 1 + band
        self._lower_factor = 1 - band

        self._state = PositionState.FLAT

    @property
    def position_state(self) -> PositionState:
        return self._state

    def on_trade(self, price: Decimal) -> Decision:
        self.window.push(price)

        state = self._state
        if not self.window.is_full():
            return Decision(signal=Signal.NONE, prev_state=state, next_state=state)

        ma = self.window.mean()
        upper = ma * self._upper_factor
        lower = ma * self._lower_factor

        signal = Signal.NONE
        if state is PositionState.FLAT and price > upper:
            signal = Signal.BUY
        elif state is PositionState.LONG and price < lower:
            signal = Signal.SELL

        self._state = next_state(state, signal)

        return Decision(
            signal=signal,
            prev_state=state,
            next_state=self._state,
            moving_average=ma,
            upper_band=upper,
            lower_band=lower,
        )
