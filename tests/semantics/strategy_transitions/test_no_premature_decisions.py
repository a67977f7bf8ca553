"""
Semantic test: no decision before the window is full.

Invariant:
For any window size N, the first N-1 trades never produce a signal,
however far they move from each other.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from quant_mini.core.domain.types import PositionState, Signal
from quant_mini.strategies.ma_band import MovingAverageBandStrategy


@pytest.mark.parametrize("window_size", [1, 2, 5, 50])
def test_first_n_minus_one_trades_never_signal(window_size: int) -> None:
    strategy = MovingAverageBandStrategy(window_size=window_size, threshold_bps=0)

    # Steeply rising prices would trigger a BUY as soon as a decision is allowed.
    for i in range(window_size - 1):
        decision = strategy.on_trade(Decimal(10) ** (i % 6))
        assert decision.signal is Signal.NONE
        assert decision.moving_average is None

    assert strategy.position_state is PositionState.FLAT
