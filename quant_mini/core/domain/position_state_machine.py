"""
Position state machine definitions.

This module defines the two position states of the long-only paper trader
and the signal that moves between them. Any (state, signal) pair not listed
keeps the current state and is not a fill.
"""

from __future__ import annotations

from quant_mini.core.domain.types import PositionState, Signal

# Allowed position transitions.
#
# Key   : (current state, signal)
# Value : next state
POSITION_TRANSITIONS: dict[tuple[PositionState, Signal], PositionState] = {
    (PositionState.FLAT, Signal.BUY): PositionState.LONG,
    (PositionState.LONG, Signal.SELL): PositionState.FLAT,
}


def is_valid_transition(state: PositionState, signal: Signal) -> bool:
    """Return True if ``signal`` is a fill from ``state``."""
    return (state, signal) in POSITION_TRANSITIONS


def next_state(state: PositionState, signal: Signal) -> PositionState:
    """Return the state reached from ``state`` on ``signal``."""
    return POSITION_TRANSITIONS.get((state, signal), state)
