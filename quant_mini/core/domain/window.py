"""Fixed-capacity FIFO window of recent trade prices."""

from __future__ import annotations

from collections import deque
from decimal import Decimal
from typing import Iterator


class PriceWindow:
    """Keeps the last ``capacity`` prices in arrival order.

    Capacity >= 1 is validated by the pipeline configuration and is not
    re-checked here.
    """

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._prices: deque[Decimal] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, price: Decimal) -> None:
        """Append a price, evicting the oldest one once at capacity."""
        self._prices.append(price)

    def is_full(self) -> bool:
        return len(self._prices) == self._capacity

    def mean(self) -> Decimal:
        """Arithmetic mean of the current content.

        Summed from the held prices on every call, so evicted prices leave
        no rounding residue. Only meaningful once the window is full.
        """
        if not self._prices:
            return Decimal(0)
        return sum(self._prices, Decimal(0)) / len(self._prices)

    def __len__(self) -> int:
        return len(self._prices)

    def __iter__(self) -> Iterator[Decimal]:
        return iter(self._prices)
