"""
Semantic test: price window bound.

Invariant:
After every push, len(window) <= N and the content equals the last
min(N, pushes) prices in arrival order.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from quant_mini.core.domain.window import PriceWindow


@pytest.mark.parametrize("capacity", [1, 3, 50])
def test_window_never_exceeds_capacity(capacity: int) -> None:
    window = PriceWindow(capacity)
    pushed: list[Decimal] = []

    for i in range(capacity * 3 + 1):
        price = Decimal(100 + i)
        window.push(price)
        pushed.append(price)

        assert len(window) <= capacity
        assert list(window) == pushed[-capacity:]


def test_window_full_and_mean() -> None:
    window = PriceWindow(3)

    window.push(Decimal("1"))
    window.push(Decimal("2"))
    assert not window.is_full()

    window.push(Decimal("6"))
    assert window.is_full()
    assert window.mean() == Decimal("3")

    # Evicts 1 -> [2, 6, 10]
    window.push(Decimal("10"))
    assert window.is_full()
    assert window.mean() == Decimal("6")


def test_mean_exact_after_evicting_outlier() -> None:
    window = PriceWindow(2)

    # The first price exceeds the 28-digit Decimal context when summed.
    window.push(Decimal("12345678901234567890.1"))
    window.push(Decimal("0.123456789012"))
    window.push(Decimal("1"))
    window.push(Decimal("1"))

    assert list(window) == [Decimal("1"), Decimal("1")]
    assert window.mean() == Decimal("1")
