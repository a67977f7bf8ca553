"""
Semantic test: snapshots are never torn.

Invariant:
While a writer records decisions, concurrent readers always observe
decisions_total == fills_total == latency_count, because every decision
is applied inside one critical section.
"""

from __future__ import annotations

import threading
from decimal import Decimal

from quant_mini.core.metrics.aggregator import MetricsAggregator


def test_concurrent_snapshots_are_consistent() -> None:
    metrics = MetricsAggregator()
    writes = 20_000
    stop = threading.Event()
    violations: list[tuple[int, int, int]] = []

    def writer() -> None:
        for i in range(writes):
            metrics.record_trade(Decimal(i))
            metrics.record_decision(latency_ms=i % 97, pnl=Decimal(i))
        stop.set()

    def reader() -> None:
        while not stop.is_set():
            snap = metrics.snapshot()
            if not snap.decisions_total == snap.fills_total == snap.latency_count:
                violations.append(
                    (snap.decisions_total, snap.fills_total, snap.latency_count)
                )

    readers = [threading.Thread(target=reader) for _ in range(3)]
    for t in readers:
        t.start()
    writer_thread = threading.Thread(target=writer)
    writer_thread.start()

    writer_thread.join()
    for t in readers:
        t.join()

    assert violations == []

    snap = metrics.snapshot()
    assert snap.trades_total == writes
    assert snap.decisions_total == writes
    assert snap.latency_count == writes
    assert snap.pnl == Decimal(writes - 1)


def test_individual_writers_update_snapshot() -> None:
    metrics = MetricsAggregator()

    metrics.incr_trades()
    metrics.incr_trades()
    metrics.incr_decisions()
    metrics.incr_fills()
    metrics.set_last_price(Decimal("101.5"))
    metrics.set_pnl(Decimal("-0.25"))
    metrics.record_latency(12)

    snap = metrics.snapshot()
    assert snap.trades_total == 2
    assert snap.decisions_total == 1
    assert snap.fills_total == 1
    assert snap.last_price == Decimal("101.5")
    assert snap.pnl == Decimal("-0.25")
    assert snap.latency_count == 1
    assert snap.latency_p50_ms == 12
