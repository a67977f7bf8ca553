"""Process-wide pipeline metrics.

The aggregator is written by the strategy engine (and the ingestion path for
drop/reject counters) and read concurrently by the Prometheus exporter
thread. A single lock guards every field so that a snapshot never observes a
partially applied update.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from decimal import Decimal

from quant_mini.core.metrics.histogram import LatencyHistogram

SNAPSHOT_QUANTILES: tuple[float, ...] = (0.50, 0.90, 0.99)


@dataclass(frozen=True, slots=True)
class MetricsSnapshot:
    """Consistent point-in-time copy of all metrics."""

    trades_total: int
    decisions_total: int
    fills_total: int

    events_dropped_total: int
    messages_rejected_total: int

    pnl: Decimal
    last_price: Decimal

    latency_p50_ms: float
    latency_p90_ms: float
    latency_p99_ms: float
    latency_count: int
    latency_sum_ms: float


class MetricsAggregator:
    """Counters, gauges and a latency histogram behind one lock."""

    # pylint: disable=too-many-instance-attributes

    def __init__(self, histogram: LatencyHistogram | None = None) -> None:
        self._lock = threading.Lock()

        self._trades = 0
        self._decisions = 0
        self._fills = 0
        self._dropped = 0
        self._rejected = 0

        self._pnl = Decimal(0)
        self._last_price = Decimal(0)

        self._latency = histogram if histogram is not None else LatencyHistogram()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def incr_trades(self) -> None:
        with self._lock:
            self._trades += 1

    def incr_decisions(self) -> None:
        with self._lock:
            self._decisions += 1

    def incr_fills(self) -> None:
        with self._lock:
            self._fills += 1

    def incr_dropped(self) -> None:
        with self._lock:
            self._dropped += 1

    def incr_rejected(self) -> None:
        with self._lock:
            self._rejected += 1

    def set_last_price(self, price: Decimal) -> None:
        with self._lock:
            self._last_price = price

    def set_pnl(self, pnl: Decimal) -> None:
        with self._lock:
            self._pnl = pnl

    def record_latency(self, latency_ms: float) -> None:
        with self._lock:
            self._latency.record(latency_ms)

    def record_trade(self, price: Decimal) -> None:
        """Count one processed trade and update the last-price gauge."""
        with self._lock:
            self._trades += 1
            self._last_price = price

    def record_decision(self, *, latency_ms: float, pnl: Decimal) -> None:
        """Apply every metric effect of one filled decision atomically.

        Decision count, latency sample, fill count and pnl move together,
        so a reader sees either none or all of them.
        """
        with self._lock:
            self._latency.record(latency_ms)
            self._decisions += 1
            self._fills += 1
            self._pnl = pnl

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            p50, p90, p99 = (
                self._latency.value_at_quantile(q) for q in SNAPSHOT_QUANTILES
            )
            return MetricsSnapshot(
                trades_total=self._trades,
                decisions_total=self._decisions,
                fills_total=self._fills,
                events_dropped_total=self._dropped,
                messages_rejected_total=self._rejected,
                pnl=self._pnl,
                last_price=self._last_price,
                latency_p50_ms=p50,
                latency_p90_ms=p90,
                latency_p99_ms=p99,
                latency_count=self._latency.count,
                latency_sum_ms=self._latency.total,
            )
