from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator

from prometheus_client import CollectorRegistry, start_http_server
from prometheus_client.core import (
    CounterMetricFamily,
    GaugeMetricFamily,
    Metric,
    SummaryMetricFamily,
)

if TYPE_CHECKING:
    from quant_mini.core.metrics.aggregator import MetricsAggregator

LOGGER = logging.getLogger(__name__)


class SnapshotCollector:
    """Prometheus collector backed by ``MetricsAggregator.snapshot()``.

    Each scrape renders exactly one snapshot, so all exported series come
    from the same point in time. The aggregator stays the only owner of the
    metric state; this collector never caches values.
    """

    def __init__(self, metrics: MetricsAggregator, *, prefix: str = "quant") -> None:
        self._metrics = metrics
        self._prefix = prefix

    def collect(self) -> Iterator[Metric]:
        snap = self._metrics.snapshot()
        p = self._prefix

        yield CounterMetricFamily(
            f"{p}_trades", "Number of trades processed", value=snap.trades_total
        )
        yield CounterMetricFamily(
            f"{p}_decisions", "Decisions made by strategy", value=snap.decisions_total
        )
        yield CounterMetricFamily(f"{p}_fills", "Paper fills", value=snap.fills_total)
        yield CounterMetricFamily(
            f"{p}_events_dropped",
            "Trade events dropped because the event queue was full",
            value=snap.events_dropped_total,
        )
        yield CounterMetricFamily(
            f"{p}_messages_rejected",
            "Feed messages rejected at normalization",
            value=snap.messages_rejected_total,
        )

        yield GaugeMetricFamily(f"{p}_pnl", "Equity value as PnL baseline", value=float(snap.pnl))
        yield GaugeMetricFamily(
            f"{p}_last_price", "Last trade price", value=float(snap.last_price)
        )

        latency = SummaryMetricFamily(
            f"{p}_latency_ms",
            "Decision latency from exchange trade time, in milliseconds",
            count_value=snap.latency_count,
            sum_value=snap.latency_sum_ms,
        )
        for quantile, value in (
            ("0.5", snap.latency_p50_ms),
            ("0.9", snap.latency_p90_ms),
            ("0.99", snap.latency_p99_ms),
        ):
            latency.add_sample(f"{p}_latency_ms", {"quantile": quantile}, value)
        yield latency


def build_registry(metrics: MetricsAggregator) -> CollectorRegistry:
    """Return a private registry exposing only the pipeline metrics."""
    registry = CollectorRegistry(auto_describe=True)
    registry.register(SnapshotCollector(metrics))
    return registry


def start_metrics_server(
    metrics: MetricsAggregator,
    port: int,
    addr: str = "0.0.0.0",
) -> CollectorRegistry:
    """Serve ``/metrics`` on a background daemon thread."""
    registry = build_registry(metrics)
    start_http_server(port, addr=addr, registry=registry)
    LOGGER.info("Metrics on http://%s:%d/metrics", addr, port)
    return registry
