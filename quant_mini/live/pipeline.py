"""Live pipeline wiring.

Builds every component from a ``PipelineConfig`` with explicit ownership:
the metrics aggregator is created here (or injected) and shared by reference
with the queue, ingestor, engine and exporter.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, AsyncIterable, Callable

from quant_mini.core.domain.ledger import PaperLedger
from quant_mini.core.events.event_bus import EventBus
from quant_mini.core.events.sinks.file_recorder import FileRecorderSink
from quant_mini.core.events.sinks.sink_logging import LoggingEventSink
from quant_mini.core.metrics.aggregator import MetricsAggregator
from quant_mini.live.event_queue import EventQueue
from quant_mini.live.ingestor import FeedIngestor
from quant_mini.live.strategy_engine import StrategyEngine, wall_clock_ms
from quant_mini.strategies.ma_band import MovingAverageBandStrategy

if TYPE_CHECKING:
    from quant_mini.config.pipeline_config import PipelineConfig
    from quant_mini.core.metrics.aggregator import MetricsSnapshot
    from quant_mini.live.feed import RawMessage

LOGGER = logging.getLogger(__name__)


class LivePipeline:
    """Feed ingestor -> event queue -> strategy engine -> {ledger, metrics}."""

    # pylint: disable=too-many-instance-attributes

    def __init__(
        self,
        config: PipelineConfig,
        *,
        metrics: MetricsAggregator | None = None,
        event_bus: EventBus | None = None,
        clock: Callable[[], int] = wall_clock_ms,
    ) -> None:
        self.config = config
        self.metrics = metrics if metrics is not None else MetricsAggregator()
        self.event_bus = event_bus if event_bus is not None else self._build_event_bus()

        self.queue = EventQueue(config.queue_capacity, metrics=self.metrics)
        self.ledger = PaperLedger(unit_size=config.unit_size)
        self.strategy = MovingAverageBandStrategy(
            window_size=config.window_size,
            threshold_bps=config.threshold_bps,
        )
        self.engine = StrategyEngine(
            strategy=self.strategy,
            ledger=self.ledger,
            metrics=self.metrics,
            event_bus=self.event_bus,
            clock=clock,
        )
        self.ingestor = FeedIngestor(
            symbol=config.symbol,
            queue=self.queue,
            metrics=self.metrics,
        )

    def _build_event_bus(self) -> EventBus:
        sinks = [LoggingEventSink(logging.getLogger("quant_mini.decisions"))]
        if self.config.event_log_path is not None:
            sinks.append(FileRecorderSink(self.config.event_log_path))
        return EventBus(sinks=sinks)

    async def run(self, messages: AsyncIterable[RawMessage]) -> MetricsSnapshot:
        """Run ingestion and strategy concurrently until the feed ends."""
        ingest_task = asyncio.create_task(self.ingestor.run(messages), name="feed-ingestor")
        try:
            await self.engine.run(self.queue)
        except BaseException:
            ingest_task.cancel()
            try:
                await ingest_task
            except asyncio.CancelledError:
                pass
            except Exception:  # pylint: disable=broad-exception-caught
                LOGGER.exception("Feed ingestor failed while the engine was stopping")
            raise
        finally:
            self.event_bus.close()

        await ingest_task
        return self.metrics.snapshot()
