"""Public API for the quant_mini package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Config API
# ----------------------------------------------------------------------
from quant_mini.config.pipeline_config import PipelineConfig

# ----------------------------------------------------------------------
# Domain types
# ----------------------------------------------------------------------
from quant_mini.core.domain.ledger import LedgerInvariantError, PaperLedger
from quant_mini.core.domain.types import PositionState, Signal, TradeEvent
from quant_mini.core.domain.window import PriceWindow

# ----------------------------------------------------------------------
# Metrics API (read by exporters)
# ----------------------------------------------------------------------
from quant_mini.core.metrics.aggregator import MetricsAggregator, MetricsSnapshot
from quant_mini.core.metrics.histogram import LatencyHistogram

# ----------------------------------------------------------------------
# Live pipeline
# ----------------------------------------------------------------------
from quant_mini.live.event_queue import EventQueue
from quant_mini.live.feed import NormalizationOutcome, normalize_message
from quant_mini.live.ingestor import FeedIngestor
from quant_mini.live.pipeline import LivePipeline
from quant_mini.live.strategy_engine import StrategyEngine

# ----------------------------------------------------------------------
# Strategy interface
# ----------------------------------------------------------------------
from quant_mini.strategies.base import Decision, Strategy
from quant_mini.strategies.ma_band import MovingAverageBandStrategy

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Config
    "PipelineConfig",

    # Domain
    "TradeEvent",
    "Signal",
    "PositionState",
    "PriceWindow",
    "PaperLedger",
    "LedgerInvariantError",

    # Metrics
    "MetricsAggregator",
    "MetricsSnapshot",
    "LatencyHistogram",

    # Pipeline
    "EventQueue",
    "FeedIngestor",
    "StrategyEngine",
    "LivePipeline",
    "NormalizationOutcome",
    "normalize_message",

    # Strategy interface
    "Strategy",
    "Decision",
    "MovingAverageBandStrategy",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("quant-mini")
except PackageNotFoundError:
    __version__ = "0.0.0"
