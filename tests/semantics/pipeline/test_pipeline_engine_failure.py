"""
Semantic test: engine failure stops the pipeline cleanly.

Invariant:
When the engine raises, that error propagates out of run(). The ingestion
task is always awaited, and its own failure is logged, not left
unretrieved.
"""

from __future__ import annotations

import asyncio
import json
import logging
from decimal import Decimal
from typing import AsyncIterator

import pytest

from quant_mini.config.pipeline_config import PipelineConfig
from quant_mini.core.domain.ledger import LedgerInvariantError
from quant_mini.core.domain.types import PositionState, Signal
from quant_mini.live.pipeline import LivePipeline
from quant_mini.strategies.base import Decision, Strategy


class _AlwaysSellStrategy(Strategy):
    @property
    def position_state(self) -> PositionState:
        return PositionState.FLAT

    def on_trade(self, price: Decimal) -> Decision:
        return Decision(
            signal=Signal.SELL,
            prev_state=PositionState.FLAT,
            next_state=PositionState.FLAT,
        )


def _raw(trade_id: int) -> str:
    return json.dumps(
        {
            "e": "aggTrade",
            "E": 1,
            "s": "BTCUSDT",
            "a": trade_id,
            "p": "100",
            "q": "1",
            "T": 1,
            "m": False,
        }
    )


async def _failing_source() -> AsyncIterator[str]:
    yield _raw(1)
    raise ConnectionError("feed lost")


def test_engine_error_wins_and_ingestor_error_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    pipeline = LivePipeline(PipelineConfig(window_size=1), clock=lambda: 1)
    pipeline.engine.strategy = _AlwaysSellStrategy()

    with caplog.at_level(logging.ERROR, logger="quant_mini.live.pipeline"):
        with pytest.raises(LedgerInvariantError):
            asyncio.run(pipeline.run(_failing_source()))

    assert pipeline.queue.closed
    assert pipeline.event_bus.closed

    failures = [r for r in caplog.records if r.name == "quant_mini.live.pipeline"]
    assert len(failures) == 1
    assert failures[0].levelno == logging.ERROR
    assert isinstance(failures[0].exc_info[1], ConnectionError)
