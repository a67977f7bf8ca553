"""
Semantic test: pipeline configuration validation.

Invariant:
Defaults match the documented CLI defaults, invalid values are rejected at
load time, and CLI overrides only replace explicitly given values.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError

from quant_mini.config.pipeline_config import PipelineConfig
from quant_mini.live.entrypoint import _build_parser, load_config


def test_defaults() -> None:
    cfg = PipelineConfig()

    assert cfg.symbol == "btcusdt"
    assert cfg.window_size == 50
    assert cfg.threshold_bps == 10
    assert cfg.metrics_port == 9000
    assert cfg.queue_capacity == 4096
    assert cfg.unit_size == Decimal(1)
    assert cfg.stream_url == "wss://stream.binance.com:9443/ws/btcusdt@aggTrade"


@pytest.mark.parametrize(
    "bad",
    [
        {"window_size": 0},
        {"threshold_bps": -1},
        {"queue_capacity": 0},
        {"metrics_port": 70000},
        {"symbol": "   "},
        {"unknown_key": 1},
    ],
)
def test_invalid_values_rejected(bad: dict) -> None:
    with pytest.raises(ValidationError):
        PipelineConfig.from_json_obj(bad)


def test_cli_overrides_file_values(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"symbol": "ETHUSDT", "window_size": 20}), encoding="utf-8")

    args = _build_parser().parse_args(["--config", str(path), "--threshold-bps", "25"])
    cfg = load_config(args)

    assert cfg.symbol == "ethusdt"
    assert cfg.window_size == 20
    assert cfg.threshold_bps == 25
    assert cfg.metrics_port == 9000
