"""Live pipeline configuration model.

Parses and validates the pipeline configuration from a JSON object or file.
Command-line flags are layered on top by the entrypoint.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_WS_BASE_URL: str = "wss://stream.binance.com:9443/ws"


class PipelineConfig(BaseModel):
    """Configuration for one single-symbol live pipeline.

    JSON example:
        {
          "symbol": "btcusdt",
          "window_size": 50,
          "threshold_bps": 10,
          "metrics_port": 9000
        }
    """

    symbol: str = Field("btcusdt", min_length=1)

    window_size: int = Field(50, ge=1, description="Moving average window, in trades.")
    threshold_bps: int = Field(10, ge=0, description="Hysteresis half-width in basis points.")
    unit_size: Decimal = Field(Decimal(1), gt=0, description="Fixed paper order size.")

    queue_capacity: int = Field(4096, ge=1)
    metrics_port: int = Field(9000, ge=0, le=65535)

    ws_base_url: str = Field(DEFAULT_WS_BASE_URL, min_length=1)
    event_log_path: Path | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def normalize_symbol(self) -> PipelineConfig:
        """Binance stream names are lowercase; trade payloads use uppercase."""
        self.symbol = self.symbol.strip().lower()
        if not self.symbol:
            raise ValueError("symbol must not be blank")
        return self

    @classmethod
    def from_json_obj(cls, obj: dict[str, Any]) -> PipelineConfig:
        return cls.model_validate(obj)

    @classmethod
    def from_json_file(cls, path: str | Path) -> PipelineConfig:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(path)
        return cls.from_json_obj(json.loads(path.read_text(encoding="utf-8")))

    @property
    def stream_url(self) -> str:
        return f"{self.ws_base_url.rstrip('/')}/{self.symbol}@aggTrade"

    def with_overrides(self, **overrides: Any) -> PipelineConfig:
        """Return a validated copy with non-None overrides applied."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return type(self).model_validate(data)
