"""Exchange feed boundary.

This module turns raw Binance ``aggTrade`` messages into normalized
``TradeEvent`` values and provides the raw message sources (live websocket
stream and offline replay). Anything that cannot be normalized is reported
with a reject reason and never reaches the strategy engine.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, AsyncIterator

import websockets
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from quant_mini.core.domain.types import TradeEvent

LOGGER = logging.getLogger(__name__)

RawMessage = str | bytes | dict[str, Any]


class RejectReason:
    """Reasons for refusing a raw feed message."""

    INVALID_JSON = "invalid_json"
    UNPARSEABLE_FIELD = "unparseable_field"
    NOT_A_TRADE = "not_a_trade"
    SYMBOL_MISMATCH = "symbol_mismatch"


# ---------------------------------------------------------------------------
# Wire model
# ---------------------------------------------------------------------------


class AggTradeMessage(BaseModel):
    """Binance aggregate trade payload (single-letter wire keys)."""

    event_type: str = Field(..., alias="e")
    event_time_ms: int = Field(..., alias="E", ge=0)
    symbol: str = Field(..., alias="s", min_length=1)
    agg_trade_id: int = Field(..., alias="a", ge=0)
    price: Decimal = Field(..., alias="p", gt=0, allow_inf_nan=False)
    quantity: Decimal = Field(..., alias="q", ge=0, allow_inf_nan=False)
    trade_time_ms: int = Field(..., alias="T", ge=0)
    is_buyer_maker: bool = Field(..., alias="m")
    is_best_match: bool | None = Field(default=None, alias="M")

    model_config = ConfigDict(extra="ignore")

    def to_trade_event(self) -> TradeEvent:
        return TradeEvent(
            symbol=self.symbol,
            trade_id=self.agg_trade_id,
            price=self.price,
            quantity=self.quantity,
            exchange_time_ms=self.trade_time_ms,
            is_buyer_maker=self.is_buyer_maker,
        )


@dataclass(slots=True)
class NormalizationOutcome:
    """Result of normalizing one raw message.

    Exactly one of ``event`` / ``reject_reason`` is set.
    """

    event: TradeEvent | None
    reject_reason: str | None
    detail: str | None = None


def _reject(reason: str, detail: str | None = None) -> NormalizationOutcome:
    return NormalizationOutcome(event=None, reject_reason=reason, detail=detail)


def normalize_message(raw: RawMessage, symbol: str) -> NormalizationOutcome:
    """Normalize one raw feed message for ``symbol``.

    Accepts both the direct payload (``/ws`` endpoints) and the combined
    stream wrapper ``{"stream": ..., "data": {...}}``.
    """
    if isinstance(raw, dict):
        payload: Any = raw
    else:
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            return _reject(RejectReason.INVALID_JSON, str(exc))

    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        payload = payload["data"]

    if not isinstance(payload, dict):
        return _reject(RejectReason.NOT_A_TRADE, f"payload is {type(payload).__name__}")

    if payload.get("e") != "aggTrade":
        return _reject(RejectReason.NOT_A_TRADE, f"event type {payload.get('e')!r}")

    try:
        message = AggTradeMessage.model_validate(payload)
    except ValidationError as exc:
        return _reject(RejectReason.UNPARSEABLE_FIELD, str(exc))

    if message.symbol.lower() != symbol.lower():
        return _reject(RejectReason.SYMBOL_MISMATCH, message.symbol)

    return NormalizationOutcome(event=message.to_trade_event(), reject_reason=None)


# ---------------------------------------------------------------------------
# Raw message sources
# ---------------------------------------------------------------------------


class BinanceTradeFeed:
    """Live websocket source for one ``<symbol>@aggTrade`` stream.

    The stream ends on a clean close or on the first transport error; there
    is no reconnect.
    """

    def __init__(self, url: str) -> None:
        self.url = url

    async def messages(self) -> AsyncIterator[str]:
        LOGGER.info("Connecting to feed", extra={"url": self.url})
        try:
            async with websockets.connect(self.url) as ws:
                LOGGER.info("WebSocket connected", extra={"url": self.url})
                async for frame in ws:
                    if isinstance(frame, bytes):
                        continue
                    yield frame
        except (websockets.exceptions.WebSocketException, OSError):
            LOGGER.exception("WebSocket feed failed")
        finally:
            LOGGER.info("WebSocket reader ended", extra={"url": self.url})


class ReplayFeed:
    """Offline source replaying one raw message per line from a capture file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def messages(self) -> AsyncIterator[str]:
        with self.path.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line:
                    continue
                yield line
                # Let the consumer drain between lines, as a socket read would.
                await asyncio.sleep(0)
        LOGGER.info("Replay finished", extra={"path": str(self.path)})
