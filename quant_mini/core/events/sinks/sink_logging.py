"""
Logging event sink.
"""
from __future__ import annotations

import logging
from typing import Any

from quant_mini.core.events.events import DecisionEvent


class LoggingEventSink:
    """Renders decisions as operational log lines; other events at DEBUG."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def on_event(self, event: Any) -> None:
        if isinstance(event, DecisionEvent):
            self._logger.info(
                "[%d] price=%.2f ma=%.2f -> %s | equity=%.2f",
                event.exchange_time_ms,
                event.price,
                event.moving_average,
                event.side.upper(),
                event.equity,
                extra={"event": event},
            )
            return

        self._logger.debug("domain_event %s", type(event).__name__, extra={"event": event})
