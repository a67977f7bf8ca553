"""
Synchronous fan-out event bus.
"""
from __future__ import annotations

from typing import Any, Iterable

from quant_mini.core.events.event_sink import EventSink


class EventBus:
    """Delivers each emitted event to every registered sink, in order."""

    def __init__(self, sinks: Iterable[EventSink] | None = None) -> None:
        self._sinks: list[EventSink] = list(sinks or [])
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def register(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def emit(self, event: Any) -> None:
        if self._closed:
            raise RuntimeError("emit() on a closed EventBus")
        for sink in self._sinks:
            sink.on_event(event)

    def close(self) -> None:
        """Close every sink that owns a resource. Idempotent."""
        if self._closed:
            return
        self._closed = True
        for sink in self._sinks:
            close_fn = getattr(sink, "close", None)
            if callable(close_fn):
                close_fn()
