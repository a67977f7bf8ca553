from __future__ import annotations

from quant_mini.core.events.event_bus import EventBus


class NullEventBus(EventBus):
    """Bus without sinks; emitted events are discarded (tests, benchmarks)."""

    def __init__(self) -> None:
        super().__init__(sinks=())
