"""
Event sink interface.

Sinks receive every domain event emitted on the bus, in emission order.
"""
from __future__ import annotations

from typing import Any, Protocol


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Consume one domain event."""
