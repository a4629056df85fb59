"""Event system for batch calculations.

This module provides a simple pub/sub event system for notifying external
systems about batch progress and solver behavior.

Events can be used for:
- Logging batch lifecycle
- Updating progress bars and dashboards
- Collecting per-row errors as they happen
- Auditing solver fallbacks
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Standard event types."""

    # Batch lifecycle
    BATCH_START = "batch.start"
    BATCH_PROGRESS = "batch.progress"
    BATCH_ROW_ERROR = "batch.row_error"
    BATCH_COMPLETE = "batch.complete"
    BATCH_CANCELLED = "batch.cancelled"

    # Solver behavior
    SOLVER_NONCONVERGENCE = "solver.nonconvergence"


def _event_key(event_type: EventType | str) -> str:
    return event_type.value if isinstance(event_type, EventType) else event_type


@dataclass
class Event:
    """An event emitted during calculation.

    Attributes:
        event_type: Type of event.
        timestamp: When the event occurred.
        source: Name of the component that generated the event.
        data: Event-specific data payload.
        message: Human-readable description of the event.
    """

    event_type: EventType | str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    source: str = "system"
    data: dict[str, Any] = field(default_factory=dict)
    message: str = ""

    def __str__(self) -> str:
        """String representation of the event."""
        return (
            f"[{self.timestamp.isoformat()}] {_event_key(self.event_type)} "
            f"from {self.source}: {self.message}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_type": _event_key(self.event_type),
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
            "data": self.data,
            "message": self.message,
        }


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """Central event bus for pub/sub messaging.

    Thread-safety: This implementation is NOT thread-safe. Batches are run
    on a single thread.
    """

    def __init__(self, *, max_history: int = 1000) -> None:
        """Initialize event bus.

        Args:
            max_history: Maximum number of events to keep in history.
        """
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._history: deque[Event] = deque(maxlen=max_history)

    def subscribe(
        self,
        event_type: EventType | str,
        handler: EventHandler,
    ) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: Type of events to subscribe to.
            handler: Callback function to invoke when event occurs.
        """
        key = _event_key(event_type)
        if handler not in self._handlers[key]:
            self._handlers[key].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        self.subscribe("*", handler)

    def unsubscribe(
        self,
        event_type: EventType | str,
        handler: EventHandler,
    ) -> bool:
        """Unsubscribe from events.

        Returns:
            True if handler was found and removed.
        """
        key = _event_key(event_type)
        if handler in self._handlers[key]:
            self._handlers[key].remove(handler)
            return True
        return False

    def emit(self, event: Event) -> None:
        """Emit an event to all subscribers.

        Handler exceptions are logged and do not prevent other handlers
        from being called, so a faulty subscriber cannot abort a batch.

        Args:
            event: The event to emit.
        """
        self._history.append(event)
        event_key = _event_key(event.event_type)

        for handler in [*self._handlers[event_key], *self._handlers["*"]]:
            try:
                handler(event)
            except Exception:
                handler_name = getattr(handler, "__name__", str(handler))
                logger.exception(
                    "Event handler '%s' failed processing %s event from %s",
                    handler_name,
                    event_key,
                    event.source,
                )

    def emit_simple(
        self,
        event_type: EventType | str,
        source: str,
        message: str = "",
        **data: Any,
    ) -> Event:
        """Emit an event with simpler syntax.

        Returns:
            The emitted event.
        """
        event = Event(
            event_type=event_type,
            source=source,
            message=message,
            data=data,
        )
        self.emit(event)
        return event

    def get_history(
        self,
        event_type: EventType | str | None = None,
        source: str | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        """Get event history with optional filtering.

        Args:
            event_type: Filter by event type.
            source: Filter by source.
            limit: Maximum number of events to return.

        Returns:
            List of events matching filters (most recent last).
        """
        type_key = None if event_type is None else _event_key(event_type)
        filtered = [
            event
            for event in self._history
            if (type_key is None or _event_key(event.event_type) == type_key)
            and (source is None or event.source == source)
        ]

        if limit is not None:
            return filtered[-limit:]

        return filtered

    def clear(self) -> None:
        """Clear both history and handlers."""
        self._history.clear()
        self._handlers.clear()


# Global event bus instance
_global_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get the global event bus, creating it on first call."""
    global _global_bus
    if _global_bus is None:
        _global_bus = EventBus()
    return _global_bus


def reset_event_bus() -> None:
    """Reset the global event bus.

    Primarily useful for testing.
    """
    global _global_bus
    _global_bus = None
