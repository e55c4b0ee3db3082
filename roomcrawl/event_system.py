"""
Event bus for map and level events.

The map core never calls rendering or UI code directly. Observers (a renderer,
a message log, tests) subscribe to the events they care about instead.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional


class Event(Enum):
    """Event types emitted during play."""

    # Level lifecycle
    LEVEL_START = auto()  # kwargs: dungeon_level
    LEVEL_END = auto()  # kwargs: dungeon_level

    # Exploration
    ROOM_EXPLORED = auto()  # kwargs: room_id

    # Doors
    DOOR_OPENED = auto()  # kwargs: x, y, side
    DOOR_CLOSED = auto()  # kwargs: x, y, side

    # Player
    PLAYER_MOVED = auto()  # kwargs: x, y
    PLAYER_HEALED = auto()  # kwargs: amount

    # Entities
    ENTITY_REMOVED = auto()  # kwargs: entity_id


@dataclass
class EventData:
    """Container for event data passed to handlers."""

    event: Event
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        if self.kwargs:
            kwargs_str = ", ".join(f"{k}={v}" for k, v in self.kwargs.items())
            return f"EventData({self.event.name}, {kwargs_str})"
        return f"EventData({self.event.name})"


EventHandler = Callable[[EventData], None]


class EventBus:
    """
    Publish/subscribe hub for game events.

    Handlers run synchronously, in subscription order, inside emit().
    """

    def __init__(self) -> None:
        self._handlers: Dict[Event, List[EventHandler]] = {}
        self._debug: bool = False

    def set_debug(self, debug: bool) -> None:
        """Enable or disable debug logging of events."""
        self._debug = debug

    def subscribe(self, event: Event, handler: EventHandler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def unsubscribe(self, event: Event, handler: EventHandler) -> None:
        """
        Raises:
            ValueError: If handler was not subscribed to this event
        """
        if event not in self._handlers:
            raise ValueError(f"No handlers registered for event {event}")
        if handler not in self._handlers[event]:
            raise ValueError(f"Handler not subscribed to event {event}")
        self._handlers[event].remove(handler)

    def emit(self, event: Event, **kwargs: Any) -> None:
        event_data = EventData(event=event, kwargs=kwargs)

        if self._debug:
            print(f"[EventBus] Emitting: {event_data}", file=sys.stderr)

        for handler in list(self._handlers.get(event, [])):
            try:
                handler(event_data)
            except Exception as e:
                # One failing handler shouldn't stop the others
                print(f"[EventBus] Handler error for {event.name}: {e}", file=sys.stderr)
                if self._debug:
                    raise

    def clear(self) -> None:
        self._handlers.clear()

    def handler_count(self, event: Optional[Event] = None) -> int:
        """Handlers for one event, or across all events if event is None."""
        if event is not None:
            return len(self._handlers.get(event, []))
        return sum(len(handlers) for handlers in self._handlers.values())
