"""Synchronous publish/subscribe bus for list lifecycle events.

Listeners run in registration order on the caller's stack. A listener that
raises is logged and skipped so one faulty extension cannot abort a list
mutation, ``sync()`` or list creation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .item import ListItem
    from .lists import HarpoonList
    from .terminal import TerminalDriver

logger = logging.getLogger(__name__)


class EventName(str, Enum):
    ADD = "ADD"
    REMOVE = "REMOVE"
    REORDER = "REORDER"
    REPLACE = "REPLACE"
    NAVIGATE = "NAVIGATE"
    POSITION_UPDATED = "POSITION_UPDATED"
    LIST_CREATED = "LIST_CREATED"
    LIST_READ = "LIST_READ"
    SETUP_CALLED = "SETUP_CALLED"
    UI_CREATE = "UI_CREATE"


@dataclass(frozen=True)
class ListEvent:
    list: HarpoonList


@dataclass(frozen=True)
class ItemEvent:
    """Payload for item-level changes; ``index`` is the 1-based position."""

    list: HarpoonList
    item: ListItem | None
    index: int


@dataclass(frozen=True)
class PositionEvent:
    list: HarpoonList
    item: ListItem


@dataclass(frozen=True)
class SetupEvent:
    config: Any


@dataclass(frozen=True)
class UiCreateEvent:
    list: HarpoonList
    surface: Any
    current_file: str | None = None
    lines: tuple[str, ...] = field(default_factory=tuple)


Listener = Callable[[Any], None]


class HarpoonExtensions:
    """Ordered listener registry keyed by :class:`EventName`."""

    def __init__(self) -> None:
        self._listeners: list[tuple[EventName, Listener]] = []

    def subscribe(self, event: EventName | str, callback: Listener) -> Callable[[], None]:
        """Register ``callback`` for one event and return an unsubscribe function."""
        entry = (EventName(event), callback)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    def add_listener(self, listener: Mapping[EventName | str, Listener]) -> None:
        """Register a mapping of event name to callback, like an extension table."""
        for event, callback in listener.items():
            self.subscribe(event, callback)

    def clear(self) -> None:
        self._listeners.clear()

    def emit(self, event: EventName | str, payload: Any = None) -> None:
        event = EventName(event)
        for registered, callback in list(self._listeners):
            if registered is not event:
                continue
            try:
                callback(payload)
            except Exception:
                logger.exception("extension listener for %s failed", event.value)


def command_on_nav(command: str, driver: TerminalDriver, target: Any = None) -> dict[EventName, Listener]:
    """Listener running ``command`` through ``driver`` after every navigation."""

    def on_navigate(_payload: ItemEvent) -> None:
        driver.send_command(target, command)

    return {EventName.NAVIGATE: on_navigate}
