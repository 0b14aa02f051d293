"""Ordered, mutable list of items for one (project key, list name) pair.

Positions are 1-based, matching menu line numbers. Index-based operations
outside ``1..len(list)`` are no-ops. Per-kind behavior (create, display,
select, encode, equals) comes from the list's :class:`ListConfig`; callbacks
are expected to observe the list they receive, not mutate it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from .config import ListConfig
from .extensions import EventName, HarpoonExtensions, ItemEvent
from .item import ListItem
from .reconcile import Resolution, resolve_lines

logger = logging.getLogger(__name__)


class HarpoonList:
    def __init__(
        self,
        config: ListConfig,
        name: str,
        items: Sequence[ListItem] | None = None,
        extensions: HarpoonExtensions | None = None,
        track_changes: bool = True,
    ) -> None:
        self.config = config
        self.name = name
        self.items: list[ListItem] = list(items or [])
        self.extensions = extensions if extensions is not None else HarpoonExtensions()
        self.track_changes = track_changes
        self.dirty = False
        self._index = 0

    def __repr__(self) -> str:
        return f"HarpoonList(name={self.name!r}, items={len(self.items)})"

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ListItem]:
        return iter(list(self.items))

    def length(self) -> int:
        return len(self.items)

    @property
    def current_index(self) -> int:
        """Position of the last selected item, ``0`` before any selection."""
        return self._index

    def mark_dirty(self) -> None:
        if self.track_changes and self.config.encode is not False:
            self.dirty = True

    def _emit(self, event: EventName, item: ListItem | None, index: int) -> None:
        self.extensions.emit(event, ItemEvent(self, item, index))

    def _in_range(self, index: int) -> bool:
        return 1 <= index <= len(self.items)

    def _build(self, item: Any) -> ListItem | None:
        if isinstance(item, ListItem):
            return item
        return self.config.create_list_item(self.config, item)

    def _index_of(self, item: ListItem) -> int:
        for position, existing in enumerate(self.items, start=1):
            if self.config.equals(item, existing):
                return position
        return -1

    def _position_of(self, selected: ListItem | None) -> int:
        """New position of the selected item, clamping when it was removed."""
        for position, item in enumerate(self.items, start=1):
            if item is selected:
                return position
        return min(self._index, len(self.items))

    def _accepts(self, item: ListItem) -> bool:
        return self.config.allow_duplicates or self._index_of(item) == -1

    def append(self, item: Any = None) -> HarpoonList:
        """Add ``item`` at the end.

        Raw input (a path, a command, ``None`` for "the current thing") is
        built through ``create_list_item``; a builder returning ``None`` makes
        this a no-op, as does an equal item when duplicates are not allowed.
        In that case a following ``remove`` takes out the entry that was
        already there, so ``append`` then ``remove`` only restores the list
        for items it did not hold yet.
        """
        built = self._build(item)
        if built is None or not self._accepts(built):
            return self
        self.items.append(built)
        self.mark_dirty()
        self._emit(EventName.ADD, built, len(self.items))
        return self

    add = append

    def prepend(self, item: Any = None) -> HarpoonList:
        built = self._build(item)
        if built is None or not self._accepts(built):
            return self
        self.items.insert(0, built)
        if self._index:
            self._index += 1
        self.mark_dirty()
        self._emit(EventName.ADD, built, 1)
        return self

    def replace_at(self, index: int, item: Any) -> HarpoonList:
        """Replace the item at ``index``; ``len + 1`` appends."""
        if not 1 <= index <= len(self.items) + 1:
            return self
        built = self._build(item)
        if built is None:
            return self
        if index == len(self.items) + 1:
            self.items.append(built)
        else:
            self.items[index - 1] = built
        self.mark_dirty()
        self._emit(EventName.REPLACE, built, index)
        return self

    def remove(self, item: ListItem | int | Any = None) -> HarpoonList:
        """Remove the first item equal to ``item``, or the item at a position."""
        if isinstance(item, int) and not isinstance(item, bool):
            return self.remove_at(item)
        target = self._build(item)
        if target is None:
            return self
        position = self._index_of(target)
        if position != -1:
            self.remove_at(position)
        return self

    def remove_at(self, index: int) -> HarpoonList:
        if not self._in_range(index):
            return self
        removed = self.items.pop(index - 1)
        if self._index > len(self.items) or self._index > index:
            self._index -= 1
        self.mark_dirty()
        self._emit(EventName.REMOVE, removed, index)
        return self

    def clear(self) -> HarpoonList:
        if self.items:
            self.items = []
            self.mark_dirty()
        self._index = 0
        return self

    def get(self, index: int) -> ListItem | None:
        if not self._in_range(index):
            return None
        return self.items[index - 1]

    def get_by_value(self, value: str) -> tuple[ListItem | None, int]:
        """Find the first item whose display text equals ``value``."""
        for position, item in enumerate(list(self.items), start=1):
            if self.config.display(item) == value:
                return item, position
        return None, -1

    def select(self, index: int, options: Mapping[str, Any] | None = None) -> None:
        item = self.get(index)
        if item is None and not self.config.select_with_nil:
            logger.debug("list %s: nothing to select at %d", self.name, index)
            return
        if item is not None:
            self._index = index
        self._emit(EventName.NAVIGATE, item, index)
        self.config.select(item, self, options)

    def next(self, options: Mapping[str, Any] | None = None, wrap: bool = True) -> None:
        length = len(self.items)
        index = self._index + 1
        if index > length:
            index = 1 if wrap else max(length, 1)
        self.select(index, options)

    def prev(self, options: Mapping[str, Any] | None = None, wrap: bool = True) -> None:
        length = len(self.items)
        index = self._index - 1
        if index < 1:
            index = length if wrap and length else 1
        self.select(index, options)

    def display(self) -> list[str]:
        return [self.config.display(item) for item in list(self.items)]

    def encode(self) -> list[Any] | None:
        """Encoded items in order, or ``None`` when this list-kind is not persisted."""
        if self.config.encode is False:
            return None
        return [self.config.encode(item) for item in list(self.items)]

    @classmethod
    def decode(
        cls,
        config: ListConfig,
        name: str,
        encoded: Sequence[Any],
        extensions: HarpoonExtensions | None = None,
        track_changes: bool = True,
    ) -> HarpoonList:
        items: list[ListItem] = []
        for entry in encoded:
            if entry is None:
                continue
            try:
                items.append(config.decode(entry))
            except Exception:
                logger.warning("list %s: dropping undecodable entry %r", name, entry)
        return cls(config, name, items, extensions, track_changes)

    def resolve_displayed(self, lines: Sequence[str]) -> Resolution:
        """Apply the user's edited menu lines to this list."""
        selected = self.get(self._index)
        resolution = resolve_lines(self.items, lines, self.config)
        self.items = resolution.items
        self._index = self._position_of(selected)
        if resolution.changed:
            self.mark_dirty()
        for index, item in resolution.removed:
            self._emit(EventName.REMOVE, item, index)
        for index, item in resolution.added:
            self._emit(EventName.ADD, item, index)
        for index, item in resolution.moved:
            self._emit(EventName.REORDER, item, index)
        return resolution
