"""Reconcile an edited menu back into an ordered item sequence.

The menu shows one display line per item. After the user edits that text the
new line sequence is mapped back onto items:

* a line equal to the display of a not-yet-used existing item keeps that item
  (and its context); duplicates are consumed left to right. Exact text wins
  over a match ignoring surrounding whitespace
* any other non-blank line is built via ``create_list_item``; when the result
  equals a not-yet-used existing item, that item is kept instead
* blank lines drop their slot
* existing items no line claimed are removed

The result order is the line order. Resolving the unchanged output of
``display()`` yields the same items in the same order.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .item import ListItem

if TYPE_CHECKING:
    from .config import ListConfig


@dataclass
class Resolution:
    """Outcome of one reconciliation.

    ``added``/``moved`` hold ``(new_position, item)`` and ``removed`` holds
    ``(old_position, item)``; positions are 1-based.
    """

    items: list[ListItem] = field(default_factory=list)
    added: list[tuple[int, ListItem]] = field(default_factory=list)
    removed: list[tuple[int, ListItem]] = field(default_factory=list)
    moved: list[tuple[int, ListItem]] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed or self.moved)


def resolve_lines(items: Sequence[ListItem], lines: Sequence[str], config: ListConfig) -> Resolution:
    old_items = list(items)
    displayed = [config.display(item) for item in old_items]
    consumed = [False] * len(old_items)
    result = Resolution()

    def unconsumed(matches: Callable[[int], bool]) -> int | None:
        for index in range(len(old_items)):
            if not consumed[index] and matches(index):
                return index
        return None

    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue

        match = unconsumed(lambda index: displayed[index] == raw_line)
        if match is None:
            match = unconsumed(lambda index: displayed[index].strip() == line)

        created = None
        if match is None:
            created = config.create_list_item(config, line)
            if created is None:
                continue
            # another spelling of an existing item claims that item
            match = unconsumed(lambda index: config.equals(created, old_items[index]))

        position = len(result.items) + 1
        if match is not None:
            consumed[match] = True
            item = old_items[match]
            if match + 1 != position:
                result.moved.append((position, item))
            result.items.append(item)
            continue

        if not config.allow_duplicates and any(config.equals(created, kept) for kept in result.items):
            continue
        result.items.append(created)
        result.added.append((position, created))

    result.removed = [
        (index + 1, item) for index, item in enumerate(old_items) if not consumed[index]
    ]
    return result
