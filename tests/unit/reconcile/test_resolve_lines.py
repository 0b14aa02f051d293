"""Tests for folding edited menu lines back into list items.

Covers identity/context preservation, reordering, deletion, new entries,
blank lines and duplicate display strings.
"""

from __future__ import annotations

import unittest

from harpoon.config import get_config, get_default_config, merge_config
from harpoon.item import ListItem
from harpoon.reconcile import resolve_lines
from tests.fakes import FakeHost


def _config(**list_block):
    config = get_default_config(FakeHost())
    if list_block:
        config = merge_config({"files": list_block}, config)
    return get_config(config, "files")


def _items() -> list[ListItem]:
    return [
        ListItem("a", {"row": 3, "col": 1}),
        ListItem("b", {"row": 7, "col": 0}),
        ListItem("c", {"row": 1, "col": 4}),
    ]


class ResolveLinesTests(unittest.TestCase):
    def test_unchanged_display_is_idempotent(self) -> None:
        config = _config()
        items = _items()
        lines = [config.display(item) for item in items]

        resolution = resolve_lines(items, lines, config)

        self.assertEqual(len(resolution.items), 3)
        for before, after in zip(items, resolution.items):
            self.assertIs(before, after)
        self.assertEqual(resolution.items[1].context, {"row": 7, "col": 0})
        self.assertFalse(resolution.changed)

    def test_reorder_keeps_original_items(self) -> None:
        config = _config()
        a, b, c = _items()

        resolution = resolve_lines([a, b, c], ["c", "a", "b"], config)

        self.assertEqual(len(resolution.items), 3)
        self.assertIs(resolution.items[0], c)
        self.assertIs(resolution.items[1], a)
        self.assertIs(resolution.items[2], b)
        self.assertEqual(c.context, {"row": 1, "col": 4})
        self.assertEqual([position for position, _item in resolution.moved], [1, 2, 3])

    def test_missing_line_drops_item(self) -> None:
        config = _config()
        a, b, c = _items()

        resolution = resolve_lines([a, b, c], ["a", "c"], config)

        self.assertEqual([item.value for item in resolution.items], ["a", "c"])
        self.assertEqual(resolution.removed, [(2, b)])
        self.assertEqual(resolution.added, [])

    def test_new_line_creates_item_without_context(self) -> None:
        config = _config()
        a = ListItem("a", {"row": 2, "col": 2})

        resolution = resolve_lines([a], ["a", "new-text"], config)

        self.assertIs(resolution.items[0], a)
        created = resolution.items[1]
        self.assertEqual(created.value, "new-text")
        self.assertEqual(created.context, {})
        self.assertEqual(resolution.added, [(2, created)])

    def test_new_line_uses_configured_creator(self) -> None:
        calls: list[str] = []

        def create(_config, raw):
            calls.append(raw)
            return ListItem(raw.upper(), {"made": True})

        config = _config(create_list_item=create)
        resolution = resolve_lines([], ["x"], config)

        self.assertEqual(calls, ["x"])
        self.assertEqual(resolution.items, [ListItem("X", {"made": True})])

    def test_blank_lines_drop_their_slot(self) -> None:
        config = _config()
        a, b, c = _items()

        resolution = resolve_lines([a, b, c], ["a", "", "   ", "c"], config)

        self.assertEqual([item.value for item in resolution.items], ["a", "c"])
        self.assertEqual(resolution.added, [])

    def test_surrounding_whitespace_is_ignored_when_matching(self) -> None:
        config = _config()
        a, b, c = _items()

        resolution = resolve_lines([a, b, c], ["  b  ", "a\t", "c"], config)

        self.assertIs(resolution.items[0], b)
        self.assertIs(resolution.items[1], a)

    def test_duplicate_displays_match_left_to_right(self) -> None:
        config = _config(allow_duplicates=True)
        first = ListItem("dup", {"n": 1})
        second = ListItem("dup", {"n": 2})

        resolution = resolve_lines([first, second], ["dup", "dup"], config)
        self.assertIs(resolution.items[0], first)
        self.assertIs(resolution.items[1], second)

        single = resolve_lines([first, second], ["dup"], config)
        self.assertEqual(single.items, [first])
        self.assertEqual(single.removed, [(2, second)])

    def test_repeated_new_line_collapses_without_duplicates(self) -> None:
        config = _config()
        a = ListItem("a")

        resolution = resolve_lines([a], ["a", "a", "z", "z"], config)

        self.assertEqual([item.value for item in resolution.items], ["a", "z"])

    def test_padded_display_is_idempotent(self) -> None:
        config = _config(display=lambda item: f"{item.value}  ")
        items = _items()

        resolution = resolve_lines(items, [config.display(item) for item in items], config)

        for before, after in zip(items, resolution.items):
            self.assertIs(before, after)
        self.assertEqual(resolution.items[0].context, {"row": 3, "col": 1})
        self.assertFalse(resolution.changed)

    def test_other_spelling_of_existing_item_keeps_it(self) -> None:
        config = _config()
        a = ListItem("a.txt", {"row": 9, "col": 2})

        resolution = resolve_lines([a], ["./a.txt", "a.txt"], config)

        self.assertEqual(len(resolution.items), 1)
        self.assertIs(resolution.items[0], a)
        self.assertEqual(resolution.added, [])
        self.assertEqual(resolution.removed, [])

    def test_new_line_before_its_existing_twin_does_not_duplicate(self) -> None:
        config = _config()
        a, b = ListItem("a.txt"), ListItem("b.txt", {"row": 4, "col": 0})

        resolution = resolve_lines([a, b], ["/proj/b.txt", "a.txt", "b.txt"], config)

        self.assertEqual([item.value for item in resolution.items], ["b.txt", "a.txt"])
        self.assertIs(resolution.items[0], b)

    def test_creator_returning_none_skips_line(self) -> None:
        config = _config(create_list_item=lambda _config, _raw: None)

        resolution = resolve_lines([ListItem("a")], ["a", "ignored"], config)

        self.assertEqual([item.value for item in resolution.items], ["a"])


if __name__ == "__main__":
    unittest.main()
