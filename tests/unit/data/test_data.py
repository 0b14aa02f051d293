"""Tests for the persisted project store.

Loading never fails on bad files; writing surfaces errors.
Sync only overwrites the lists this session updated.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from harpoon.data import HarpoonData, read_document
from harpoon.errors import StoreWriteError


class ReadDocumentTests(unittest.TestCase):
    def test_missing_file_is_empty_without_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            document, unreadable = read_document(Path(tmp) / "none.json")

        self.assertEqual(document, {})
        self.assertFalse(unreadable)

    def test_malformed_file_is_empty_and_flagged(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "harpoon.json"
            path.write_text("{oops", encoding="utf-8")
            with self.assertLogs("harpoon.data", level="WARNING"):
                data = HarpoonData(path)

        self.assertTrue(data.has_error)
        self.assertEqual(data.data("/proj", "files"), [])

    def test_invalid_shapes_are_dropped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "harpoon.json"
            path.write_text(
                json.dumps({"/proj": {"files": ["a"], "bad": "x"}, "/other": [1, 2]}),
                encoding="utf-8",
            )
            document, unreadable = read_document(path)

        self.assertFalse(unreadable)
        self.assertEqual(document, {"/proj": {"files": ["a"]}})


class HarpoonDataTests(unittest.TestCase):
    def test_data_marks_seen_and_returns_copy(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "harpoon.json"
            path.write_text(json.dumps({"/proj": {"files": ["a"]}}), encoding="utf-8")
            data = HarpoonData(path)

            values = data.data("/proj", "files")
            values.append("mutated")

            self.assertEqual(data.data("/proj", "files"), ["a"])
            self.assertEqual(data.seen, {"/proj": {"files"}})

    def test_sync_keeps_lists_written_by_other_sessions(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "harpoon.json"
            path.write_text(json.dumps({"/proj": {"files": ["old"]}}), encoding="utf-8")
            data = HarpoonData(path)

            path.write_text(
                json.dumps({"/proj": {"files": ["old"], "cmds": ["make"]}, "/other": {"files": ["x"]}}),
                encoding="utf-8",
            )
            data.update("/proj", "files", ["new"])
            data.sync()

            written = json.loads(path.read_text(encoding="utf-8"))

        self.assertEqual(
            written,
            {"/proj": {"files": ["new"], "cmds": ["make"]}, "/other": {"files": ["x"]}},
        )

    def test_sync_creates_parent_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "dir" / "harpoon.json"
            data = HarpoonData(path)
            data.update("/proj", "files", ["a"])
            data.sync()

            self.assertEqual(json.loads(path.read_text(encoding="utf-8")), {"/proj": {"files": ["a"]}})

    def test_sync_recovers_from_unreadable_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "harpoon.json"
            path.write_text("garbage", encoding="utf-8")
            with self.assertLogs("harpoon.data", level="WARNING"):
                data = HarpoonData(path)
                data.update("/proj", "files", ["a"])
                data.sync()

            self.assertFalse(data.has_error)
            self.assertEqual(json.loads(path.read_text(encoding="utf-8")), {"/proj": {"files": ["a"]}})

    def test_write_failure_is_raised(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            data = HarpoonData(Path(tmp) / "harpoon.json")
            data.update("/proj", "files", ["a"])
            with mock.patch.object(Path, "write_text", side_effect=PermissionError("denied")):
                with self.assertRaises(StoreWriteError):
                    data.sync()

    def test_clear_one_project(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "harpoon.json"
            path.write_text(json.dumps({"/a": {"files": ["x"]}, "/b": {"files": ["y"]}}), encoding="utf-8")
            data = HarpoonData(path)

            data.clear("/a")

            self.assertEqual(json.loads(path.read_text(encoding="utf-8")), {"/b": {"files": ["y"]}})
            self.assertEqual(data.dump(), {"/b": {"files": ["y"]}})


if __name__ == "__main__":
    unittest.main()
