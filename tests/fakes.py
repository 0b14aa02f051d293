"""In-memory host and menu surface shared by the unit tests."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any


class FakeHost:
    def __init__(self, root: str = "/proj", files: Mapping[str, str] | None = None) -> None:
        self.root = root
        self.files = dict(files or {})
        self.current: str | None = None
        self.position = (1, 0)
        self.opened: list[tuple[Path, int, int, Mapping[str, Any] | None]] = []

    def cwd(self) -> str:
        return self.root

    def current_file(self) -> str | None:
        return self.current

    def cursor(self) -> tuple[int, int]:
        return self.position

    def line_count(self, path: Path) -> int | None:
        text = self.files.get(str(path))
        if text is None:
            return None
        return max(1, len(text.splitlines()))

    def line_length(self, path: Path, row: int) -> int | None:
        text = self.files.get(str(path))
        if text is None:
            return None
        lines = text.splitlines()
        if row < 1 or row > len(lines):
            return 0
        return len(lines[row - 1])

    def open_file(self, path: Path, row: int, col: int, options: Mapping[str, Any] | None = None) -> None:
        self.opened.append((path, row, col, options))


class FakeSurface:
    def __init__(self, title: str, lines: Sequence[str]) -> None:
        self.title = title
        self.lines = list(lines)
        self.closed = False

    def read_lines(self) -> list[str]:
        return list(self.lines)

    def close(self) -> None:
        self.closed = True


class SurfaceRecorder:
    """Surface factory remembering the surfaces it created."""

    def __init__(self) -> None:
        self.surfaces: list[FakeSurface] = []

    def __call__(self, title: str, lines: Sequence[str]) -> FakeSurface:
        surface = FakeSurface(title, lines)
        self.surfaces.append(surface)
        return surface

    @property
    def last(self) -> FakeSurface:
        return self.surfaces[-1]
