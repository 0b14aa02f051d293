"""Host collaborator: where the user's files are opened and cursors live.

Inside an editor this would be the editor API. ``TerminalHost`` implements it
for a plain shell by running ``$EDITOR`` while the caller waits.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

BUF_LEAVE = "buf_leave"
EXIT = "exit"
HOST_EVENTS = (BUF_LEAVE, EXIT)


@dataclass(frozen=True)
class BufferLeave:
    """Payload for ``buf_leave``: the file being left and its last cursor."""

    path: str
    row: int = 1
    col: int = 0


class Host(Protocol):
    def cwd(self) -> str: ...

    def current_file(self) -> str | None: ...

    def cursor(self) -> tuple[int, int]: ...

    def line_count(self, path: Path) -> int | None: ...

    def line_length(self, path: Path, row: int) -> int | None: ...

    def open_file(self, path: Path, row: int, col: int, options: Mapping[str, Any] | None = None) -> None: ...


def editor_command() -> list[str]:
    editor_env = os.environ.get("VISUAL", "").strip() or os.environ.get("EDITOR", "").strip()
    if not editor_env:
        raise RuntimeError("$EDITOR is not set")
    cmd = shlex.split(editor_env)
    if not cmd:
        raise RuntimeError("$EDITOR is empty")
    return cmd


class TerminalHost:
    """Host backed by the process cwd and an external ``$EDITOR``.

    A terminal has no notion of a focused buffer, so ``current_file`` is
    whatever the caller last told it about (``None`` by default).
    """

    def __init__(self, root: str | None = None, current: str | None = None) -> None:
        self._root = root
        self._current = current
        self._cursor = (1, 0)

    def cwd(self) -> str:
        return self._root if self._root is not None else os.getcwd()

    def current_file(self) -> str | None:
        return self._current

    def cursor(self) -> tuple[int, int]:
        return self._cursor

    def _read_lines(self, path: Path) -> list[str] | None:
        try:
            return path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError:
            return None

    def line_count(self, path: Path) -> int | None:
        lines = self._read_lines(path)
        if lines is None:
            return None
        return max(1, len(lines))

    def line_length(self, path: Path, row: int) -> int | None:
        lines = self._read_lines(path)
        if lines is None:
            return None
        if row < 1 or row > len(lines):
            return 0
        return len(lines[row - 1])

    def open_file(self, path: Path, row: int, col: int, options: Mapping[str, Any] | None = None) -> None:
        cmd = editor_command()
        if options:
            logger.debug("terminal host ignores open options %r", dict(options))
        logger.info("opening %s at %d:%d", path, row, col)
        subprocess.run([*cmd, f"+{row}", str(path)], check=False)
        self._current = str(path)
