"""Path helpers for project-relative bookmark values."""

from __future__ import annotations

import os
from pathlib import Path


def normalize_path(path: str | os.PathLike[str], root: str | os.PathLike[str]) -> str:
    """Return ``path`` relative to ``root`` when it lives under it.

    Paths outside ``root`` are returned absolute. Relative inputs are taken to
    be relative to ``root`` already.
    """
    root_path = Path(root).expanduser()
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = root_path / candidate
    candidate = Path(os.path.normpath(candidate))
    root_path = Path(os.path.normpath(root_path))
    try:
        return candidate.relative_to(root_path).as_posix()
    except ValueError:
        return str(candidate)


def absolute_path(value: str, root: str | os.PathLike[str]) -> Path:
    """Resolve a stored bookmark value back to an absolute path."""
    candidate = Path(value).expanduser()
    if candidate.is_absolute():
        return candidate
    return Path(root) / candidate
