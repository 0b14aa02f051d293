"""Persisted project store.

One JSON document per user and machine::

    {"<project key>": {"<list name>": [<encoded item>, ...]}}

Reads are defensive: a missing, empty or malformed file loads as an empty
document. Writes are not: a failed ``sync()`` raises :class:`StoreWriteError`.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from platformdirs import user_data_dir

from .errors import StoreWriteError
from .settings import APP_NAME

logger = logging.getLogger(__name__)

DATA_FILENAME = "harpoon.json"
DEFAULT_DATA_PATH = Path(user_data_dir(APP_NAME, appauthor=False)) / DATA_FILENAME

Document = dict[str, dict[str, list[Any]]]


def _sanitize(raw: object) -> Document:
    """Keep only ``key -> name -> list`` entries of a decoded document."""
    if not isinstance(raw, dict):
        return {}
    document: Document = {}
    for key, lists in raw.items():
        if not isinstance(key, str) or not isinstance(lists, dict):
            continue
        document[key] = {
            name: values
            for name, values in lists.items()
            if isinstance(name, str) and isinstance(values, list)
        }
    return document


def read_document(path: Path) -> tuple[Document, bool]:
    """Load the document at ``path``; the flag is ``True`` when it was unreadable."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("no data file at %s", path)
        return {}, False
    except OSError as exc:
        logger.warning("could not read data file %s: %s", path, exc)
        return {}, True
    if not text.strip():
        return {}, False
    try:
        raw = json.loads(text)
    except ValueError as exc:
        logger.warning("data file %s is not valid JSON: %s", path, exc)
        return {}, True
    if not isinstance(raw, dict):
        logger.warning("data file %s does not hold a JSON object", path)
        return {}, True
    return _sanitize(raw), False


class HarpoonData:
    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_DATA_PATH
        self._data, self.has_error = read_document(self.path)
        self.seen: dict[str, set[str]] = {}
        self._pending: dict[tuple[str, str], list[Any]] = {}

    def mark_seen(self, key: str, name: str) -> None:
        self.seen.setdefault(key, set()).add(name)

    def data(self, key: str, name: str) -> list[Any]:
        """Stored encoded items for ``(key, name)``; marks the pair as seen."""
        self.mark_seen(key, name)
        return copy.deepcopy(self._data.get(key, {}).get(name, []))

    def update(self, key: str, name: str, values: list[Any]) -> None:
        stored = list(values)
        self._data.setdefault(key, {})[name] = stored
        self._pending[(key, name)] = stored

    def clear(self, key: str | None = None) -> None:
        """Forget one project's lists, or everything when ``key`` is ``None``."""
        if key is None:
            self._data = {}
        else:
            self._data.pop(key, None)
        self._pending.clear()
        self._write(self._data)

    def dump(self) -> Document:
        return copy.deepcopy(self._data)

    def sync(self) -> None:
        """Write pending updates over the current on-disk document.

        The file is re-read first so lists written by another session since we
        loaded are kept; only the pairs updated here are overwritten.
        """
        on_disk, unreadable = read_document(self.path)
        if unreadable:
            logger.warning("rewriting unreadable data file %s", self.path)
        for (key, name), values in self._pending.items():
            on_disk.setdefault(key, {})[name] = values
        self._write(on_disk)
        self._data = on_disk
        self._pending.clear()
        self.has_error = False

    def _write(self, document: Document) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            raise StoreWriteError(f"could not write {self.path}: {exc}") from exc
        logger.debug("wrote %s", self.path)
