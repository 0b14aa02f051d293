"""Public package surface for harpoon.

``Harpoon`` is the session entry point; the list core, configuration and
extension types are re-exported for callers that build their own list-kinds.
"""

from __future__ import annotations

from .config import DEFAULT_LIST, HarpoonConfig, ListConfig, get_config, merge_config
from .core import Harpoon
from .data import HarpoonData
from .errors import HarpoonError, MenuError, StoreWriteError
from .extensions import EventName, HarpoonExtensions
from .item import ListItem
from .lists import HarpoonList
from .reconcile import Resolution, resolve_lines
from .settings import Settings


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "DEFAULT_LIST",
    "EventName",
    "Harpoon",
    "HarpoonConfig",
    "HarpoonData",
    "HarpoonError",
    "HarpoonExtensions",
    "HarpoonList",
    "ListConfig",
    "ListItem",
    "MenuError",
    "Resolution",
    "Settings",
    "StoreWriteError",
    "get_config",
    "main",
    "merge_config",
    "resolve_lines",
]
