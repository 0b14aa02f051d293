"""Exceptions raised by harpoon."""

from __future__ import annotations


class HarpoonError(Exception):
    pass


class StoreWriteError(HarpoonError):
    """The persisted document could not be written."""


class MenuError(HarpoonError):
    """The menu surface could not be created."""
