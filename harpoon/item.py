"""Bookmarked entries held by a list."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ListItem:
    """One entry of a list.

    ``value`` is the payload the owning list-kind understands (a relative file
    path, a shell command, ...). ``context`` is creator-owned data such as the
    last cursor position; the list core threads it through untouched.
    """

    value: Any
    context: dict[str, Any] = field(default_factory=dict)
