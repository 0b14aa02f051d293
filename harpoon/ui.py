"""Quick menu: show a list as editable text and fold the edits back in.

The menu owns no list data. Opening renders ``list.display()`` onto a
surface; saving reads the surface's lines and hands them to
``list.resolve_displayed``. If the surface cannot be created the list is left
exactly as it was.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from .errors import MenuError
from .extensions import EventName, HarpoonExtensions, UiCreateEvent
from .host import editor_command
from .settings import Settings

if TYPE_CHECKING:
    from .lists import HarpoonList

logger = logging.getLogger(__name__)

SyncFn = Callable[[], None]


class Surface(Protocol):
    def read_lines(self) -> list[str]: ...

    def close(self) -> None: ...


SurfaceFactory = Callable[[str, Sequence[str]], Surface]


class EditorSurface:
    """Temporary file edited with ``$EDITOR``, one list entry per line."""

    def __init__(self, title: str, lines: Sequence[str]) -> None:
        try:
            command = editor_command()
        except RuntimeError as exc:
            raise MenuError(f"Cannot open menu: {exc}") from exc

        handle, name = tempfile.mkstemp(prefix=f"harpoon-{title}-", suffix=".txt", text=True)
        self.path = Path(name)
        with os.fdopen(handle, "w", encoding="utf-8") as stream:
            stream.write("".join(f"{line}\n" for line in lines))

        try:
            proc = subprocess.run([*command, str(self.path)], check=False)
        except OSError as exc:
            self.close()
            raise MenuError(f"Failed to launch editor: {exc}") from exc
        if proc.returncode != 0:
            self.close()
            raise MenuError(f"Editor exited with status {proc.returncode}")

    def read_lines(self) -> list[str]:
        return self.path.read_text(encoding="utf-8").splitlines()

    def close(self) -> None:
        self.path.unlink(missing_ok=True)


class HarpoonUI:
    def __init__(
        self,
        settings: Settings,
        extensions: HarpoonExtensions,
        surface_factory: SurfaceFactory = EditorSurface,
        sync: SyncFn | None = None,
    ) -> None:
        self.settings = settings
        self.extensions = extensions
        self.surface_factory = surface_factory
        self._sync = sync
        self.surface: Surface | None = None
        self.active_list: HarpoonList | None = None
        self._closing = False

    @property
    def is_open(self) -> bool:
        return self.surface is not None

    def configure(self, settings: Settings) -> None:
        self.settings = settings

    def close_menu(self) -> None:
        if self._closing:
            return
        self._closing = True
        try:
            if self.surface is not None:
                self.surface.close()
        finally:
            self.surface = None
            self.active_list = None
            self._closing = False

    def toggle_quick_menu(
        self,
        hlist: HarpoonList | None = None,
        options: Mapping[str, Any] | None = None,
        current_file: str | None = None,
    ) -> None:
        """Open the menu for ``hlist``, or close the open one."""
        if hlist is None or self.surface is not None:
            logger.debug("closing menu for %s", self.active_list.name if self.active_list else None)
            try:
                if self.settings.save_on_toggle and self.surface is not None:
                    self.save()
            finally:
                self.close_menu()
            return

        title = str((options or {}).get("title", hlist.name))
        contents = hlist.display()
        logger.debug("opening menu for %s with %d entries", hlist.name, len(contents))
        try:
            surface = self.surface_factory(title, contents)
        except MenuError:
            self.close_menu()
            raise
        except Exception as exc:
            self.close_menu()
            raise MenuError(f"Failed to create menu surface: {exc}") from exc

        self.surface = surface
        self.active_list = hlist
        self.extensions.emit(
            EventName.UI_CREATE,
            UiCreateEvent(hlist, surface, current_file, tuple(contents)),
        )

    def save(self) -> None:
        """Fold the surface's current lines into the active list."""
        if self.surface is None or self.active_list is None:
            return
        lines = self.surface.read_lines()
        logger.debug("saving menu for %s: %r", self.active_list.name, lines)
        self.active_list.resolve_displayed(lines)
        if self.settings.sync_on_ui_close and self._sync is not None:
            self._sync()

    def select_menu_item(self, index: int, options: Mapping[str, Any] | None = None) -> None:
        """Apply pending edits, close the menu and select line ``index``."""
        hlist = self.active_list
        if hlist is None or self.surface is None:
            return
        hlist.resolve_displayed(self.surface.read_lines())
        logger.debug("selecting menu item %d of %s", index, hlist.name)
        self.close_menu()
        hlist.select(index, options)
