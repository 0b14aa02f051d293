"""Session object owning every loaded list for the active project.

A :class:`Harpoon` bundles settings, per-list configuration, the persisted
store, the extension bus and the menu. Lists are created lazily on first
access from stored data and kept for the life of the session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .config import DEFAULT_LIST, HarpoonConfig, ListConfig, get_config, get_default_config, merge_config
from .data import HarpoonData
from .extensions import EventName, HarpoonExtensions, ListEvent, Listener, SetupEvent
from .host import EXIT, Host, TerminalHost
from .lists import HarpoonList
from .settings import Settings, project_key
from .ui import EditorSurface, HarpoonUI, SurfaceFactory

logger = logging.getLogger(__name__)

ListVisitor = Callable[[HarpoonList, ListConfig, str], None]


class Harpoon:
    def __init__(
        self,
        host: Host | None = None,
        data: HarpoonData | None = None,
        settings: Settings | None = None,
        surface_factory: SurfaceFactory = EditorSurface,
    ) -> None:
        self.host = host if host is not None else TerminalHost()
        self.config: HarpoonConfig = get_default_config(self.host, settings)
        self.data = data if data is not None else HarpoonData()
        self.extensions = HarpoonExtensions()
        self.ui = HarpoonUI(self.config.settings, self.extensions, surface_factory, sync=self.sync)
        self.lists: dict[str, dict[str, HarpoonList]] = {}

    @property
    def settings(self) -> Settings:
        return self.config.settings

    def key(self) -> str:
        return project_key(self.config.settings, self.host.cwd())

    def setup(self, partial: Mapping[str, Any] | None = None) -> Harpoon:
        """Merge ``partial`` into the session config.

        Lists already loaded pick up their new effective config.
        """
        self.config = merge_config(partial, self.config)
        self.ui.configure(self.config.settings)
        for lists in self.lists.values():
            for name, hlist in lists.items():
                hlist.config = get_config(self.config, name)
                hlist.track_changes = self.config.settings.save_on_change
        self.extensions.emit(EventName.SETUP_CALLED, SetupEvent(self.config))
        return self

    def list(self, name: str | None = None) -> HarpoonList:
        name = name or DEFAULT_LIST
        key = self.key()
        lists = self.lists.setdefault(key, {})

        existing = lists.get(name)
        if existing is not None:
            self.data.mark_seen(key, name)
            self.extensions.emit(EventName.LIST_READ, ListEvent(existing))
            return existing

        hlist = HarpoonList.decode(
            get_config(self.config, name),
            name,
            self.data.data(key, name),
            self.extensions,
            track_changes=self.config.settings.save_on_change,
        )
        lists[name] = hlist
        logger.debug("loaded list %s for %s with %d items", name, key, len(hlist))
        self.extensions.emit(EventName.LIST_CREATED, ListEvent(hlist))
        return hlist

    def for_each_list(self, visitor: ListVisitor) -> None:
        """Call ``visitor(list, config, name)`` for every list seen under the current key."""
        key = self.key()
        lists = self.lists.get(key, {})
        for name in sorted(self.data.seen.get(key, ())):
            hlist = lists.get(name)
            if hlist is None:
                continue
            visitor(hlist, hlist.config, name)

    def sync(self) -> None:
        """Encode every seen, persisted list and write the store."""
        key = self.key()

        def write(hlist: HarpoonList, config: ListConfig, name: str) -> None:
            if config.encode is False:
                return
            encoded = hlist.encode()
            if encoded is not None:
                self.data.update(key, name, encoded)

        self.for_each_list(write)
        self.data.sync()
        self.for_each_list(lambda hlist, _config, _name: setattr(hlist, "dirty", False))

    def sync_if_dirty(self) -> bool:
        dirty = False

        def check(hlist: HarpoonList, _config: ListConfig, _name: str) -> None:
            nonlocal dirty
            dirty = dirty or hlist.dirty

        self.for_each_list(check)
        if dirty:
            self.sync()
        return dirty

    def dispatch(self, event_name: str, payload: Any = None) -> None:
        """Forward a host lifecycle event to each seen list's hook.

        ``exit`` additionally syncs once every hook has run, even when a hook
        raises.
        """

        def run_hook(hlist: HarpoonList, config: ListConfig, name: str) -> None:
            hook = config.hooks.get(event_name)
            if hook is None:
                return
            logger.debug("running %s hook for %s", event_name, name)
            hook(payload, hlist)

        try:
            self.for_each_list(run_hook)
        finally:
            if event_name == EXIT:
                self.sync()

    def extend(self, listener: Mapping[EventName | str, Listener]) -> None:
        self.extensions.add_listener(listener)

    def dump(self) -> dict[str, dict[str, list[Any]]]:
        return self.data.dump()
