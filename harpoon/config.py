"""Per-list-kind behavior resolution.

A list-kind is described by a capability record (:class:`ListConfig`). The
effective record for a list name is layered, highest priority first:

1. the named list block passed to ``setup()``
2. the ``default`` block
3. built-in file-bookmark behavior bound to a host

Fields are replaced wholesale, never combined. Values of the wrong shape are
skipped so the next layer down shows through.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from .extensions import EventName, PositionEvent
from .host import HOST_EVENTS, Host
from .item import ListItem
from .paths import absolute_path, normalize_path
from .settings import Settings, merge_settings

if TYPE_CHECKING:
    from .lists import HarpoonList

logger = logging.getLogger(__name__)

DEFAULT_LIST = "files"

HookFn = Callable[[Any, "HarpoonList"], None]


@dataclass(frozen=True)
class ListConfig:
    create_list_item: Callable[[ListConfig, Any], ListItem | None]
    select: Callable[[ListItem | None, HarpoonList, Mapping[str, Any] | None], None]
    display: Callable[[ListItem], str]
    encode: Callable[[ListItem], Any] | Literal[False]
    decode: Callable[[Any], ListItem]
    equals: Callable[[ListItem | None, ListItem | None], bool]
    get_root_dir: Callable[[], str]
    select_with_nil: bool = False
    allow_duplicates: bool = False
    hooks: Mapping[str, HookFn] = field(default_factory=dict)


_CALLABLE_FIELDS = frozenset(
    {"create_list_item", "select", "display", "decode", "equals", "get_root_dir"}
)
_BOOL_FIELDS = frozenset({"select_with_nil", "allow_duplicates"})


@dataclass
class HarpoonConfig:
    """Merged configuration state owned by one session."""

    settings: Settings
    builtin: dict[str, Any]
    default: dict[str, Any] = field(default_factory=dict)
    lists: dict[str, dict[str, Any]] = field(default_factory=dict)


def _value_equals(a: ListItem | None, b: ListItem | None) -> bool:
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    return a.value == b.value


def _display_value(item: ListItem) -> str:
    return str(item.value)


def _encode_file(item: ListItem) -> Any:
    if not item.context:
        return item.value
    return {"value": item.value, "context": dict(item.context)}


def _decode_file(encoded: Any) -> ListItem:
    if isinstance(encoded, Mapping):
        context = encoded.get("context")
        return ListItem(encoded.get("value"), dict(context) if isinstance(context, Mapping) else {})
    return ListItem(encoded)


def _context_int(context: Mapping[str, Any], name: str, default: int) -> int:
    """Cursor field from persisted context; anything but an int reads as ``default``."""
    value = context.get(name, default)
    if isinstance(value, bool) or not isinstance(value, int):
        logger.debug("ignoring bad %s in item context: %r", name, value)
        return default
    return value


def file_behaviors(host: Host) -> dict[str, Any]:
    """Built-in behavior: bookmarks of project files opened through ``host``."""

    def get_root_dir() -> str:
        return host.cwd()

    def create_list_item(config: ListConfig, name: Any = None) -> ListItem | None:
        root = config.get_root_dir()
        current = host.current_file()
        if name is None:
            if not current:
                return None
            row, col = host.cursor()
            return ListItem(normalize_path(current, root), {"row": row, "col": col})

        text = str(name).strip()
        if not text:
            return None
        value = normalize_path(text, root)
        if current and normalize_path(current, root) == value:
            row, col = host.cursor()
            return ListItem(value, {"row": row, "col": col})
        return ListItem(value)

    def select(item: ListItem | None, hlist: HarpoonList, options: Mapping[str, Any] | None = None) -> None:
        if item is None:
            return
        path = absolute_path(str(item.value), hlist.config.get_root_dir())
        row = max(1, _context_int(item.context, "row", 1))
        col = max(0, _context_int(item.context, "col", 0))

        clamped = False
        line_count = host.line_count(path)
        if line_count is not None and row > line_count:
            row = line_count
            clamped = True
        line_length = host.line_length(path, row)
        if line_length is not None and col > line_length:
            col = line_length
            clamped = True

        if clamped and item.context:
            item.context["row"] = row
            item.context["col"] = col
            hlist.extensions.emit(EventName.POSITION_UPDATED, PositionEvent(hlist, item))

        host.open_file(path, row, col, options)

    def on_buf_leave(event: Any, hlist: HarpoonList) -> None:
        path = getattr(event, "path", None)
        if not path:
            return
        item, _index = hlist.get_by_value(normalize_path(path, hlist.config.get_root_dir()))
        if item is None:
            return
        item.context["row"] = getattr(event, "row", 1)
        item.context["col"] = getattr(event, "col", 0)
        hlist.mark_dirty()
        hlist.extensions.emit(EventName.POSITION_UPDATED, PositionEvent(hlist, item))

    return {
        "select_with_nil": False,
        "allow_duplicates": False,
        "encode": _encode_file,
        "decode": _decode_file,
        "display": _display_value,
        "equals": _value_equals,
        "get_root_dir": get_root_dir,
        "create_list_item": create_list_item,
        "select": select,
        "buf_leave": on_buf_leave,
    }


def get_default_config(host: Host, settings: Settings | None = None) -> HarpoonConfig:
    return HarpoonConfig(settings=settings or Settings(), builtin=file_behaviors(host))


def merge_config(partial: Mapping[str, Any] | None, latest: HarpoonConfig) -> HarpoonConfig:
    """Layer a ``setup()`` table over ``latest`` and return the merged copy.

    ``settings`` and ``default`` update their blocks field by field; any other
    key names a list whose block is updated the same way.
    """
    merged = HarpoonConfig(
        settings=latest.settings,
        builtin=latest.builtin,
        default=dict(latest.default),
        lists={name: dict(block) for name, block in latest.lists.items()},
    )
    for key, block in (partial or {}).items():
        if not isinstance(block, Mapping):
            logger.debug("ignoring non-table config block %r", key)
            continue
        if key == "settings":
            merged.settings = merge_settings(merged.settings, block)
        elif key == "default":
            merged.default.update(block)
        else:
            merged.lists.setdefault(key, {}).update(block)
    return merged


def _accepts(name: str, value: Any) -> bool:
    if name in _CALLABLE_FIELDS:
        return callable(value)
    if name in _BOOL_FIELDS:
        return isinstance(value, bool)
    if name == "encode":
        return value is False or callable(value)
    return False


def get_config(config: HarpoonConfig, name: str) -> ListConfig:
    """Resolve the effective :class:`ListConfig` for list ``name``."""
    fields: dict[str, Any] = {}
    hooks: dict[str, HookFn] = {}
    for layer in (config.builtin, config.default, config.lists.get(name, {})):
        for key, value in layer.items():
            if key in HOST_EVENTS:
                if callable(value):
                    hooks[key] = value
            elif key == "hooks" and isinstance(value, Mapping):
                hooks.update({event: fn for event, fn in value.items() if callable(fn)})
            elif _accepts(key, value):
                fields[key] = value
            else:
                logger.debug("list %s: ignoring config field %s=%r", name, key, value)
    return ListConfig(hooks=hooks, **fields)
