"""Command-line front door for harpoon.

Parses CLI options, builds a session for the current project and runs one
list operation, then writes back any lists it changed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import DEFAULT_LIST
from .core import Harpoon
from .data import HarpoonData
from .errors import HarpoonError
from .host import TerminalHost
from .lists import HarpoonList
from .settings import load_settings
from .terminal import ShellDriver, command_list_config

COMMAND_LIST = "cmds"


def _positive_int(value: str) -> int:
    """argparse type for 1-based list positions."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="harpoon",
        description="Bookmark a few files or commands per project and jump back to them.",
    )
    parser.add_argument("--list", default=DEFAULT_LIST, help=f"List name (default: {DEFAULT_LIST}).")
    parser.add_argument("--key", default=None, help="Project key override (default: derived from cwd).")
    parser.add_argument("--data", type=Path, default=None, help="Path of the JSON data file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")

    commands = parser.add_subparsers(dest="command", required=True)
    add = commands.add_parser("add", help="Append an entry.")
    add.add_argument("entry")
    prepend = commands.add_parser("prepend", help="Insert an entry at the top.")
    prepend.add_argument("entry")
    remove = commands.add_parser("rm", help="Remove an entry by text or position.")
    remove.add_argument("entry")
    commands.add_parser("ls", help="Print the list.")
    select = commands.add_parser("select", help="Open the entry at a position.")
    select.add_argument("index", type=_positive_int)
    commands.add_parser("menu", help="Edit the list in $EDITOR.")
    commands.add_parser("clear", help="Remove every entry.")
    return parser


def create_harpoon(args: argparse.Namespace) -> Harpoon:
    host = TerminalHost()
    harpoon = Harpoon(host=host, data=HarpoonData(args.data), settings=load_settings())
    harpoon.setup(
        {COMMAND_LIST: command_list_config(ShellDriver(host.cwd, lambda: harpoon.list(COMMAND_LIST).display()))}
    )
    if args.key:
        harpoon.setup({"settings": {"key": lambda: args.key}})
    return harpoon


def _remove(hlist: HarpoonList, entry: str) -> None:
    if entry.isdigit():
        index = int(entry)
        if hlist.get(index) is None:
            raise SystemExit(f"No entry at position {index}.")
        hlist.remove_at(index)
        return
    before = len(hlist)
    hlist.remove(entry)
    if len(hlist) == before:
        raise SystemExit(f"Not in list: {entry}")


def _print_list(hlist: HarpoonList) -> None:
    for index, line in enumerate(hlist.display(), start=1):
        sys.stdout.write(f"{index:>3}  {line}\n")


def _edit_menu(harpoon: Harpoon, hlist: HarpoonList) -> None:
    harpoon.ui.toggle_quick_menu(hlist)
    try:
        harpoon.ui.save()
    finally:
        harpoon.ui.close_menu()


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    harpoon = create_harpoon(args)
    hlist = harpoon.list(args.list)
    try:
        if args.command == "add":
            hlist.append(args.entry)
        elif args.command == "prepend":
            hlist.prepend(args.entry)
        elif args.command == "rm":
            _remove(hlist, args.entry)
        elif args.command == "ls":
            _print_list(hlist)
        elif args.command == "select":
            if hlist.get(args.index) is None:
                raise SystemExit(f"No entry at position {args.index}.")
            hlist.select(args.index)
        elif args.command == "menu":
            _edit_menu(harpoon, hlist)
        elif args.command == "clear":
            hlist.clear()
        harpoon.sync_if_dirty()
    except (HarpoonError, RuntimeError) as exc:
        raise SystemExit(str(exc)) from exc
