"""List-kind for shell commands and the driver that runs them.

Selecting an item of a command list hands its command to a
:class:`TerminalDriver`; the list core never talks to the driver itself.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

from .item import ListItem

if TYPE_CHECKING:
    from .config import ListConfig
    from .lists import HarpoonList

logger = logging.getLogger(__name__)


class TerminalDriver(Protocol):
    def goto_target(self, target: Any) -> None: ...

    def send_command(self, target: Any, command: str | int) -> None: ...


class ShellDriver:
    """Runs commands in a subprocess rooted at the project directory.

    ``commands`` lets ``send_command`` accept a stored command's 1-based
    position instead of its text.
    """

    def __init__(self, cwd: Callable[[], str], commands: Callable[[], list[str]] | None = None) -> None:
        self._cwd = cwd
        self._commands = commands
        self.last_returncode: int | None = None

    def goto_target(self, target: Any) -> None:
        logger.debug("shell driver has no terminal to focus for %r", target)

    def _resolve(self, command: str | int) -> str | None:
        if isinstance(command, int):
            stored = self._commands() if self._commands is not None else []
            if not 1 <= command <= len(stored):
                logger.debug("no stored command at %d", command)
                return None
            return stored[command - 1]
        return command

    def send_command(self, target: Any, command: str | int) -> None:
        resolved = self._resolve(command)
        if not resolved:
            return
        logger.info("running %r in %s", resolved, self._cwd())
        proc = subprocess.run(resolved, shell=True, cwd=self._cwd(), check=False)
        self.last_returncode = proc.returncode


def command_list_config(driver: TerminalDriver) -> dict[str, Any]:
    """Partial list config for a list of shell commands."""

    def create_list_item(_config: ListConfig, command: Any = None) -> ListItem | None:
        if command is None:
            return None
        text = str(command).strip()
        return ListItem(text) if text else None

    def select(item: ListItem | None, hlist: HarpoonList, options: Mapping[str, Any] | None = None) -> None:
        if item is None:
            return
        target = (options or {}).get("target", hlist.current_index)
        driver.goto_target(target)
        driver.send_command(target, str(item.value))

    return {
        "create_list_item": create_list_item,
        "select": select,
        "display": lambda item: str(item.value),
        "encode": lambda item: item.value,
        "decode": lambda encoded: ListItem(str(encoded)),
        "allow_duplicates": False,
        "buf_leave": lambda _event, _hlist: None,
    }
