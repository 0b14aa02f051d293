"""Global settings: defaults, persisted JSON layers and project-key derivation.

Layering (lowest to highest priority): built-in defaults, the machine-local
cache file, the user settings file, then in-session ``setup()`` overrides.
All file access is defensive: a missing or malformed file is an empty layer.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import subprocess
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_cache_dir, user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "harpoon"
SETTINGS_FILENAME = "settings.json"
USER_SETTINGS_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / SETTINGS_FILENAME
CACHE_SETTINGS_PATH = Path(user_cache_dir(APP_NAME, appauthor=False)) / SETTINGS_FILENAME

KEY_STRATEGIES = ("cwd", "git_root", "git_remote")
GIT_TIMEOUT_SECONDS = 2.0


@dataclass
class Settings:
    save_on_toggle: bool = False
    sync_on_ui_close: bool = False
    save_on_change: bool = True
    key_strategy: str = "cwd"
    mark_branch: bool = False
    key: Callable[[], str] | None = None


_BOOL_FIELDS = frozenset({"save_on_toggle", "sync_on_ui_close", "save_on_change", "mark_branch"})


def merge_settings(settings: Settings, partial: Mapping[str, object] | None) -> Settings:
    """Return ``settings`` overridden by the recognized entries of ``partial``.

    Unknown names and values of the wrong type are dropped so a bad settings
    file never prevents startup.
    """
    if not partial:
        return settings
    changes: dict[str, object] = {}
    for name, value in partial.items():
        if name in _BOOL_FIELDS:
            if isinstance(value, bool):
                changes[name] = value
            else:
                logger.debug("ignoring non-boolean setting %s=%r", name, value)
        elif name == "key_strategy":
            if value in KEY_STRATEGIES:
                changes[name] = value
            else:
                logger.debug("ignoring unknown key strategy %r", value)
        elif name == "key":
            if value is None or callable(value):
                changes[name] = value
            else:
                logger.debug("ignoring non-callable key setting %r", value)
        else:
            logger.debug("ignoring unknown setting %s", name)
    return dataclasses.replace(settings, **changes)


def _read_layer(path: Path) -> dict[str, object]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception:
        logger.warning("could not read settings file %s", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("settings file %s does not hold a JSON object", path)
        return {}
    return data


def load_settings_layers() -> dict[str, object]:
    """Merge the cache and user settings files into one flat mapping."""
    merged: dict[str, object] = {}
    for path in (CACHE_SETTINGS_PATH, USER_SETTINGS_PATH):
        merged.update(_read_layer(path))
    return merged


def load_settings() -> Settings:
    return merge_settings(Settings(), load_settings_layers())


def _git_output(cwd: str, *args: str) -> str | None:
    try:
        proc = subprocess.run(
            ["git", "-C", cwd, *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if proc.returncode != 0:
        return None
    output = proc.stdout.strip()
    return output or None


def project_key(settings: Settings, cwd: str) -> str:
    """Derive the project key scoping which lists belong together."""
    if settings.key is not None:
        return settings.key()

    key = os.path.normpath(cwd)
    if settings.key_strategy == "git_root":
        key = _git_output(cwd, "rev-parse", "--show-toplevel") or key
    elif settings.key_strategy == "git_remote":
        key = _git_output(cwd, "config", "--get", "remote.origin.url") or key

    if settings.mark_branch:
        branch = _git_output(cwd, "rev-parse", "--abbrev-ref", "HEAD")
        if branch:
            key = f"{key}-{branch}"
    return key
