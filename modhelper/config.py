"""Loading and saving user settings and locating profile directories."""

from __future__ import annotations

import json
import logging
import os

from .models import Config, Game

log = logging.getLogger(__name__)

DEFAULT_MANIFEST_URL = "https://example.com/modhelper/manifest.json"
CONFIG_FILE_NAME = "config.json"


def load() -> Config:
    """Read the settings file from the working directory.

    A missing or unreadable file yields the default settings; a file that is
    not valid JSON raises ValueError.
    """
    try:
        handle = open(CONFIG_FILE_NAME, encoding="utf-8")
    except OSError:
        return Config(manifest_url=DEFAULT_MANIFEST_URL, target_dir=get_default_profile_dir())
    with handle:
        data = json.load(handle)
    return Config.from_dict(data)


def save(config: Config) -> None:
    """Write the settings file to the working directory."""
    with open(CONFIG_FILE_NAME, "w", encoding="utf-8") as handle:
        json.dump(config.to_dict(), handle, indent=2, ensure_ascii=False)
        handle.write("\n")


def get_default_profile_dir() -> str:
    """Return the r2modman local data directory for this user."""
    app_data = os.environ.get("AppData", "")
    if not app_data:
        return os.path.join(os.environ.get("HOME", ""), ".r2modmanPlus-local")
    return os.path.join(app_data, "r2modmanPlus-local")


def get_game_profile_dir(game: Game) -> str:
    """Return (and create) the profiles directory for a game."""
    game_dir = game.name.replace(" ", "").rstrip(".")
    profiles_dir = os.path.join(get_default_profile_dir(), game_dir, "profiles")
    try:
        os.makedirs(profiles_dir, exist_ok=True)
    except OSError as exc:
        log.warning("Could not create profiles directory %s: %s", profiles_dir, exc)
    return profiles_dir