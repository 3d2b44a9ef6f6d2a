"""Inspecting and removing installed game profiles."""

from __future__ import annotations

import logging
import os
import shutil

from .config import get_game_profile_dir
from .models import Game
from .profile_types import ProfileStatus
from .versioning import get_installed_profile_version, is_profile_up_to_date

log = logging.getLogger(__name__)

DEFAULT_PROFILE_NAME = "Default"


def get_profile_name(game: Game) -> str:
    """Return the profile name from the manifest, or "Default"."""
    return game.profile_name or DEFAULT_PROFILE_NAME


def is_installed(game: Game, target_dir: str) -> bool:
    """Tell whether the game's profile holds a mods.yml or a BepInEx folder."""
    profile_path = os.path.join(get_game_profile_dir(game), get_profile_name(game))
    if not os.path.exists(profile_path):
        return False
    return os.path.exists(os.path.join(profile_path, "mods.yml")) or os.path.exists(
        os.path.join(profile_path, "BepInEx")
    )


def get_actual_profile_name(game: Game) -> str:
    """Return the name of the profile directory that really exists on disk.

    Tries a few spellings of the manifest's name, then the game name and
    "Default"; falls back to the manifest's name when none exists.
    """
    profiles_dir = get_game_profile_dir(game)
    manifest_name = get_profile_name(game)

    if os.path.exists(os.path.join(profiles_dir, manifest_name)):
        return manifest_name

    variations = (
        manifest_name,
        manifest_name.rstrip("."),
        manifest_name.replace(".", ""),
        game.name,
        DEFAULT_PROFILE_NAME,
    )
    for variation in variations:
        if os.path.exists(os.path.join(profiles_dir, variation)):
            log.info(
                "Found actual profile directory: '%s' (manifest had: '%s')",
                variation, manifest_name,
            )
            return variation
    return manifest_name


def get_profile_status(game: Game, target_dir: str) -> ProfileStatus:
    """Report whether the profile is installed and whether it needs an update."""
    status = ProfileStatus(installed=is_installed(game, target_dir))
    if not status.installed:
        return status

    try:
        up_to_date = is_profile_up_to_date(game, target_dir)
    except (OSError, ValueError) as exc:
        status.version_error = exc
        status.up_to_date = True
        return status

    status.up_to_date = up_to_date
    status.has_update = not up_to_date
    log.info(
        "Version check for %s: installed='%s', manifest='%s', upToDate=%s, hasUpdate=%s",
        game.name, get_installed_profile_version(game, target_dir), game.version,
        up_to_date, status.has_update,
    )
    return status


def delete_profile(game: Game) -> None:
    """Remove the game's profile directory if it exists."""
    profile_path = os.path.join(get_game_profile_dir(game), game.profile_name)
    if not os.path.exists(profile_path):
        return

    log.info("Deleting profile directory: %s", profile_path)
    try:
        shutil.rmtree(profile_path)
    except OSError as exc:
        raise OSError(f"failed to delete profile directory: {exc}") from exc
    log.info("Successfully deleted profile for %s", game.name)