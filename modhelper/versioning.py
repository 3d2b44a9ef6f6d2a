"""Recording and comparing the version of an installed profile."""

from __future__ import annotations

import json
import logging
import os
import time

from .config import get_game_profile_dir
from .models import Game
from .profile_types import (
    ModEntry,
    ProfileVersion,
    VersionNumber,
    dump_mods_yml,
    load_mods_yml,
)

log = logging.getLogger(__name__)

VERSION_FILE_NAME = ".profile_version"
MODS_YML_NAME = "mods.yml"
VERSION_MARKER = "_ProfileVersion"


def _profile_file(game: Game, file_name: str) -> str:
    return os.path.join(get_game_profile_dir(game), game.profile_name, file_name)


def get_profile_version(game: Game) -> str:
    """Return the profile version the manifest advertises."""
    return game.version


def save_profile_version(game: Game, target_dir: str) -> None:
    """Write the .profile_version marker for an installed profile."""
    version_file = _profile_file(game, VERSION_FILE_NAME)
    data = ProfileVersion(url=game.url, version=game.version).to_dict()
    with open(version_file, "w", encoding="utf-8") as handle:
        handle.write(json.dumps(data, separators=(",", ":"), ensure_ascii=False))
    log.info("Saved profile version for %s: %s", game.name, game.version)


def get_installed_profile_version(game: Game, target_dir: str) -> str:
    """Return the installed profile version, or "" when it is unknown."""
    version_file = _profile_file(game, VERSION_FILE_NAME)
    try:
        with open(version_file, "rb") as handle:
            raw = handle.read()
    except OSError:
        raw = None

    if raw is not None:
        try:
            return ProfileVersion.from_dict(json.loads(raw.decode("utf-8"))).version
        except ValueError as exc:
            log.warning("Could not parse .profile_version for %s: %s", game.name, exc)

    try:
        return get_version_from_mods_yml(game, target_dir)
    except ValueError as exc:
        log.warning("Could not get version from mods.yml for %s: %s", game.name, exc)
        return ""


def is_profile_up_to_date(game: Game, target_dir: str) -> bool:
    """Tell whether the installed profile matches the manifest version."""
    if not game.url or not game.version:
        return True

    installed = get_installed_profile_version(game, target_dir)
    if not installed:
        return False

    up_to_date = installed == game.version
    if not up_to_date:
        log.info("Profile update available for %s: %s -> %s", game.name, installed, game.version)
    return up_to_date


def save_profile_version_in_mods_yml(game: Game, target_dir: str) -> None:
    """Put a version marker entry at the top of the profile's mods.yml."""
    mods_path = _profile_file(game, MODS_YML_NAME)

    existing: list[ModEntry] = []
    try:
        with open(mods_path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError:
        text = None
    if text is not None:
        try:
            existing = load_mods_yml(text)
        except ValueError as exc:
            log.warning("Could not parse existing mods.yml for %s: %s", game.name, exc)

    marker = ModEntry(
        manifest_version=1,
        name=VERSION_MARKER,
        author_name="ModHelper",
        website_url="",
        display_name=f"Profile Version {game.version}",
        description=f"Profile version marker for {game.name}",
        game_version=game.version,
        network_mode="none",
        package_type="other",
        install_mode="manual",
        installed_at_time=int(time.time()) * 1000,
        version_number=VersionNumber(1, 0, 0),
        enabled=False,
        icon="",
    )
    entries = [marker, *(mod for mod in existing if mod.name != VERSION_MARKER)]

    with open(mods_path, "w", encoding="utf-8") as handle:
        handle.write(dump_mods_yml(entries))
    log.info("Saved profile version %s in mods.yml for %s", game.version, game.name)


def get_version_from_mods_yml(game: Game, target_dir: str) -> str:
    """Read the version marker from mods.yml; "" when absent.

    Raises ValueError when the file exists but cannot be parsed.
    """
    mods_path = _profile_file(game, MODS_YML_NAME)
    try:
        with open(mods_path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError:
        return ""

    try:
        entries = load_mods_yml(text)
    except ValueError as exc:
        raise ValueError(f"failed to parse mods.yml: {exc}") from exc

    for entry in entries:
        if entry.name == VERSION_MARKER:
            return entry.game_version
    return ""