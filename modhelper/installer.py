"""Downloading profile archives and installing them as r2modman profiles."""

from __future__ import annotations

import io
import logging
import os
import shutil
import tempfile
import time
import zipfile

import requests

from .config import get_game_profile_dir
from .extractor import extract_file
from .models import Game
from .profile_types import ExportR2X, ModEntry, ModInfo, dump_mods_yml, parse_export_r2x
from .profile_utils import get_profile_name
from .thunderstore import ThunderstoreError, download_and_extract_mod
from .versioning import save_profile_version, save_profile_version_in_mods_yml

log = logging.getLogger(__name__)

EXPORT_FILE_NAME = "export.r2x"
INSTALLATION_STATE = "currentState: []\n"


class InstallError(Exception):
    """A profile could not be downloaded or installed."""


def _clean_bepinex(bepinex_path: str) -> None:
    cache_path = os.path.join(bepinex_path, "cache")
    try:
        shutil.rmtree(cache_path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        log.warning("Failed to clean cache directory: %s", exc)

    log_path = os.path.join(bepinex_path, "LogOutput.log")
    try:
        os.remove(log_path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        log.info("Could not remove log file: %s", exc)


def _extract_members(archive: zipfile.ZipFile, root: str, skip: frozenset[str]) -> None:
    for info in archive.infolist():
        if info.is_dir() or info.filename in skip:
            continue
        dest_path = os.path.join(root, info.filename)
        dest_dir = os.path.dirname(dest_path)
        try:
            os.makedirs(dest_dir, exist_ok=True)
        except OSError as exc:
            raise InstallError(f"failed to create directory {dest_dir}: {exc}") from exc
        try:
            extract_file(archive, info.filename, dest_path)
        except OSError as exc:
            raise InstallError(f"failed to extract {info.filename}: {exc}") from exc


def download_and_install(game: Game, target_dir: str) -> None:
    """Download the game's profile archive and install it."""
    if not game.url:
        raise InstallError(f"no download URL for game {game.name}")

    log.info("Downloading profile for %s from %s", game.name, game.url)
    try:
        response = requests.get(game.url, timeout=60)
    except requests.RequestException as exc:
        raise InstallError(f"failed to download profile: {exc}") from exc
    if response.status_code != 200:
        raise InstallError(f"download failed with status: {response.status_code}")
    data = response.content
    log.info("Downloaded profile for %s (version: %s)", game.name, game.version)

    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise InstallError(f"failed to read ZIP data: {exc}") from exc

    profile_dir = get_game_profile_dir(game)

    with archive:
        is_r2z = EXPORT_FILE_NAME in archive.namelist()
        if is_r2z:
            log.info("Detected r2z file, processing with mod installation...")
            try:
                fd, temp_path = tempfile.mkstemp(prefix="profile_", suffix=".r2z")
            except OSError as exc:
                raise InstallError(f"failed to create temp file: {exc}") from exc
            try:
                try:
                    with os.fdopen(fd, "wb") as handle:
                        handle.write(data)
                except OSError as exc:
                    raise InstallError(f"failed to write temp file: {exc}") from exc
                try:
                    extract_and_install_r2z(temp_path, game, profile_dir)
                except (InstallError, OSError) as exc:
                    raise InstallError(f"failed to install r2z profile: {exc}") from exc
            finally:
                try:
                    os.remove(temp_path)
                except OSError:
                    pass
        else:
            log.info("Processing as regular ZIP file...")
            full_profile_path = os.path.join(profile_dir, game.profile_name)
            try:
                os.makedirs(full_profile_path, exist_ok=True)
            except OSError as exc:
                raise InstallError(f"failed to create profile directory: {exc}") from exc
            log.info("Installing profile to: %s", full_profile_path)
            _extract_members(archive, full_profile_path, frozenset())
            _clean_bepinex(os.path.join(full_profile_path, "BepInEx"))

    try:
        save_profile_version(game, target_dir)
    except OSError as exc:
        log.warning("Failed to save profile version file for %s: %s", game.name, exc)
    try:
        save_profile_version_in_mods_yml(game, target_dir)
    except OSError as exc:
        log.warning("Failed to save profile version in mods.yml for %s: %s", game.name, exc)

    log.info("Successfully installed profile for %s", game.name)


def extract_and_install_r2z(r2z_path: str, game: Game, target_dir: str) -> None:
    """Install an r2z archive as a profile under ``target_dir``.

    Extracts the archive's files, downloads the enabled mods it lists and
    writes the files r2modman expects.
    """
    profile_name = get_profile_name(game)
    profile_path = os.path.join(target_dir, profile_name)
    log.info("Processing r2z file for profile: %s", profile_path)

    try:
        archive = zipfile.ZipFile(r2z_path)
    except (OSError, zipfile.BadZipFile) as exc:
        raise InstallError(f"failed to open r2z file: {exc}") from exc

    with archive:
        try:
            os.makedirs(profile_path, exist_ok=True)
        except OSError as exc:
            raise InstallError(f"failed to create profile directory: {exc}") from exc

        if EXPORT_FILE_NAME not in archive.namelist():
            raise InstallError("export.r2x not found in r2z file")
        try:
            export = parse_export_r2x(archive.read(EXPORT_FILE_NAME))
        except (ValueError, UnicodeDecodeError) as exc:
            raise InstallError(f"failed to parse export.r2x: {exc}") from exc

        bepinex_path = os.path.join(profile_path, "BepInEx")
        plugins_path = os.path.join(bepinex_path, "plugins")
        for directory in (
            bepinex_path,
            plugins_path,
            os.path.join(bepinex_path, "config"),
            os.path.join(bepinex_path, "core"),
        ):
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as exc:
                raise InstallError(f"failed to create directory {directory}: {exc}") from exc

        _extract_members(archive, profile_path, frozenset({EXPORT_FILE_NAME}))

    log.info("Cleaning BepInEx cache to prevent startup issues...")
    _clean_bepinex(bepinex_path)

    state_path = os.path.join(profile_path, "_state")
    try:
        os.makedirs(state_path, exist_ok=True)
    except OSError as exc:
        raise InstallError(f"failed to create _state directory: {exc}") from exc
    try:
        with open(os.path.join(state_path, "installation_state.yml"), "w", encoding="utf-8") as fh:
            fh.write(INSTALLATION_STATE)
    except OSError as exc:
        raise InstallError(f"failed to create installation_state.yml: {exc}") from exc

    log.info("Downloading and installing mods from Thunderstore...")
    if not game.community:
        raise InstallError(f"no community found for game {game.name}")

    try:
        install_mods(export, plugins_path, game.community, profile_path)
    except InstallError as exc:
        raise InstallError(f"failed to download and install mods: {exc}") from exc

    try:
        create_mods_yml(export, profile_path)
    except OSError as exc:
        raise InstallError(f"failed to create mods.yml: {exc}") from exc

    winhttp_path = os.path.join(profile_path, "winhttp.dll")
    if not os.path.exists(winhttp_path):
        try:
            open(winhttp_path, "wb").close()
        except OSError as exc:
            log.warning("Could not create winhttp.dll placeholder: %s", exc)

    log.info("Successfully installed profile: %s", profile_name)


def _essential_files(profile_path: str) -> dict[str, list[str]]:
    join = os.path.join
    return {
        "BepInEx.Preloader.dll": [
            join(profile_path, "BepInEx", "core", "BepInEx.Preloader.dll"),
            join(profile_path, "config", "BepInEx.Preloader.dll"),
        ],
        "BepInEx.cfg": [
            join(profile_path, "config", "BepInEx.cfg"),
            join(profile_path, "BepInEx", "config", "BepInEx.cfg"),
            join(profile_path, "BepInEx.cfg"),
        ],
        "doorstop_config.ini": [
            join(profile_path, "doorstop_config.ini"),
            join(profile_path, "config", "doorstop_config.ini"),
        ],
        "installation_state.yml": [
            join(profile_path, "_state", "installation_state.yml"),
        ],
    }


def install_mods(
    export: ExportR2X, plugins_path: str, community: str, profile_path: str
) -> set[str]:
    """Install every enabled mod of an export and check the profile is usable.

    Mods that fail to install are logged and skipped. Returns the keys of the
    installed mods; raises InstallError if an essential file is missing.
    """
    if export is None:
        raise InstallError("export format is nil")

    enabled = {mod.key() for mod in export.mods if mod.enabled}
    log.info("Installing %d enabled mods...", len(enabled))

    installed: set[str] = set()
    for mod in export.mods:
        if not mod.enabled or mod.key() in installed:
            continue
        try:
            install_mod_with_dependencies(mod, plugins_path, community, installed)
        except (ThunderstoreError, OSError) as exc:
            log.warning("Failed to install mod %s: %s", mod.key(), exc)
            continue
        log.info("Installed mod: %s", mod.key())

    for file_name, candidates in _essential_files(profile_path).items():
        found = next((path for path in candidates if os.path.exists(path)), None)
        if found is None:
            log.error("Missing essential file: %s (checked: %s)", file_name, candidates)
            raise InstallError(f"essential file missing after installation: {file_name}")
        log.info("Found essential file: %s at %s", file_name, found)

    log.info("Successfully installed %d mods with r2modman compatibility", len(installed))
    return installed


def install_mod_with_dependencies(
    mod: ModInfo, plugins_path: str, community: str, installed_mods: set[str]
) -> None:
    """Download one mod unless it is already in ``installed_mods``, then record it."""
    key = mod.key()
    if key in installed_mods:
        return
    try:
        download_and_extract_mod(mod, plugins_path, community)
    except ThunderstoreError as exc:
        raise ThunderstoreError(f"failed to download mod {key}: {exc}") from exc
    installed_mods.add(key)


def create_mods_yml(export: ExportR2X, profile_path: str) -> list[ModEntry]:
    """Write a mods.yml describing every mod of the export and return its entries."""
    now = int(time.time()) * 1000
    entries: list[ModEntry] = []
    for mod in export.mods:
        parts = mod.name.split("-", 1)
        author_name, display_name = (parts[0], parts[1]) if len(parts) == 2 else (mod.name, mod.name)
        entries.append(
            ModEntry(
                manifest_version=1,
                name=mod.name,
                author_name=author_name,
                website_url="https://thunderstore.io/c/repo/p/%s/" % mod.name.replace("-", "/", 1),
                display_name=display_name,
                description="Mod installed by ModHelper",
                game_version="0",
                network_mode="both",
                package_type="other",
                install_mode="managed",
                installed_at_time=now,
                version_number=type(mod.version)(
                    mod.version.major, mod.version.minor, mod.version.patch
                ),
                enabled=mod.enabled,
                icon="",
            )
        )

    with open(os.path.join(profile_path, "mods.yml"), "w", encoding="utf-8") as handle:
        handle.write(dump_mods_yml(entries))
    log.info("Created mods.yml with %d mods", len(entries))
    return entries