"""Steam installation, library and game process inspection."""

from __future__ import annotations

import glob
import logging
import os
import re
from dataclasses import dataclass

import psutil

from .models import Game

try:
    import winreg
except ImportError:
    winreg = None

log = logging.getLogger(__name__)

_INSTALL_DIR_LINE = re.compile(r'"installdir"\s+"(.+)"')
_APPID = re.compile(r'"appid"\s*"(\d+)"')
_NAME = re.compile(r'"name"\s*"([^"]+)"')
_INSTALL_DIR = re.compile(r'"installdir"\s*"([^"]+)"')


class SteamError(Exception):
    """Steam, a game or a game process could not be found or handled."""


@dataclass
class App:
    """An installed Steam application."""

    app_id: str = ""
    name: str = ""
    path: str = ""


def executable_patterns(game: Game) -> list[str]:
    """Return the executable file names a running game may have."""
    if game.executable_names:
        return list(game.executable_names)

    patterns = [
        game.name + ".exe",
        game.name.replace(" ", "") + ".exe",
        game.name.replace(" ", "_") + ".exe",
        game.name.replace(".", "") + ".exe",
    ]
    if game.name == "Lethal Company":
        patterns += ["Lethal Company.exe", "LethalCompany.exe"]
    elif game.name == "R.E.P.O.":
        patterns += ["R.E.P.O.exe", "REPO.exe"]
    return patterns


def _matching_processes(game: Game):
    wanted = {pattern.lower() for pattern in executable_patterns(game)}
    for process in psutil.process_iter(["name"]):
        name = process.info.get("name") or ""
        if name.lower() in wanted:
            yield process, name


def is_game_running(game: Game) -> bool:
    """Tell whether a process with one of the game's executable names runs."""
    try:
        return next(_matching_processes(game), None) is not None
    except psutil.Error:
        return False


def stop_game(game: Game) -> None:
    """Terminate the first process that belongs to the game."""
    try:
        found = next(_matching_processes(game), None)
    except psutil.Error as exc:
        raise SteamError(f"failed to enumerate processes: {exc}") from exc
    if found is None:
        raise SteamError("game process not found")

    process, name = found
    try:
        process.terminate()
    except psutil.Error as exc:
        raise SteamError(f"failed to terminate process {name}: {exc}") from exc


def get_game_status(game: Game, steam_apps: dict[str, App]) -> str:
    """Return "not_installed", "running" or "installed"."""
    if game.id not in steam_apps:
        return "not_installed"
    if is_game_running(game):
        return "running"
    return "installed"


def get_steam_path() -> str:
    """Read the Steam installation directory from the Windows registry."""
    if winreg is None:
        raise SteamError("Steam registry is only available on Windows")
    try:
        with winreg.OpenKey(
            winreg.HKEY_CURRENT_USER, r"Software\Valve\Steam", 0, winreg.KEY_QUERY_VALUE
        ) as key:
            value, _ = winreg.QueryValueEx(key, "SteamPath")
    except OSError as exc:
        raise SteamError(f"could not read Steam path from registry: {exc}") from exc
    return str(value)


def get_path() -> str:
    """Return the Steam installation directory."""
    return get_steam_path()


def library_folders(steam_path: str, require_exists: bool) -> list[str]:
    """Return the steamapps directories of all Steam libraries.

    The main library comes first; extra libraries come from
    libraryfolders.vdf, optionally only those that exist.
    """
    libraries = [os.path.join(steam_path, "steamapps")]
    library_file = os.path.join(steam_path, "steamapps", "libraryfolders.vdf")
    try:
        with open(library_file, encoding="utf-8", errors="replace") as handle:
            text = handle.read()
    except OSError:
        return libraries

    for line in text.split("\n"):
        if '"path"' not in line:
            continue
        parts = line.split('"')
        if len(parts) >= 4:
            library = os.path.join(parts[3], "steamapps")
            if not require_exists or os.path.exists(library):
                libraries.append(library)
    return libraries


def parse_install_dir(manifest: str) -> str:
    """Return the installdir value of an app manifest."""
    with open(manifest, encoding="utf-8", errors="replace") as handle:
        for line in handle:
            match = _INSTALL_DIR_LINE.search(line.rstrip("\r\n"))
            if match:
                return match.group(1)
    raise SteamError(f"installdir not found in {manifest}")


def find_game_exe(app_id: str, exe_name: str) -> str:
    """Find an executable of an installed app in any Steam library."""
    steam_path = get_steam_path()
    manifest_name = f"appmanifest_{app_id}.acf"
    for library in library_folders(steam_path, False):
        manifest = os.path.join(library, manifest_name)
        if not os.path.exists(manifest):
            continue
        try:
            install_dir = parse_install_dir(manifest)
        except (OSError, SteamError):
            continue
        exe_path = os.path.join(library, "common", install_dir, exe_name)
        if os.path.exists(exe_path):
            return exe_path
    raise SteamError(f"game {app_id} not found in any Steam library")


def get_apps() -> dict[str, App]:
    """Return all installed Steam apps keyed by app id."""
    try:
        steam_path = get_steam_path()
    except SteamError as exc:
        raise SteamError(f"failed to get Steam path: {exc}") from exc

    apps: dict[str, App] = {}
    for library in library_folders(steam_path, True):
        pattern = os.path.join(glob.escape(library), "appmanifest_*.acf")
        for manifest in sorted(glob.glob(pattern)):
            try:
                app = parse_app_manifest(manifest)
            except (OSError, SteamError):
                continue
            apps[app.app_id] = app
    return apps


def parse_app_manifest(manifest_path: str) -> App:
    """Read app id, name and install path from an appmanifest_*.acf file."""
    with open(manifest_path, encoding="utf-8", errors="replace") as handle:
        content = handle.read()

    app = App()
    if match := _APPID.search(content):
        app.app_id = match.group(1)
    if match := _NAME.search(content):
        app.name = match.group(1)
    if match := _INSTALL_DIR.search(content):
        app.path = os.path.join(os.path.dirname(manifest_path), "common", match.group(1))

    if not app.app_id or not app.name:
        raise SteamError("invalid manifest file")
    return app