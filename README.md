# modhelper

A library for keeping shared r2modman mod profiles in sync for Steam games.
It reads a JSON manifest that lists games and their profile archives,
installs each profile into the r2modman profile directory (downloading the
listed mods from Thunderstore when the archive is an r2modman export),
records which profile version is installed, and tells when the manifest
publishes a newer one. It can also inspect the local Steam installation and
the processes of running games.

User-facing texts (`modhelper.messages.german()`) are in German.

## Installation

```
pip install .
```

## Modules

- `modhelper.models` – `Config` (manifest URL and target directory) and
  `Game` (one manifest entry), each with `from_dict` / `to_dict`.
- `modhelper.config` – `load()` and `save(config)` read and write
  `config.json` in the working directory; a missing file yields defaults.
  `get_default_profile_dir()` returns the r2modman data directory
  (`%AppData%\r2modmanPlus-local`, or `~/.r2modmanPlus-local` when `AppData`
  is unset) and `get_game_profile_dir(game)` the game's `profiles` folder.
- `modhelper.manifest` – `fetch_games(url)` downloads the manifest (with a
  cache-busting `t` query parameter) and returns a list of `Game`; failures
  raise `ManifestError`.
- `modhelper.installer` – `download_and_install(game, target_dir)` fetches the
  profile archive and installs it. A plain zip is unpacked into the profile
  folder; an r2z archive (one holding `export.r2x`) has its enabled mods
  downloaded from the game's Thunderstore community and gets a `mods.yml`,
  `_state/installation_state.yml` and a `winhttp.dll` placeholder. Failures
  raise `InstallError`.
- `modhelper.thunderstore` – package lookup with caching and retry on HTTP 429,
  package download, and unpacking of mods and BepInEx packs.
- `modhelper.versioning` – writes and reads the installed profile version
  (`.profile_version` and a `_ProfileVersion` entry in `mods.yml`) and compares
  it with the manifest.
- `modhelper.profile_utils` – `is_installed`, `get_profile_status`,
  `get_actual_profile_name` and `delete_profile`.
- `modhelper.steam` – reads the Steam path from the Windows registry, lists
  installed apps from the library manifests (`get_apps()`), finds game
  executables, and detects or terminates running game processes
  (`is_game_running`, `stop_game`).
- `modhelper.r2modman` – `find()` locates `r2modman.exe` (Windows only) and
  `get_version(exe)` runs it with `--version`.
- `modhelper.admin_ui` – `run_admin()` opens a tkinter form for the manifest URL
  and the target directory and saves them to `config.json`.

## Example

```python
from modhelper import config, manifest, profile_utils, installer

settings = config.load()
for game in manifest.fetch_games(settings.manifest_url):
    status = profile_utils.get_profile_status(game, settings.target_dir)
    if not status.installed or status.has_update:
        if status.has_update:
            profile_utils.delete_profile(game)
        installer.download_and_install(game, settings.target_dir)
```

The built-in default manifest URL is a placeholder at example.com; set a real
one with `config.save(...)` or through `run_admin()`.

## Manifest format

The manifest is a JSON array of games:

```json
[
  {
    "name": "Lethal Company",
    "id": "1966720",
    "icon": "https://example.com/header.jpg",
    "profileName": "Friends",
    "url": "https://example.com/friends.r2z",
    "launchArgs": "--doorstop-enable true",
    "community": "lethal-company",
    "executableNames": ["Lethal Company.exe"],
    "version": "3"
  }
]
```

Raising `version` makes `get_profile_status` report `has_update`.

## What this package does not do

It has no command to run and no game-list window: there is no entry point
that shows games, filters them or offers install, play and stop buttons.
It does not start games through Steam or pass profile launch arguments to
them, and it does not check for or install new releases of itself. The only
window it provides is the settings form of `modhelper.admin_ui.run_admin()`.

## Tests

```
pip install .[test]
pytest
```