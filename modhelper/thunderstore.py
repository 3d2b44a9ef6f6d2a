"""Looking up, downloading and unpacking Thunderstore mod packages."""

from __future__ import annotations

import logging
import os
import posixpath
import random
import tempfile
import threading
import time
import zipfile

import requests

from .extractor import extract_file_to_path
from .profile_types import ModInfo, ThunderstorePackage

log = logging.getLogger(__name__)

_MAX_RETRIES = 3
_METADATA_FILES = frozenset({"manifest.json", "icon.png", "README.md", "CHANGELOG.md"})
_CORE_FILE_NAMES = frozenset(
    name.lower()
    for name in (
        "BepInEx.dll", "BepInEx.Preloader.dll", "BepInEx.Harmony.dll",
        "0Harmony.dll", "0Harmony20.dll", "HarmonyXInterop.dll",
        "Mono.Cecil.dll", "Mono.Cecil.Mdb.dll", "Mono.Cecil.Pdb.dll", "Mono.Cecil.Rocks.dll",
        "MonoMod.RuntimeDetour.dll", "MonoMod.Utils.dll",
    )
)

_package_cache: dict[str, ThunderstorePackage] = {}
_cache_lock = threading.RLock()


class ThunderstoreError(Exception):
    """A package could not be found, fetched or unpacked."""


class RateLimitError(ThunderstoreError):
    """The Thunderstore API answered with HTTP 429."""


def clear_cache() -> None:
    """Forget all package lookups made so far."""
    with _cache_lock:
        _package_cache.clear()


def get_package(full_name: str, community: str) -> ThunderstorePackage:
    """Look up ``namespace-name`` in a community's package list."""
    parts = full_name.split("-", 1)
    if len(parts) != 2:
        raise ThunderstoreError(
            f"invalid package name format: {full_name} (expected namespace-name)"
        )
    namespace, name = parts
    url = f"https://thunderstore.io/c/{community}/api/v1/package/"

    try:
        response = requests.get(url, timeout=30)
    except requests.RequestException as exc:
        raise ThunderstoreError(f"failed to fetch packages for {community}: {exc}") from exc

    with response:
        if response.status_code == 429:
            raise RateLimitError(f"rate limited (429) for community {community}")
        if response.status_code != 200:
            raise ThunderstoreError(
                f"failed to fetch packages for community {community}: "
                f"status {response.status_code}"
            )
        try:
            data = response.json()
            if not isinstance(data, list):
                raise ValueError("expected a list of packages")
            packages = [ThunderstorePackage.from_dict(item) for item in data]
        except ValueError as exc:
            raise ThunderstoreError(
                f"failed to parse packages response for {community}: {exc}"
            ) from exc

    for package in packages:
        if package.owner == namespace and package.name == name:
            if package.is_deprecated:
                log.warning("Package %s is deprecated", full_name)
            return package

    raise ThunderstoreError(f"package {full_name} not found in community {community}")


def _is_rate_limited(exc: Exception) -> bool:
    message = str(exc)
    return isinstance(exc, RateLimitError) or "429" in message or "rate limit" in message


def get_package_with_retry(full_name: str, community: str) -> ThunderstorePackage:
    """Look up a package, using the cache and retrying when rate limited."""
    cache_key = f"{community}-{full_name}"
    with _cache_lock:
        cached = _package_cache.get(cache_key)
    if cached is not None:
        log.info("Using cached package info for: %s", full_name)
        return cached

    base_delay, max_delay = 1.0, 30.0
    last_error: ThunderstoreError | None = None
    for attempt in range(_MAX_RETRIES):
        if attempt > 0:
            delay = min(base_delay * (1 << attempt), max_delay)
            jitter = random.uniform(0, delay / 2)
            delay = delay + jitter - delay / 4
            log.info(
                "Rate limited, retrying in %.2fs (attempt %d/%d)",
                delay, attempt + 1, _MAX_RETRIES,
            )
            time.sleep(delay)

        try:
            package = get_package(full_name, community)
        except ThunderstoreError as exc:
            last_error = exc
            if _is_rate_limited(exc):
                continue
            raise
        with _cache_lock:
            _package_cache[cache_key] = package
        return package

    raise ThunderstoreError(
        f"failed after {_MAX_RETRIES} retries: {last_error}"
    ) from last_error


def download_and_extract_mod(mod: ModInfo, plugins_path: str, community: str) -> None:
    """Download the mod named in an export entry and unpack it."""
    download_and_install_mod(mod.name, str(mod.version), plugins_path, community)


def download_and_install_mod(
    full_name: str, version: str, plugins_path: str, community: str
) -> None:
    """Download the latest version of a package and unpack it into the profile."""
    try:
        package = get_package_with_retry(full_name, community)
    except ThunderstoreError as exc:
        raise ThunderstoreError(f"failed to get package info for {full_name}: {exc}") from exc

    latest = package.latest
    if latest is None:
        raise ThunderstoreError(f"package {full_name} has no versions")

    if latest.version_number != version:
        log.warning(
            "Requested version %s not available for %s, using latest %s",
            version, full_name, latest.version_number,
        )
    log.info("Downloading mod: %s v%s", full_name, latest.version_number)

    try:
        package_file = download_mod_package_with_retry(latest.download_url, full_name)
    except ThunderstoreError as exc:
        raise ThunderstoreError(f"failed to download package {full_name}: {exc}") from exc

    try:
        extract_mod_to_plugins(package_file, full_name, plugins_path)
    finally:
        try:
            os.remove(package_file)
        except OSError:
            pass


def download_mod_package_with_retry(download_url: str, full_name: str) -> str:
    """Download a package archive to a temporary file and return its path."""
    base_delay = 2.0
    last_error: Exception | None = None
    prefix = f"mod_{full_name.replace('-', '_')}_"

    for attempt in range(_MAX_RETRIES):
        if attempt > 0:
            delay = base_delay * (1 << (attempt - 1))
            delay += random.uniform(0, delay / 4)
            log.info(
                "Download failed, retrying in %.2fs (attempt %d/%d)",
                delay, attempt + 1, _MAX_RETRIES,
            )
            time.sleep(delay)

        try:
            response = requests.get(download_url, timeout=60, stream=True)
        except requests.RequestException as exc:
            last_error = ThunderstoreError(f"HTTP request failed: {exc}")
            continue

        with response:
            if response.status_code != 200:
                last_error = ThunderstoreError(
                    f"HTTP {response.status_code}: {response.reason}"
                )
                if response.status_code == 429:
                    continue
                raise last_error

            try:
                fd, path = tempfile.mkstemp(prefix=prefix, suffix=".zip")
            except OSError as exc:
                raise ThunderstoreError(f"failed to create temp file: {exc}") from exc

            try:
                with os.fdopen(fd, "wb") as handle:
                    for chunk in response.iter_content(chunk_size=32 * 1024):
                        handle.write(chunk)
            except (requests.RequestException, OSError) as exc:
                try:
                    os.remove(path)
                except OSError:
                    pass
                last_error = ThunderstoreError(f"failed to download: {exc}")
                continue
            return path

    raise ThunderstoreError(
        f"failed to download {full_name} after {_MAX_RETRIES} attempts: {last_error}"
    ) from last_error


def extract_mod_to_plugins(package_path: str, full_name: str, plugins_path: str) -> None:
    """Unpack a mod archive; BepInEx packs go to the profile's BepInEx tree."""
    try:
        archive = zipfile.ZipFile(package_path)
    except (OSError, zipfile.BadZipFile) as exc:
        raise ThunderstoreError(f"failed to open mod package {full_name}: {exc}") from exc

    with archive:
        if "bepinex" in full_name.lower():
            extract_bepinex_pack(archive, plugins_path, full_name)
            return

        log.info("Extracting mod: %s", full_name)
        for name in archive.namelist():
            if name.endswith("/"):
                continue
            base = posixpath.basename(name)
            if base in _METADATA_FILES:
                continue
            if base.lower().endswith(".dll"):
                output_path = os.path.join(plugins_path, full_name, base)
            else:
                output_path = os.path.join(plugins_path, full_name, name)
            try:
                extract_file_to_path(archive, name, output_path)
            except OSError as exc:
                raise ThunderstoreError(f"failed to extract file {name}: {exc}") from exc
            log.info("Extracted mod file: %s -> %s", name, output_path)


def extract_bepinex_pack(archive: zipfile.ZipFile, plugins_path: str, full_name: str) -> None:
    """Unpack a BepInEx pack into the profile that owns ``plugins_path``."""
    profile_path = os.path.dirname(os.path.dirname(plugins_path))
    bepinex_path = os.path.join(profile_path, "BepInEx")
    core_path = os.path.join(bepinex_path, "core")
    try:
        os.makedirs(core_path, exist_ok=True)
    except OSError as exc:
        raise ThunderstoreError(f"failed to create BepInEx core directory: {exc}") from exc

    log.info("Extracting BepInEx pack: %s", full_name)
    extracted_any_core = False

    for name in archive.namelist():
        if name.endswith("/"):
            continue
        base = posixpath.basename(name)
        if base in _METADATA_FILES:
            continue

        output_path = ""
        lower_base = base.lower()
        if "/core/" in name:
            output_path = os.path.join(core_path, name.split("/core/")[-1])
            extracted_any_core = True
        elif "BepInExPack/" in name and "/BepInEx/" in name:
            output_path = os.path.join(bepinex_path, name.split("/BepInEx/", 1)[1])
        elif base in ("doorstop_config.ini", "winhttp.dll"):
            output_path = os.path.join(profile_path, base)
        elif lower_base.endswith(".dll"):
            if lower_base in _CORE_FILE_NAMES:
                extracted_any_core = True
            output_path = os.path.join(core_path, base)
        elif lower_base.endswith(".xml"):
            output_path = os.path.join(core_path, base)

        if output_path:
            try:
                extract_file_to_path(archive, name, output_path)
            except OSError as exc:
                raise ThunderstoreError(
                    f"failed to extract BepInEx file {name}: {exc}"
                ) from exc
            log.info("Extracted BepInEx file: %s -> %s", name, output_path)

    if not extracted_any_core:
        log.warning("No core files were extracted from BepInEx package %s", full_name)