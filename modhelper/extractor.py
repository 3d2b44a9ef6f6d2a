"""Writing members of zip archives to disk."""

from __future__ import annotations

import logging
import os
import shutil
import zipfile

log = logging.getLogger(__name__)


def extract_file_to_path(archive: zipfile.ZipFile, name: str, output_path: str) -> None:
    """Write one archive member to ``output_path``, creating parent directories.

    Directory entries only create the directory that holds them.
    """
    with archive.open(name) as source:
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
        if name.endswith("/"):
            return
        with open(output_path, "wb") as target:
            shutil.copyfileobj(source, target)


def extract_file(archive: zipfile.ZipFile, name: str, dest_path: str) -> None:
    """Write one archive member to ``dest_path``; the directory must exist."""
    with archive.open(name) as source, open(dest_path, "wb") as target:
        shutil.copyfileobj(source, target)


def extract_config_files(archive: zipfile.ZipFile, config_path: str) -> None:
    """Extract every file under ``config/`` into ``config_path``."""
    for name in archive.namelist():
        if not name.startswith("config/"):
            continue
        relative = name[len("config/"):]
        if not relative or relative.endswith("/"):
            continue
        output_path = os.path.join(config_path, relative)
        try:
            extract_file_to_path(archive, name, output_path)
        except OSError as exc:
            raise OSError(f"failed to extract config file {name}: {exc}") from exc
        log.info("Extracted config: %s", relative)


def extract_other_files(archive: zipfile.ZipFile, profile_path: str) -> None:
    """Extract the files that are neither config, BepInEx nor the export file."""
    for name in archive.namelist():
        if (
            name.endswith("/")
            or name.startswith("config/")
            or name.startswith("bepinex/")
            or name.lower() == "export.r2x"
        ):
            continue
        output_path = os.path.join(profile_path, name)
        try:
            extract_file_to_path(archive, name, output_path)
        except OSError as exc:
            raise OSError(f"failed to extract file {name}: {exc}") from exc
        log.info("Extracted file: %s", name)