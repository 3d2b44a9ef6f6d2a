"""Locating the r2modman mod manager and asking for its version."""

from __future__ import annotations

import os
import subprocess
import sys


class R2ModmanNotFoundError(Exception):
    """r2modman is not installed where it is expected."""


def get_default_path() -> str:
    """Return the usual r2modman.exe path, or "" off Windows."""
    if sys.platform != "win32":
        return ""
    local_app_data = os.environ.get("LocalAppData", "")
    if not local_app_data:
        return ""
    return os.path.join(local_app_data, "Programs", "r2modman", "r2modman.exe")


def find() -> str:
    """Return the path of an installed r2modman.exe."""
    exe = get_default_path()
    if not exe:
        raise R2ModmanNotFoundError("only Windows is supported")
    if not os.path.exists(exe):
        raise R2ModmanNotFoundError(f"r2modman.exe not found at {exe}")
    return exe


def get_version(exe: str) -> str:
    """Run ``exe --version`` and return the first line it prints."""
    completed = subprocess.run(
        [exe, "--version"],
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        check=False,
    )
    lines = completed.stdout.decode("utf-8", errors="replace").splitlines()
    return lines[0] if lines else ""