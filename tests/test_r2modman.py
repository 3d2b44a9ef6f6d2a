import os
import sys

import pytest

from modhelper import r2modman
from modhelper.r2modman import R2ModmanNotFoundError, find, get_default_path, get_version


def test_default_path_empty_off_windows(monkeypatch):
    monkeypatch.setattr(r2modman.sys, "platform", "linux")
    monkeypatch.setenv("LocalAppData", "/somewhere")
    assert get_default_path() == ""


def test_default_path_on_windows(monkeypatch, tmp_path):
    monkeypatch.setattr(r2modman.sys, "platform", "win32")
    monkeypatch.setenv("LocalAppData", str(tmp_path))
    assert get_default_path() == os.path.join(
        str(tmp_path), "Programs", "r2modman", "r2modman.exe"
    )


def test_default_path_without_local_app_data(monkeypatch):
    monkeypatch.setattr(r2modman.sys, "platform", "win32")
    monkeypatch.delenv("LocalAppData", raising=False)
    assert get_default_path() == ""


def test_find_off_windows(monkeypatch):
    monkeypatch.setattr(r2modman.sys, "platform", "linux")
    with pytest.raises(R2ModmanNotFoundError, match="only Windows is supported"):
        find()


def test_find_missing_exe(monkeypatch, tmp_path):
    monkeypatch.setattr(r2modman.sys, "platform", "win32")
    monkeypatch.setenv("LocalAppData", str(tmp_path))
    with pytest.raises(R2ModmanNotFoundError, match="r2modman.exe not found"):
        find()


def test_find_existing_exe(monkeypatch, tmp_path):
    monkeypatch.setattr(r2modman.sys, "platform", "win32")
    monkeypatch.setenv("LocalAppData", str(tmp_path))
    exe_dir = tmp_path / "Programs" / "r2modman"
    exe_dir.mkdir(parents=True)
    (exe_dir / "r2modman.exe").write_bytes(b"")
    assert find() == str(exe_dir / "r2modman.exe")


def test_get_version_returns_first_line():
    version = get_version(sys.executable)
    assert version.startswith("Python ")
    assert f"{sys.version_info.major}.{sys.version_info.minor}" in version
    assert "\n" not in version


def test_get_version_missing_executable(tmp_path):
    with pytest.raises(OSError):
        get_version(str(tmp_path / "does-not-exist"))