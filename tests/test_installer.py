import io
import zipfile

import pytest
import responses

from modhelper import thunderstore
from modhelper.installer import (
    InstallError,
    create_mods_yml,
    download_and_install,
    extract_and_install_r2z,
    install_mod_with_dependencies,
    install_mods,
)
from modhelper.models import Game
from modhelper.profile_types import ExportR2X, ModInfo, VersionNumber, load_mods_yml

PACKAGES_URL = "https://thunderstore.io/c/repo/api/v1/package/"
PACK_URL = "https://thunderstore.io/package/download/BepInEx/BepInExPack/5.4.2100/"
PROFILE_URL = "https://example.com/profile.zip"

EXPORT_YAML = """profileName: Test
mods:
  - name: BepInEx-BepInExPack
    version: {major: 5, minor: 4, patch: 2100}
    enabled: true
  - name: Someone-Disabled
    version: {major: 1, minor: 0, patch: 0}
    enabled: false
"""


def zip_bytes(files):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        for name, data in files.items():
            archive.writestr(name, data)
    return buf.getvalue()


def bepinex_pack():
    return zip_bytes({
        "BepInExPack/BepInEx/core/BepInEx.Preloader.dll": b"core",
        "BepInExPack/BepInEx/config/BepInEx.cfg": b"cfg",
        "BepInExPack/doorstop_config.ini": b"ini",
        "manifest.json": b"{}",
    })


PACKAGE_LIST = [
    {
        "full_name": "BepInEx-BepInExPack",
        "name": "BepInExPack",
        "owner": "BepInEx",
        "versions": [{"version_number": "5.4.2100", "download_url": PACK_URL}],
        "is_deprecated": False,
    }
]


@pytest.fixture
def app_data(monkeypatch, tmp_path):
    monkeypatch.setenv("AppData", str(tmp_path))
    thunderstore.clear_cache()
    yield tmp_path
    thunderstore.clear_cache()


@pytest.fixture
def http():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def profile_path(root, name="Test"):
    return root / "r2modmanPlus-local" / "TestGame" / "profiles" / name


def make_game(**kwargs):
    base = dict(name="Test Game", profile_name="Test", url=PROFILE_URL, version="3.1.0", community="repo")
    base.update(kwargs)
    return Game(**base)


def test_download_without_url_fails(app_data):
    with pytest.raises(InstallError, match="no download URL"):
        download_and_install(make_game(url=""), "")


def test_download_bad_status(app_data, http):
    http.add(responses.GET, PROFILE_URL, status=404)
    with pytest.raises(InstallError, match="404"):
        download_and_install(make_game(), "")


def test_download_invalid_zip(app_data, http):
    http.add(responses.GET, PROFILE_URL, body=b"not a zip")
    with pytest.raises(InstallError, match="ZIP"):
        download_and_install(make_game(), "")


def test_regular_zip_install(app_data, http):
    http.add(responses.GET, PROFILE_URL, body=zip_bytes({
        "BepInEx/plugins/a.dll": b"plugin",
        "BepInEx/cache/x.bin": b"cache",
        "BepInEx/LogOutput.log": b"log",
        "readme.txt": b"hello",
    }))
    download_and_install(make_game(), "")
    root = profile_path(app_data)
    assert (root / "BepInEx" / "plugins" / "a.dll").read_bytes() == b"plugin"
    assert (root / "readme.txt").read_bytes() == b"hello"
    assert not (root / "BepInEx" / "cache").exists()
    assert not (root / "BepInEx" / "LogOutput.log").exists()
    assert '"version":"3.1.0"' in (root / ".profile_version").read_text()
    entries = load_mods_yml((root / "mods.yml").read_text())
    assert entries[0].name == "_ProfileVersion"
    assert entries[0].game_version == "3.1.0"


def test_r2z_install(app_data, http):
    http.add(responses.GET, PROFILE_URL, body=zip_bytes({
        "export.r2x": EXPORT_YAML,
        "config/some.cfg": b"setting=1",
    }))
    http.add(responses.GET, PACKAGES_URL, json=PACKAGE_LIST)
    http.add(responses.GET, PACK_URL, body=bepinex_pack())

    download_and_install(make_game(), "")
    root = profile_path(app_data)
    assert (root / "config" / "some.cfg").read_bytes() == b"setting=1"
    assert not (root / "export.r2x").exists()
    assert (root / "_state" / "installation_state.yml").read_text() == "currentState: []\n"
    assert (root / "BepInEx" / "core" / "BepInEx.Preloader.dll").read_bytes() == b"core"
    assert (root / "winhttp.dll").read_bytes() == b""
    names = [e.name for e in load_mods_yml((root / "mods.yml").read_text())]
    assert names == ["_ProfileVersion", "BepInEx-BepInExPack", "Someone-Disabled"]


def test_r2z_without_export_fails(tmp_path):
    path = tmp_path / "p.r2z"
    path.write_bytes(zip_bytes({"config/a.cfg": b"x"}))
    with pytest.raises(InstallError, match="export.r2x not found"):
        extract_and_install_r2z(str(path), make_game(), str(tmp_path / "out"))


def test_r2z_without_community_fails(tmp_path):
    path = tmp_path / "p.r2z"
    path.write_bytes(zip_bytes({"export.r2x": EXPORT_YAML}))
    with pytest.raises(InstallError, match="no community"):
        extract_and_install_r2z(str(path), make_game(community=""), str(tmp_path / "out"))


def test_r2z_bad_file_fails(tmp_path):
    path = tmp_path / "p.r2z"
    path.write_bytes(b"garbage")
    with pytest.raises(InstallError, match="failed to open r2z"):
        extract_and_install_r2z(str(path), make_game(), str(tmp_path / "out"))


def test_install_mods_missing_essentials(tmp_path):
    export = ExportR2X(profile_name="Test", mods=[])
    with pytest.raises(InstallError, match="essential file missing"):
        install_mods(export, str(tmp_path / "BepInEx" / "plugins"), "repo", str(tmp_path))


def test_install_mods_skips_failures(app_data, http, tmp_path):
    http.add(responses.GET, PACKAGES_URL, json=PACKAGE_LIST)
    http.add(responses.GET, PACK_URL, body=bepinex_pack())
    profile = tmp_path / "profile"
    (profile / "_state").mkdir(parents=True)
    (profile / "_state" / "installation_state.yml").write_text("currentState: []\n")
    export = ExportR2X(mods=[
        ModInfo(name="BepInEx-BepInExPack", version=VersionNumber(5, 4, 2100), enabled=True),
        ModInfo(name="Nobody-Missing", version=VersionNumber(1, 0, 0), enabled=True),
        ModInfo(name="Someone-Off", version=VersionNumber(1, 0, 0), enabled=False),
    ])
    installed = install_mods(export, str(profile / "BepInEx" / "plugins"), "repo", str(profile))
    assert installed == {"BepInEx-BepInExPack-5.4.2100"}


def test_install_mod_already_installed_is_noop(tmp_path):
    mod = ModInfo(name="A-B", version=VersionNumber(1, 2, 3), enabled=True)
    installed = {mod.key()}
    install_mod_with_dependencies(mod, str(tmp_path), "repo", installed)
    assert installed == {"A-B-1.2.3"}
    assert list(tmp_path.iterdir()) == []


def test_create_mods_yml_round_trip(tmp_path):
    export = ExportR2X(mods=[
        ModInfo(name="Author-Mod-Name", version=VersionNumber(1, 2, 3), enabled=True),
        ModInfo(name="Plain", version=VersionNumber(0, 1, 0), enabled=False),
    ])
    returned = create_mods_yml(export, str(tmp_path))
    entries = load_mods_yml((tmp_path / "mods.yml").read_text())
    assert entries == returned
    first, second = entries
    assert (first.author_name, first.display_name) == ("Author", "Mod-Name")
    assert first.website_url == "https://thunderstore.io/c/repo/p/Author/Mod-Name/"
    assert first.version_number == VersionNumber(1, 2, 3)
    assert first.install_mode == "managed"
    assert first.enabled is True
    assert (second.author_name, second.display_name) == ("Plain", "Plain")
    assert second.enabled is False