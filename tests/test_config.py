import json
import os

import pytest

from modhelper import config
from modhelper.models import Config, Game


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("AppData", str(tmp_path / "appdata"))
    return tmp_path


def test_load_without_file_returns_defaults(workdir):
    loaded = config.load()
    assert loaded.manifest_url == config.DEFAULT_MANIFEST_URL
    assert loaded.target_dir == config.get_default_profile_dir()


def test_save_and_load_round_trip(workdir):
    original = Config(manifest_url="https://example.com/list.json", target_dir="D:/profiles")
    config.save(original)
    assert config.load() == original


def test_save_writes_indented_json(workdir):
    config.save(Config(manifest_url="u", target_dir="t"))
    text = (workdir / config.CONFIG_FILE_NAME).read_text(encoding="utf-8")
    assert json.loads(text) == {"manifest_url": "u", "target_dir": "t"}
    assert '\n  "manifest_url"' in text
    assert text.endswith("\n")


def test_load_invalid_json_raises(workdir):
    (workdir / config.CONFIG_FILE_NAME).write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        config.load()


def test_load_ignores_unknown_fields(workdir):
    (workdir / config.CONFIG_FILE_NAME).write_text(
        json.dumps({"manifest_url": "m", "target_dir": "t", "extra": 1}), encoding="utf-8"
    )
    assert config.load() == Config(manifest_url="m", target_dir="t")


def test_default_profile_dir_uses_appdata(monkeypatch, tmp_path):
    monkeypatch.setenv("AppData", str(tmp_path))
    assert config.get_default_profile_dir() == os.path.join(str(tmp_path), "r2modmanPlus-local")


def test_default_profile_dir_falls_back_to_home(monkeypatch, tmp_path):
    monkeypatch.delenv("AppData", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert config.get_default_profile_dir() == os.path.join(str(tmp_path), ".r2modmanPlus-local")


def test_game_profile_dir_strips_spaces_and_is_created(workdir):
    path = config.get_game_profile_dir(Game(name="Lethal Company"))
    assert path == os.path.join(config.get_default_profile_dir(), "LethalCompany", "profiles")
    assert os.path.isdir(path)


def test_game_profile_dir_trims_trailing_dots(workdir):
    path = config.get_game_profile_dir(Game(name="R.E.P.O."))
    assert os.path.basename(os.path.dirname(path)) == "R.E.P.O"
    assert os.path.isdir(path)