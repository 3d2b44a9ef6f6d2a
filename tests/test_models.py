import json

import pytest

from modhelper.models import APP_NAME, APP_VERSION, Config, Game


def test_config_round_trip():
    config = Config(manifest_url="https://example.com/m.json", target_dir="/tmp/profiles")
    assert Config.from_dict(config.to_dict()) == config


def test_config_uses_json_keys():
    config = Config.from_dict({"manifest_url": "a", "target_dir": "b"})
    assert config.manifest_url == "a"
    assert config.target_dir == "b"
    assert set(config.to_dict()) == {"manifest_url", "target_dir"}


def test_config_missing_fields_default_to_empty():
    assert Config.from_dict({}) == Config()


def test_config_rejects_non_object():
    with pytest.raises(ValueError):
        Config.from_dict(["not", "an", "object"])


def test_game_from_manifest_keys():
    data = {
        "name": "Lethal Company",
        "id": "1966720",
        "icon": "https://example.com/header.jpg",
        "profileName": "Friends",
        "url": "https://example.com/profile.r2z",
        "launchArgs": "--doorstop-enable true",
        "community": "lethal-company",
        "executableNames": ["Lethal Company.exe"],
        "version": "2",
    }
    game = Game.from_dict(data)
    assert game.header == data["icon"]
    assert game.profile_name == "Friends"
    assert game.launch_args == data["launchArgs"]
    assert game.executable_names == ["Lethal Company.exe"]
    assert game.to_dict() == data


def test_game_round_trip_through_json():
    game = Game(name="R.E.P.O.", id="3241660", executable_names=["REPO.exe"], version="1")
    restored = Game.from_dict(json.loads(json.dumps(game.to_dict())))
    assert restored == game


def test_game_null_fields_become_empty():
    game = Game.from_dict({"name": "X", "executableNames": None, "url": None})
    assert game.executable_names == []
    assert game.url == ""


def test_game_rejects_wrong_type():
    with pytest.raises(ValueError):
        Game.from_dict({"name": 5})


def test_app_constants_from_source():
    assert APP_NAME == "Wesleys Profiles"
    assert APP_VERSION.startswith("v")