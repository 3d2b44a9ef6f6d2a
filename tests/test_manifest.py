import pytest
import responses

from modhelper.manifest import ManifestError, fetch_games, timestamped_url
from modhelper.models import Game

URL = "https://example.com/manifest.json"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_timestamped_url_without_query():
    assert timestamped_url(URL, 42) == URL + "?t=42"


def test_timestamped_url_with_query():
    assert timestamped_url(URL + "?raw=1", 7) == URL + "?raw=1&t=7"


def test_fetch_games_parses_list(mocked):
    games = [
        Game(name="Lethal Company", id="1", url="https://example.com/p.zip", version="3"),
        Game(name="R.E.P.O.", id="2", executable_names=["REPO.exe"]),
    ]
    mocked.get(URL, json=[game.to_dict() for game in games])
    assert fetch_games(URL) == games
    assert "t=" in mocked.calls[0].request.url


def test_fetch_games_null_is_empty(mocked):
    mocked.get(URL, body="null", content_type="application/json")
    assert fetch_games(URL) == []


def test_fetch_games_bad_status(mocked):
    mocked.get(URL, status=404)
    with pytest.raises(ManifestError, match="404"):
        fetch_games(URL)


def test_fetch_games_invalid_json(mocked):
    mocked.get(URL, body="{not json")
    with pytest.raises(ManifestError, match="failed to parse manifest"):
        fetch_games(URL)


def test_fetch_games_object_is_rejected(mocked):
    mocked.get(URL, json={"name": "x"})
    with pytest.raises(ManifestError, match="failed to parse manifest"):
        fetch_games(URL)


def test_fetch_games_connection_error(mocked):
    with pytest.raises(ManifestError, match="failed to fetch manifest"):
        fetch_games("https://example.com/unregistered.json")