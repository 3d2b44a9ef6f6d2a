"""Fetching the list of games from the profile manifest."""

from __future__ import annotations

import logging
import time

import requests

from .models import Game

log = logging.getLogger(__name__)


class ManifestError(Exception):
    """The manifest could not be fetched or parsed."""


def timestamped_url(manifest_url: str, timestamp: int) -> str:
    """Append a cache-busting ``t`` query parameter to the manifest URL."""
    separator = "&" if "?" in manifest_url else "?"
    return f"{manifest_url}{separator}t={timestamp}"


def fetch_games(manifest_url: str) -> list[Game]:
    """Download the manifest and return the games it lists."""
    url = timestamped_url(manifest_url, int(time.time()))
    log.info("Fetching manifest from: %s", url)

    try:
        response = requests.get(url, timeout=10)
    except requests.RequestException as exc:
        raise ManifestError(f"failed to fetch manifest: {exc}") from exc

    if response.status_code != 200:
        status = f"{response.status_code} {response.reason or ''}".strip()
        raise ManifestError(f"manifest request failed with status: {status}")

    try:
        data = response.json()
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError("expected a list of games")
        return [Game.from_dict(item) for item in data]
    except ValueError as exc:
        raise ManifestError(f"failed to parse manifest: {exc}") from exc