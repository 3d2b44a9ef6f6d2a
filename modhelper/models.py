"""Core data types: application settings and games listed in a manifest."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

WINDOW_WIDTH = 600
WINDOW_HEIGHT = 400
APP_NAME = "Wesleys Profiles"
APP_VERSION = "v1.3.0"
APP_ID = "fyi.wesley.modhelper"


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _text_list(data: Mapping[str, Any], key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"field {key!r} must be a list of strings")
    return list(value)


@dataclass
class Config:
    """User settings: where the manifest lives and where profiles go."""

    manifest_url: str = ""
    target_dir: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Config":
        mapping = _require_mapping(data, "config")
        return cls(
            manifest_url=_text(mapping, "manifest_url"),
            target_dir=_text(mapping, "target_dir"),
        )

    def to_dict(self) -> dict[str, str]:
        return {"manifest_url": self.manifest_url, "target_dir": self.target_dir}


@dataclass
class Game:
    """A game entry from the profile manifest."""

    name: str = ""
    id: str = ""
    header: str = ""
    profile_name: str = ""
    url: str = ""
    launch_args: str = ""
    community: str = ""
    executable_names: list[str] = field(default_factory=list)
    version: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Game":
        mapping = _require_mapping(data, "game")
        return cls(
            name=_text(mapping, "name"),
            id=_text(mapping, "id"),
            header=_text(mapping, "icon"),
            profile_name=_text(mapping, "profileName"),
            url=_text(mapping, "url"),
            launch_args=_text(mapping, "launchArgs"),
            community=_text(mapping, "community"),
            executable_names=_text_list(mapping, "executableNames"),
            version=_text(mapping, "version"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "id": self.id,
            "icon": self.header,
            "profileName": self.profile_name,
            "url": self.url,
            "launchArgs": self.launch_args,
            "community": self.community,
            "executableNames": list(self.executable_names),
            "version": self.version,
        }