"""Data types for Thunderstore packages, r2modman exports and profile state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import yaml


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


def _str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer")
    return value


def _bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean")
    return value


def _str_list(data: Mapping[str, Any], key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list")
    return [str(item) for item in value]


def _list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list")
    return value


@dataclass
class ThunderstorePackageVersion:
    version_number: str = ""
    download_url: str = ""
    dependencies: list[str] = field(default_factory=list)
    file_size: int = 0
    full_name: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ThunderstorePackageVersion":
        mapping = _mapping(data, "package version")
        return cls(
            version_number=_str(mapping, "version_number"),
            download_url=_str(mapping, "download_url"),
            dependencies=_str_list(mapping, "dependencies"),
            file_size=_int(mapping, "file_size"),
            full_name=_str(mapping, "full_name"),
            description=_str(mapping, "description"),
        )


@dataclass
class ThunderstorePackage:
    full_name: str = ""
    name: str = ""
    owner: str = ""
    versions: list[ThunderstorePackageVersion] = field(default_factory=list)
    package_url: str = ""
    is_deprecated: bool = False

    @property
    def latest(self) -> Optional[ThunderstorePackageVersion]:
        """The newest version, which the API lists first."""
        return self.versions[0] if self.versions else None

    @classmethod
    def from_dict(cls, data: Any) -> "ThunderstorePackage":
        mapping = _mapping(data, "package")
        return cls(
            full_name=_str(mapping, "full_name"),
            name=_str(mapping, "name"),
            owner=_str(mapping, "owner"),
            versions=[ThunderstorePackageVersion.from_dict(v) for v in _list(mapping, "versions")],
            package_url=_str(mapping, "package_url"),
            is_deprecated=_bool(mapping, "is_deprecated"),
        )


@dataclass
class VersionNumber:
    major: int = 0
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def from_dict(cls, data: Any) -> "VersionNumber":
        mapping = _mapping(data, "version")
        return cls(
            major=_int(mapping, "major"),
            minor=_int(mapping, "minor"),
            patch=_int(mapping, "patch"),
        )

    def to_dict(self) -> dict[str, int]:
        return {"major": self.major, "minor": self.minor, "patch": self.patch}


@dataclass
class ModInfo:
    """A mod entry of an r2modman export."""

    name: str = ""
    version: VersionNumber = field(default_factory=VersionNumber)
    enabled: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> "ModInfo":
        mapping = _mapping(data, "mod")
        return cls(
            name=_str(mapping, "name"),
            version=VersionNumber.from_dict(mapping.get("version")),
            enabled=_bool(mapping, "enabled"),
        )

    def key(self) -> str:
        """Identify the mod as name-major.minor.patch."""
        return f"{self.name}-{self.version}"


@dataclass
class ExportR2X:
    """Contents of the export.r2x file inside an r2z profile archive."""

    profile_name: str = ""
    mods: list[ModInfo] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "ExportR2X":
        mapping = _mapping(data, "export")
        return cls(
            profile_name=_str(mapping, "profileName"),
            mods=[ModInfo.from_dict(m) for m in _list(mapping, "mods")],
        )

    @classmethod
    def from_yaml(cls, text: str) -> "ExportR2X":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"invalid export YAML: {exc}") from exc
        if data is None:
            raise ValueError("export document is empty")
        return cls.from_dict(data)


_MOD_ENTRY_FIELDS = (
    ("manifest_version", "manifestVersion"),
    ("name", "name"),
    ("author_name", "authorName"),
    ("website_url", "websiteUrl"),
    ("display_name", "displayName"),
    ("description", "description"),
    ("game_version", "gameVersion"),
    ("network_mode", "networkMode"),
    ("package_type", "packageType"),
    ("install_mode", "installMode"),
    ("installed_at_time", "installedAtTime"),
    ("loaders", "loaders"),
    ("dependencies", "dependencies"),
    ("incompatibilities", "incompatibilities"),
    ("optional_dependencies", "optionalDependencies"),
    ("version_number", "versionNumber"),
    ("enabled", "enabled"),
    ("icon", "icon"),
)


@dataclass
class ModEntry:
    """One entry of an r2modman mods.yml file."""

    manifest_version: int = 0
    name: str = ""
    author_name: str = ""
    website_url: str = ""
    display_name: str = ""
    description: str = ""
    game_version: str = ""
    network_mode: str = ""
    package_type: str = ""
    install_mode: str = ""
    installed_at_time: int = 0
    loaders: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    incompatibilities: list[str] = field(default_factory=list)
    optional_dependencies: list[str] = field(default_factory=list)
    version_number: VersionNumber = field(default_factory=VersionNumber)
    enabled: bool = False
    icon: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ModEntry":
        mapping = _mapping(data, "mods.yml entry")
        return cls(
            manifest_version=_int(mapping, "manifestVersion"),
            name=_str(mapping, "name"),
            author_name=_str(mapping, "authorName"),
            website_url=_str(mapping, "websiteUrl"),
            display_name=_str(mapping, "displayName"),
            description=_str(mapping, "description"),
            game_version=_str(mapping, "gameVersion"),
            network_mode=_str(mapping, "networkMode"),
            package_type=_str(mapping, "packageType"),
            install_mode=_str(mapping, "installMode"),
            installed_at_time=_int(mapping, "installedAtTime"),
            loaders=_str_list(mapping, "loaders"),
            dependencies=_str_list(mapping, "dependencies"),
            incompatibilities=_str_list(mapping, "incompatibilities"),
            optional_dependencies=_str_list(mapping, "optionalDependencies"),
            version_number=VersionNumber.from_dict(mapping.get("versionNumber")),
            enabled=_bool(mapping, "enabled"),
            icon=_str(mapping, "icon"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for attr, key in _MOD_ENTRY_FIELDS:
            value = getattr(self, attr)
            if isinstance(value, VersionNumber):
                value = value.to_dict()
            elif isinstance(value, list):
                value = list(value)
            result[key] = value
        return result


@dataclass
class ProfileVersion:
    """Contents of the .profile_version marker file."""

    url: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ProfileVersion":
        mapping = _mapping(data, "profile version")
        return cls(url=_str(mapping, "url"), version=_str(mapping, "version"))

    def to_dict(self) -> dict[str, str]:
        return {"url": self.url, "version": self.version}


@dataclass
class ProfileStatus:
    """Installation and freshness of a game's profile."""

    installed: bool = False
    up_to_date: bool = False
    has_update: bool = False
    install_error: Optional[Exception] = None
    version_error: Optional[Exception] = None


def load_mods_yml(text: str) -> list[ModEntry]:
    """Parse the text of a mods.yml file."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid mods.yml: {exc}") from exc
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError("mods.yml must contain a list")
    return [ModEntry.from_dict(item) for item in data]


def dump_mods_yml(entries: list[ModEntry]) -> str:
    """Render entries as mods.yml text."""
    return yaml.safe_dump(
        [entry.to_dict() for entry in entries],
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def parse_export_r2x(data: bytes | str) -> ExportR2X:
    """Parse the raw contents of an export.r2x file."""
    text = data.decode("utf-8") if isinstance(data, bytes) else data
    return ExportR2X.from_yaml(text)