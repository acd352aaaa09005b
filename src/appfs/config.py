from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from appfs.locations import StorageLocation


def _clean_env(value: str | None) -> str | None:
    if value is None:
        return None
    if "${" in value:
        return None
    value = value.strip()
    return value or None


def _env_bool(name: str, default: bool = False) -> bool:
    value = _clean_env(os.getenv(name))
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    value = _clean_env(os.getenv(name))
    if value is None:
        return default
    return Path(value).expanduser().resolve()


@dataclass(frozen=True)
class LocationRoots:
    bundle: Path
    internal: Path
    cache: Path
    external: Path

    def root_for(self, location: StorageLocation) -> Path:
        return getattr(self, location.value)


@dataclass(frozen=True)
class Settings:
    root: Path
    roots: LocationRoots
    allow_writes: bool
    debug: bool

    @property
    def log_file(self) -> Path:
        return self.root / "logs" / "appfs.log"


def resolve_roots(root: Path) -> LocationRoots:
    roots = LocationRoots(
        bundle=_env_path("APPFS_BUNDLE_PATH", root / "bundle"),
        internal=_env_path("APPFS_INTERNAL_PATH", root / "internal"),
        cache=_env_path("APPFS_CACHE_PATH", root / "cache"),
        external=_env_path("APPFS_EXTERNAL_PATH", root / "external"),
    )
    for location in StorageLocation:
        if not location.read_only:
            roots.root_for(location).mkdir(parents=True, exist_ok=True)
    return roots


def load_settings() -> Settings:
    root = _env_path("APPFS_ROOT", Path.home() / "AppFS")
    root.mkdir(parents=True, exist_ok=True)
    return Settings(
        root=root,
        roots=resolve_roots(root),
        allow_writes=_env_bool("APPFS_ALLOW_WRITES", default=False),
        debug=_env_bool("APPFS_DEBUG", default=False),
    )


__all__ = ["LocationRoots", "Settings", "load_settings", "resolve_roots"]
