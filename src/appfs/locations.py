from __future__ import annotations

from enum import Enum


class StorageLocation(Enum):
    BUNDLE = "bundle"
    INTERNAL = "internal"
    CACHE = "cache"
    EXTERNAL = "external"

    @property
    def scheme(self) -> str:
        return self.value

    @property
    def read_only(self) -> bool:
        return self is StorageLocation.BUNDLE

    @classmethod
    def from_scheme(cls, scheme: str) -> "StorageLocation":
        normalized = scheme.strip().lower()
        for location in cls:
            if location.value == normalized:
                return location
        raise ValueError(f"Unknown storage location scheme: {scheme!r}")


DEFAULT_LOCATION = StorageLocation.INTERNAL

__all__ = ["DEFAULT_LOCATION", "StorageLocation"]
