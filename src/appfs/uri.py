"""Location-qualified logical paths.

``FileUri`` and ``FolderUri`` are created by :class:`appfs.filesystem.FileSystem`,
which asks its platform backend for the absolute path once and stores it on the
value. Callers keep the value and hand it back to the facade; they should not
construct these types directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from appfs.locations import DEFAULT_LOCATION, StorageLocation

SCHEME_SEPARATOR = "://"


def normalize_logical_path(path: str) -> str:
    segments = [part for part in path.replace("\\", "/").split("/") if part and part != "."]
    return "/".join(segments)


def split_uri(uri: str) -> tuple[str, StorageLocation]:
    """Split ``"<scheme>://<path>"`` into a logical path and its location.

    A string without a scheme is a plain logical path in the default location.
    """
    scheme, sep, remainder = uri.partition(SCHEME_SEPARATOR)
    if not sep:
        return normalize_logical_path(uri), DEFAULT_LOCATION
    return normalize_logical_path(remainder), StorageLocation.from_scheme(scheme)


def format_uri(path: str, location: StorageLocation) -> str:
    return f"{location.scheme}{SCHEME_SEPARATOR}{path}"


@dataclass(frozen=True)
class _LocatedPath:
    location: StorageLocation
    path: str
    absolute_path: str = field(compare=False)

    @property
    def uri(self) -> str:
        return format_uri(self.path, self.location)

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def __str__(self) -> str:
        return self.uri


@dataclass(frozen=True)
class FileUri(_LocatedPath):
    pass


@dataclass(frozen=True)
class FolderUri(_LocatedPath):
    pass


__all__ = [
    "FileUri",
    "FolderUri",
    "SCHEME_SEPARATOR",
    "format_uri",
    "normalize_logical_path",
    "split_uri",
]
