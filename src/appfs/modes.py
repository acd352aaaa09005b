from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum


class UniversalFileMode(IntEnum):
    CREATE_NEW = 1
    CREATE = 2
    OPEN = 3
    OPEN_OR_CREATE = 4
    TRUNCATE = 5
    APPEND = 6


class UniversalFileAccess(IntEnum):
    READ = 1
    WRITE = 2
    READ_WRITE = 3


class UniversalFileShare(IntEnum):
    NONE = 0
    READ = 1
    WRITE = 2
    READ_WRITE = 3
    DELETE = 4
    INHERITABLE = 5


@dataclass(frozen=True)
class UniversalFileInfo:
    """Metadata captured when the file was queried; not kept in sync afterwards."""

    creation_time: datetime
    last_access_time: datetime
    last_write_time: datetime
    length: int


__all__ = [
    "UniversalFileAccess",
    "UniversalFileInfo",
    "UniversalFileMode",
    "UniversalFileShare",
]
