from __future__ import annotations

import errno
import logging
import mimetypes
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO

from appfs.config import LocationRoots
from appfs.locations import StorageLocation
from appfs.modes import UniversalFileAccess, UniversalFileInfo, UniversalFileMode, UniversalFileShare
from appfs.uri import SCHEME_SEPARATOR, FileUri, FolderUri

try:
    import fcntl
except ImportError:  # pragma: no cover - no advisory flock on Windows
    fcntl = None

logger = logging.getLogger(__name__)

_MODE_FLAGS = {
    UniversalFileMode.CREATE_NEW: os.O_CREAT | os.O_EXCL,
    UniversalFileMode.CREATE: os.O_CREAT,
    UniversalFileMode.OPEN: 0,
    UniversalFileMode.OPEN_OR_CREATE: os.O_CREAT,
    UniversalFileMode.TRUNCATE: 0,
    UniversalFileMode.APPEND: os.O_CREAT | os.O_APPEND,
}

# Truncation waits until the share lock is held.
_TRUNCATING_MODES = frozenset({UniversalFileMode.CREATE, UniversalFileMode.TRUNCATE})

_ACCESS_FLAGS = {
    UniversalFileAccess.READ: os.O_RDONLY,
    UniversalFileAccess.WRITE: os.O_WRONLY,
    UniversalFileAccess.READ_WRITE: os.O_RDWR,
}


def _timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _stream_mode(mode: UniversalFileMode, access: UniversalFileAccess) -> str:
    if access == UniversalFileAccess.READ:
        return "rb"
    if access == UniversalFileAccess.READ_WRITE:
        return "r+b"
    if mode == UniversalFileMode.APPEND:
        return "ab"
    return "wb"


def _validate_open_request(mode: UniversalFileMode, access: UniversalFileAccess) -> None:
    if mode == UniversalFileMode.APPEND and access != UniversalFileAccess.WRITE:
        raise ValueError("Append mode requires write-only access")
    if mode in _TRUNCATING_MODES and access == UniversalFileAccess.READ:
        raise ValueError(f"{mode.name.title()} mode requires write access")


def _apply_share(fd: int, share: UniversalFileShare) -> None:
    if share == UniversalFileShare.INHERITABLE:
        os.set_inheritable(fd, True)
        return
    if fcntl is None:
        return
    if share == UniversalFileShare.NONE:
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
    elif share == UniversalFileShare.READ:
        fcntl.flock(fd, fcntl.LOCK_SH | fcntl.LOCK_NB)


class LocalFileSystemPlatform:
    """Backend that maps every storage location onto a directory on local disk."""

    def __init__(self, roots: LocationRoots) -> None:
        self._roots = roots

    @property
    def roots(self) -> LocationRoots:
        return self._roots

    def resolve_absolute_path(self, path: str, location: StorageLocation) -> str:
        root = os.path.abspath(self._roots.root_for(location))
        segments = [part for part in path.split("/") if part and part != "."]
        if ".." in segments:
            raise ValueError(f"Logical path escapes its storage location: {path!r}")
        return os.path.join(root, *segments)

    def available_disk_space(self, folder: FolderUri) -> int:
        return shutil.disk_usage(folder.absolute_path).free

    def file_size(self, file: FileUri) -> int:
        return os.stat(file.absolute_path).st_size

    def file_info(self, file: FileUri) -> UniversalFileInfo:
        stat = os.stat(file.absolute_path)
        created = getattr(stat, "st_birthtime", None)
        if created is None:
            created = stat.st_ctime
        return UniversalFileInfo(
            creation_time=_timestamp(created),
            last_access_time=_timestamp(stat.st_atime),
            last_write_time=_timestamp(stat.st_mtime),
            length=stat.st_size,
        )

    def folder_exists(self, folder: FolderUri) -> bool:
        return os.path.isdir(folder.absolute_path)

    def file_exists(self, file: FileUri) -> bool:
        return os.path.isfile(file.absolute_path)

    def create_folder(self, folder: FolderUri) -> None:
        logger.debug("Creating folder %s at %s", folder.uri, folder.absolute_path)
        os.makedirs(folder.absolute_path, exist_ok=True)

    def delete_folder(self, folder: FolderUri) -> None:
        logger.debug("Deleting folder %s at %s", folder.uri, folder.absolute_path)
        shutil.rmtree(folder.absolute_path)

    def list_folder_entries(self, folder: FolderUri, pattern: str, recursive: bool) -> list[str] | None:
        root = Path(folder.absolute_path)
        if not root.is_dir():
            logger.debug("Cannot list %s: %s is not a directory", folder.uri, root)
            return None
        pattern = pattern or "*"
        matches = root.rglob(pattern) if recursive else root.glob(pattern)
        return sorted(str(path) for path in matches if path.is_file())

    def copy_file(self, source: FileUri, destination: FileUri, overwrite: bool) -> None:
        if os.path.isdir(destination.absolute_path):
            raise IsADirectoryError(errno.EISDIR, "Destination is a folder", destination.absolute_path)
        if not overwrite and os.path.exists(destination.absolute_path):
            raise FileExistsError(errno.EEXIST, "Destination file already exists", destination.absolute_path)
        logger.debug("Copying %s to %s", source.uri, destination.uri)
        shutil.copy2(source.absolute_path, destination.absolute_path)

    def move_file(self, source: FileUri, destination: FileUri) -> None:
        if os.path.exists(destination.absolute_path):
            raise FileExistsError(errno.EEXIST, "Destination file already exists", destination.absolute_path)
        logger.debug("Moving %s to %s", source.uri, destination.uri)
        shutil.move(source.absolute_path, destination.absolute_path)

    def delete_file(self, file: FileUri) -> None:
        logger.debug("Deleting file %s at %s", file.uri, file.absolute_path)
        os.remove(file.absolute_path)

    def open_file(
        self,
        file: FileUri,
        mode: UniversalFileMode,
        access: UniversalFileAccess,
        share: UniversalFileShare,
    ) -> BinaryIO:
        _validate_open_request(mode, access)
        flags = _MODE_FLAGS[mode] | _ACCESS_FLAGS[access] | getattr(os, "O_BINARY", 0)
        logger.debug("Opening %s mode=%s access=%s share=%s", file.uri, mode.name, access.name, share.name)
        fd = os.open(file.absolute_path, flags, 0o666)
        try:
            _apply_share(fd, share)
            if mode in _TRUNCATING_MODES:
                os.ftruncate(fd, 0)
            return os.fdopen(fd, _stream_mode(mode, access))
        except BaseException:
            os.close(fd)
            raise

    def mime_type(self, value: str) -> str | None:
        target = value.strip()
        _, sep, remainder = target.partition(SCHEME_SEPARATOR)
        if sep:
            target = remainder
        if target.startswith("."):
            target = f"file{target}"
        elif "." not in target and "/" not in target:
            target = f"file.{target}"
        guessed, _ = mimetypes.guess_type(target)
        return guessed


__all__ = ["LocalFileSystemPlatform"]
