from __future__ import annotations

import os
import posixpath
from pathlib import PurePath
from typing import BinaryIO

from appfs.errors import PolicyViolation
from appfs.locations import StorageLocation
from appfs.modes import UniversalFileAccess, UniversalFileInfo, UniversalFileMode, UniversalFileShare
from appfs.platform import FileSystemPlatform
from appfs.uri import FileUri, FolderUri, normalize_logical_path, split_uri


def _relative_fragment(raw_path: str, base_path: str) -> str:
    raw = PurePath(raw_path)
    if not raw.is_absolute():
        return raw.as_posix()
    try:
        return raw.relative_to(PurePath(base_path)).as_posix()
    except ValueError:
        pass

    # Symlinked roots and case-insensitive volumes only match once canonicalized.
    real_raw = os.path.normcase(os.path.realpath(raw_path))
    real_base = os.path.normcase(os.path.realpath(base_path))
    try:
        fragment = PurePath(os.path.relpath(real_raw, real_base)).as_posix()
    except ValueError:
        fragment = ".."
    if fragment == ".." or fragment.startswith("../"):
        raise ValueError(f"Listed path {raw_path!r} is outside of folder {base_path!r}")
    return fragment


class FileSystem:
    def __init__(self, platform: FileSystemPlatform) -> None:
        self._platform = platform

    @property
    def platform(self) -> FileSystemPlatform:
        return self._platform

    def create_file_uri(self, path: str, location: StorageLocation | None = None) -> FileUri:
        logical_path, location = self._split(path, location)
        absolute_path = self._platform.resolve_absolute_path(logical_path, location)
        return FileUri(location=location, path=logical_path, absolute_path=absolute_path)

    def create_folder_uri(self, path: str, location: StorageLocation | None = None) -> FolderUri:
        logical_path, location = self._split(path, location)
        absolute_path = self._platform.resolve_absolute_path(logical_path, location)
        return FolderUri(location=location, path=logical_path, absolute_path=absolute_path)

    def get_available_disk_space(self, folder: FolderUri) -> int:
        return self._platform.available_disk_space(folder)

    def get_file_size(self, file: FileUri) -> int:
        return self._platform.file_size(file)

    def get_file_info(self, file: FileUri) -> UniversalFileInfo:
        return self._platform.file_info(file)

    def folder_exists(self, folder: FolderUri) -> bool:
        return self._platform.folder_exists(folder)

    def file_exists(self, file: FileUri) -> bool:
        return self._platform.file_exists(file)

    def create_folder(self, folder: FolderUri) -> None:
        self._guard("create_folder", folder, "Unable to create folder inside the bundle")
        self._platform.create_folder(folder)

    def delete_folder(self, folder: FolderUri) -> None:
        self._guard("delete_folder", folder, "Unable to delete folder inside the bundle")
        self._platform.delete_folder(folder)

    def get_folder_files(
        self,
        folder: FolderUri,
        pattern: str = "*",
        recursive: bool = False,
    ) -> list[FileUri] | None:
        """List the files of ``folder`` as uris in the caller's namespace.

        Returns None when the backend cannot list the folder, which is distinct
        from an empty list for a folder with no matching files.
        """
        raw_paths = self._platform.list_folder_entries(folder, pattern, recursive)
        if raw_paths is None:
            return None

        files: list[FileUri] = []
        for raw_path in raw_paths:
            fragment = _relative_fragment(raw_path, folder.absolute_path)
            if fragment == ".":
                continue
            logical_path = posixpath.join(folder.path, fragment) if folder.path else fragment
            files.append(self.create_file_uri(logical_path, folder.location))
        return files

    def copy_file(self, source: FileUri, destination: FileUri, overwrite: bool = False) -> None:
        self._guard("copy_file", destination, "Unable to copy file into the bundle")
        self._platform.copy_file(source, destination, overwrite)

    def move_file(self, source: FileUri, destination: FileUri) -> None:
        self._guard("move_file", destination, "Unable to move file into the bundle")
        self._platform.move_file(source, destination)

    def delete_file(self, file: FileUri) -> None:
        self._guard("delete_file", file, "Unable to delete file inside the bundle")
        self._platform.delete_file(file)

    def open_file(
        self,
        file: FileUri,
        mode: UniversalFileMode = UniversalFileMode.OPEN,
        access: UniversalFileAccess = UniversalFileAccess.READ,
        share: UniversalFileShare = UniversalFileShare.NONE,
    ) -> BinaryIO:
        return self._platform.open_file(file, mode, access, share)

    def get_mime_type(self, file_uri_or_extension: str | FileUri | None) -> str | None:
        if isinstance(file_uri_or_extension, FileUri):
            file_uri_or_extension = file_uri_or_extension.path
        if file_uri_or_extension is None or not file_uri_or_extension.strip():
            return None
        return self._platform.mime_type(file_uri_or_extension)

    @staticmethod
    def _split(path: str, location: StorageLocation | None) -> tuple[str, StorageLocation]:
        if location is None:
            return split_uri(path)
        return normalize_logical_path(path), location

    @staticmethod
    def _guard(operation: str, target: FileUri | FolderUri, message: str) -> None:
        if target.location.read_only:
            raise PolicyViolation(operation, target.uri, message)


__all__ = ["FileSystem"]
