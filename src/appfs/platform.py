from __future__ import annotations

from typing import BinaryIO, Protocol

from appfs.locations import StorageLocation
from appfs.modes import UniversalFileAccess, UniversalFileInfo, UniversalFileMode, UniversalFileShare
from appfs.uri import FileUri, FolderUri


class FileSystemPlatform(Protocol):
    """Operations a platform backend provides to :class:`appfs.filesystem.FileSystem`.

    Backends report failures by raising; the facade passes them through untouched.
    """

    def resolve_absolute_path(self, path: str, location: StorageLocation) -> str:
        ...

    def available_disk_space(self, folder: FolderUri) -> int:
        ...

    def file_size(self, file: FileUri) -> int:
        ...

    def file_info(self, file: FileUri) -> UniversalFileInfo:
        ...

    def folder_exists(self, folder: FolderUri) -> bool:
        ...

    def file_exists(self, file: FileUri) -> bool:
        ...

    def create_folder(self, folder: FolderUri) -> None:
        ...

    def delete_folder(self, folder: FolderUri) -> None:
        ...

    def list_folder_entries(self, folder: FolderUri, pattern: str, recursive: bool) -> list[str] | None:
        """Return absolute paths of the files in ``folder``, or None when it cannot be listed."""
        ...

    def copy_file(self, source: FileUri, destination: FileUri, overwrite: bool) -> None:
        ...

    def move_file(self, source: FileUri, destination: FileUri) -> None:
        ...

    def delete_file(self, file: FileUri) -> None:
        ...

    def open_file(
        self,
        file: FileUri,
        mode: UniversalFileMode,
        access: UniversalFileAccess,
        share: UniversalFileShare,
    ) -> BinaryIO:
        ...

    def mime_type(self, value: str) -> str | None:
        ...


__all__ = ["FileSystemPlatform"]
