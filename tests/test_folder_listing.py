from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from appfs.backends.local import LocalFileSystemPlatform
from appfs.config import LocationRoots
from appfs.filesystem import FileSystem
from appfs.locations import StorageLocation


class _ListingPlatform:
    def __init__(self, listing: list[str] | None) -> None:
        self.listing = listing
        self.list_calls: list[tuple] = []

    def resolve_absolute_path(self, path: str, location: StorageLocation) -> str:
        return f"/root/{path}" if path else "/root"

    def list_folder_entries(self, folder, pattern, recursive):
        self.list_calls.append((folder, pattern, recursive))
        return self.listing


class RebaseTests(unittest.TestCase):
    def _fs(self, listing: list[str] | None) -> tuple[FileSystem, _ListingPlatform]:
        platform = _ListingPlatform(listing)
        return FileSystem(platform), platform

    def test_rebases_into_logical_namespace(self) -> None:
        fs, platform = self._fs(["/root/docs/a.txt", "/root/docs/sub/b.txt"])
        folder = fs.create_folder_uri("docs", StorageLocation.INTERNAL)
        self.assertEqual(folder.absolute_path, "/root/docs")

        files = fs.get_folder_files(folder, "*", False)

        self.assertEqual([file.path for file in files], ["docs/a.txt", "docs/sub/b.txt"])
        self.assertTrue(all(file.location is StorageLocation.INTERNAL for file in files))
        self.assertEqual([file.absolute_path for file in files], ["/root/docs/a.txt", "/root/docs/sub/b.txt"])
        self.assertEqual(platform.list_calls, [(folder, "*", False)])

    def test_keeps_folder_location(self) -> None:
        fs, _ = self._fs(["/root/thumbs/a.png"])
        folder = fs.create_folder_uri("cache://thumbs")

        files = fs.get_folder_files(folder)

        self.assertEqual([file.uri for file in files], ["cache://thumbs/a.png"])

    def test_indeterminate_listing_is_none(self) -> None:
        fs, _ = self._fs(None)
        folder = fs.create_folder_uri("docs", StorageLocation.INTERNAL)

        self.assertIsNone(fs.get_folder_files(folder, "*", True))

    def test_empty_listing_stays_empty(self) -> None:
        fs, _ = self._fs([])
        folder = fs.create_folder_uri("docs", StorageLocation.INTERNAL)

        self.assertEqual(fs.get_folder_files(folder, "*", False), [])

    def test_trailing_separator_on_folder_path(self) -> None:
        fs, _ = self._fs(["/root/docs/a.txt"])
        platform = fs.platform
        platform.resolve_absolute_path = lambda path, location: "/root/docs/"  # type: ignore[method-assign]
        folder = fs.create_folder_uri("docs", StorageLocation.INTERNAL)
        platform.resolve_absolute_path = lambda path, location: f"/root/{path}"  # type: ignore[method-assign]

        files = fs.get_folder_files(folder)

        self.assertEqual([file.path for file in files], ["docs/a.txt"])

    def test_relative_entries_are_taken_as_fragments(self) -> None:
        fs, _ = self._fs(["a.txt", "sub/b.txt"])
        folder = fs.create_folder_uri("docs", StorageLocation.INTERNAL)

        files = fs.get_folder_files(folder)

        self.assertEqual([file.path for file in files], ["docs/a.txt", "docs/sub/b.txt"])

    def test_root_folder_has_no_leading_separator(self) -> None:
        fs, _ = self._fs(["/root/a.txt"])
        folder = fs.create_folder_uri("external://")

        files = fs.get_folder_files(folder)

        self.assertEqual([file.uri for file in files], ["external://a.txt"])

    def test_folder_itself_is_not_listed_as_a_file(self) -> None:
        fs, _ = self._fs(["/root/docs", "/root/docs/", "/root/docs/a.txt"])
        folder = fs.create_folder_uri("docs", StorageLocation.INTERNAL)

        files = fs.get_folder_files(folder)

        self.assertEqual([file.path for file in files], ["docs/a.txt"])

    def test_entries_outside_folder_are_rejected(self) -> None:
        fs, _ = self._fs(["/elsewhere/a.txt"])
        folder = fs.create_folder_uri("docs", StorageLocation.INTERNAL)

        with self.assertRaises(ValueError):
            fs.get_folder_files(folder)


@unittest.skipUnless(hasattr(os, "symlink"), "symlinks not supported")
class SymlinkedRootTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        base = Path(self.tmp.name)
        self.real_root = base / "real"
        (self.real_root / "docs").mkdir(parents=True)
        (self.real_root / "docs" / "a.txt").write_text("a", encoding="utf-8")
        self.link_root = base / "link"
        os.symlink(self.real_root, self.link_root, target_is_directory=True)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_backend_reporting_canonical_paths_is_rebased(self) -> None:
        roots = LocationRoots(
            bundle=self.link_root,
            internal=self.link_root,
            cache=self.link_root,
            external=self.link_root,
        )
        platform = LocalFileSystemPlatform(roots)
        real_docs = os.path.realpath(self.real_root / "docs")
        platform.list_folder_entries = lambda folder, pattern, recursive: [  # type: ignore[method-assign]
            os.path.join(real_docs, "a.txt")
        ]
        fs = FileSystem(platform)
        folder = fs.create_folder_uri("docs", StorageLocation.CACHE)

        files = fs.get_folder_files(folder)

        self.assertEqual([file.uri for file in files], ["cache://docs/a.txt"])


if __name__ == "__main__":
    unittest.main()
