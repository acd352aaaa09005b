from __future__ import annotations

import dataclasses
import unittest

from appfs.locations import StorageLocation
from appfs.uri import FileUri, FolderUri, format_uri, normalize_logical_path, split_uri


class SplitUriTests(unittest.TestCase):
    def test_scheme_selects_location(self) -> None:
        self.assertEqual(split_uri("cache://thumbs/a.png"), ("thumbs/a.png", StorageLocation.CACHE))
        self.assertEqual(split_uri("Bundle://templates"), ("templates", StorageLocation.BUNDLE))

    def test_plain_path_defaults_to_internal(self) -> None:
        self.assertEqual(split_uri("notes/today.txt"), ("notes/today.txt", StorageLocation.INTERNAL))

    def test_unknown_scheme_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            split_uri("s3://bucket/key")

    def test_normalizes_separators(self) -> None:
        self.assertEqual(normalize_logical_path("\\docs\\.\\sub//b.txt/"), "docs/sub/b.txt")
        self.assertEqual(normalize_logical_path("/"), "")

    def test_format_round_trips_split(self) -> None:
        self.assertEqual(format_uri("docs/a.txt", StorageLocation.EXTERNAL), "external://docs/a.txt")


class LocatedPathTests(unittest.TestCase):
    def test_equality_ignores_absolute_path(self) -> None:
        first = FileUri(location=StorageLocation.CACHE, path="a.txt", absolute_path="/one/a.txt")
        second = FileUri(location=StorageLocation.CACHE, path="a.txt", absolute_path="/two/a.txt")

        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))

    def test_location_is_part_of_identity(self) -> None:
        cached = FileUri(location=StorageLocation.CACHE, path="a.txt", absolute_path="/x/a.txt")
        internal = FileUri(location=StorageLocation.INTERNAL, path="a.txt", absolute_path="/x/a.txt")

        self.assertNotEqual(cached, internal)

    def test_file_and_folder_never_compare_equal(self) -> None:
        file = FileUri(location=StorageLocation.CACHE, path="a", absolute_path="/x/a")
        folder = FolderUri(location=StorageLocation.CACHE, path="a", absolute_path="/x/a")

        self.assertNotEqual(file, folder)

    def test_values_are_immutable(self) -> None:
        file = FileUri(location=StorageLocation.CACHE, path="a.txt", absolute_path="/x/a.txt")

        with self.assertRaises(dataclasses.FrozenInstanceError):
            file.path = "b.txt"  # type: ignore[misc]

    def test_uri_and_name(self) -> None:
        file = FileUri(location=StorageLocation.BUNDLE, path="images/logo.png", absolute_path="/b/images/logo.png")

        self.assertEqual(file.uri, "bundle://images/logo.png")
        self.assertEqual(str(file), "bundle://images/logo.png")
        self.assertEqual(file.name, "logo.png")


if __name__ == "__main__":
    unittest.main()
