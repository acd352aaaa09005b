from __future__ import annotations


def get_documentation_text(section: str | None) -> str:
    if section == "locations":
        return (
            "# Storage Locations\n\n"
            "- `bundle`: resources packaged with the application. Read-only: folders and files "
            "here are never created, deleted, moved into or overwritten.\n"
            "- `internal`: app-private persistent storage. Default when a uri has no scheme.\n"
            "- `cache`: purgeable storage; contents may disappear between sessions.\n"
            "- `external`: storage shared with other applications.\n"
        )

    if section == "uris":
        return (
            "# Uris\n\n"
            "Every tool takes a location-qualified uri of the form `<location>://<path>`, for example "
            "`cache://thumbs/cover.png` or `bundle://templates`.\n"
            "Paths always use `/`. A uri without `://` is a path in `internal`.\n"
            "`..` segments are rejected. `list_folder` returns uris in the same location as the folder "
            "queried, e.g. listing `internal://docs` yields `internal://docs/a.txt`.\n"
        )

    if section == "policy":
        return (
            "# Write Policy\n\n"
            "Mutating tools (`write_text_file`, `create_folder`, `delete_folder`, `copy_file`, "
            "`move_file`, `delete_file`) are disabled unless the server runs with "
            "`APPFS_ALLOW_WRITES=1`.\n"
            "Even when enabled, any write whose target is in `bundle` is refused. Copying or moving "
            "a file *out of* the bundle is allowed.\n"
            "`list_folder` returns `files: null` when the folder cannot be listed (for example it does "
            "not exist), and `files: []` when it exists but nothing matched.\n"
        )

    return (
        "appfs documentation sections: `locations`, `uris`, `policy`.\n"
        "Start with `uris` before calling file tools."
    )


__all__ = ["get_documentation_text"]
