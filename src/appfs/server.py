from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, cast

from dotenv import load_dotenv
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import ToolAnnotations

from appfs.backends.local import LocalFileSystemPlatform
from appfs.config import Settings, load_settings
from appfs.docs import get_documentation_text
from appfs.errors import PolicyViolation
from appfs.filesystem import FileSystem
from appfs.logging_utils import configure_appfs_logging
from appfs.modes import UniversalFileAccess, UniversalFileMode, UniversalFileShare

logger = logging.getLogger("appfs")

DEFAULT_READ_LIMIT = 64 * 1024


@dataclass
class AppState:
    settings: Settings
    file_system: FileSystem


def build_state(settings: Settings) -> AppState:
    return AppState(
        settings=settings,
        file_system=FileSystem(LocalFileSystemPlatform(settings.roots)),
    )


def _require_writes(state: AppState, operation: str) -> None:
    if not state.settings.allow_writes:
        raise PermissionError(f"{operation} is disabled; set APPFS_ALLOW_WRITES=1 to enable mutating tools")


def _dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def folder_listing(state: AppState, uri: str, *, pattern: str = "*", recursive: bool = False) -> dict:
    fs = state.file_system
    folder = fs.create_folder_uri(uri)
    files = fs.get_folder_files(folder, pattern or "*", recursive)
    return {
        "folder": folder.uri,
        "files": None if files is None else [file.uri for file in files],
    }


def file_details(state: AppState, uri: str) -> dict:
    fs = state.file_system
    file = fs.create_file_uri(uri)
    info = fs.get_file_info(file)
    return {
        "uri": file.uri,
        "absolute_path": file.absolute_path,
        "creation_time": info.creation_time.isoformat(),
        "last_access_time": info.last_access_time.isoformat(),
        "last_write_time": info.last_write_time.isoformat(),
        "length": info.length,
        "mime_type": fs.get_mime_type(file),
    }


def path_status(state: AppState, uri: str) -> dict:
    fs = state.file_system
    file = fs.create_file_uri(uri)
    folder = fs.create_folder_uri(uri)
    return {
        "uri": file.uri,
        "location": file.location.value,
        "is_file": fs.file_exists(file),
        "is_folder": fs.folder_exists(folder),
    }


def read_text(state: AppState, uri: str, *, max_bytes: int = DEFAULT_READ_LIMIT) -> dict:
    if max_bytes <= 0:
        raise ValueError("max_bytes must be >= 1")
    fs = state.file_system
    file = fs.create_file_uri(uri)
    with fs.open_file(file, UniversalFileMode.OPEN, UniversalFileAccess.READ, UniversalFileShare.READ) as handle:
        data = handle.read(max_bytes + 1)
    return {
        "uri": file.uri,
        "text": data[:max_bytes].decode("utf-8", errors="replace"),
        "truncated": len(data) > max_bytes,
    }


def disk_space(state: AppState, uri: str) -> dict:
    fs = state.file_system
    folder = fs.create_folder_uri(uri)
    return {"uri": folder.uri, "available_bytes": fs.get_available_disk_space(folder)}


def write_text(state: AppState, uri: str, text: str, *, overwrite: bool = False) -> dict:
    _require_writes(state, "write_text_file")
    fs = state.file_system
    file = fs.create_file_uri(uri)
    # Opening is not location-guarded, so the bundle check for writes happens here.
    if file.location.read_only:
        raise PolicyViolation("write_text_file", file.uri, "Unable to write file inside the bundle")
    mode = UniversalFileMode.CREATE if overwrite else UniversalFileMode.CREATE_NEW
    data = text.encode("utf-8")
    with fs.open_file(file, mode, UniversalFileAccess.WRITE, UniversalFileShare.NONE) as handle:
        handle.write(data)
    logger.info("Wrote %d bytes to %s", len(data), file.uri)
    return {"uri": file.uri, "bytes_written": len(data)}


def create_folder(state: AppState, uri: str) -> dict:
    _require_writes(state, "create_folder")
    fs = state.file_system
    folder = fs.create_folder_uri(uri)
    fs.create_folder(folder)
    logger.info("Created folder %s", folder.uri)
    return {"uri": folder.uri, "created": True}


def delete_folder(state: AppState, uri: str) -> dict:
    _require_writes(state, "delete_folder")
    fs = state.file_system
    folder = fs.create_folder_uri(uri)
    fs.delete_folder(folder)
    logger.info("Deleted folder %s", folder.uri)
    return {"uri": folder.uri, "deleted": True}


def copy_file(state: AppState, source: str, destination: str, *, overwrite: bool = False) -> dict:
    _require_writes(state, "copy_file")
    fs = state.file_system
    src = fs.create_file_uri(source)
    dst = fs.create_file_uri(destination)
    fs.copy_file(src, dst, overwrite)
    logger.info("Copied %s to %s", src.uri, dst.uri)
    return {"source": src.uri, "destination": dst.uri}


def move_file(state: AppState, source: str, destination: str) -> dict:
    _require_writes(state, "move_file")
    fs = state.file_system
    src = fs.create_file_uri(source)
    dst = fs.create_file_uri(destination)
    fs.move_file(src, dst)
    logger.info("Moved %s to %s", src.uri, dst.uri)
    return {"source": src.uri, "destination": dst.uri}


def delete_file(state: AppState, uri: str) -> dict:
    _require_writes(state, "delete_file")
    fs = state.file_system
    file = fs.create_file_uri(uri)
    fs.delete_file(file)
    logger.info("Deleted file %s", file.uri)
    return {"uri": file.uri, "deleted": True}


@asynccontextmanager
async def app_lifespan(_mcp: FastMCP) -> AsyncIterator[AppState]:
    load_dotenv()
    try:
        settings = load_settings()
        log_path = configure_appfs_logging(settings)
        state = build_state(settings)
    except Exception:
        logger.exception("appfs startup failed")
        raise

    logger.info("Using appfs log file: %s", log_path)
    for location_name, root in vars(settings.roots).items():
        logger.info("Storage location %s -> %s", location_name, root)
    logger.info("Mutating tools %s", "enabled" if settings.allow_writes else "disabled")

    try:
        yield state
    finally:
        logger.info("appfs server stopped")


mcp = FastMCP("appfs-mcp", lifespan=app_lifespan)


def _state(ctx: Context) -> AppState:
    lifespan_state = ctx.request_context.lifespan_context
    return cast(AppState, lifespan_state)


@mcp.tool(
    name="list_folder",
    description=(
        "List files in a folder given as a location-qualified uri such as `internal://docs`. "
        "`pattern` is a glob matched against file names; set `recursive` to include subfolders. "
        "Returns uris in the folder's location, or `files: null` if the folder cannot be listed."
    ),
    annotations=ToolAnnotations(title="List Folder", readOnlyHint=True, destructiveHint=False),
)
def list_folder_tool(uri: str, ctx: Context, pattern: str = "*", recursive: bool = False) -> str:
    return _dumps(folder_listing(_state(ctx), uri, pattern=pattern, recursive=recursive))


@mcp.tool(
    name="file_info",
    description="Get size, timestamps and MIME type of a file uri.",
    annotations=ToolAnnotations(title="Get File Info", readOnlyHint=True, destructiveHint=False),
)
def file_info_tool(uri: str, ctx: Context) -> str:
    return _dumps(file_details(_state(ctx), uri))


@mcp.tool(
    name="path_status",
    description="Report whether a uri exists as a file and/or a folder.",
    annotations=ToolAnnotations(title="Get Path Status", readOnlyHint=True, destructiveHint=False),
)
def path_status_tool(uri: str, ctx: Context) -> str:
    return _dumps(path_status(_state(ctx), uri))


@mcp.tool(
    name="read_text_file",
    description=(
        "Read a file as UTF-8 text (invalid bytes are replaced). At most `max_bytes` bytes are "
        "returned; `truncated` tells whether the file is longer."
    ),
    annotations=ToolAnnotations(title="Read Text File", readOnlyHint=True, destructiveHint=False),
)
def read_text_file_tool(uri: str, ctx: Context, max_bytes: int = DEFAULT_READ_LIMIT) -> str:
    return _dumps(read_text(_state(ctx), uri, max_bytes=max_bytes))


@mcp.tool(
    name="disk_space",
    description="Get the free space, in bytes, of the volume holding a folder uri.",
    annotations=ToolAnnotations(title="Get Disk Space", readOnlyHint=True, destructiveHint=False),
)
def disk_space_tool(uri: str, ctx: Context) -> str:
    return _dumps(disk_space(_state(ctx), uri))


@mcp.tool(
    name="get_mime_type",
    description="Guess the MIME type of a file uri, path or extension such as `.png`.",
    annotations=ToolAnnotations(title="Get MIME Type", readOnlyHint=True, destructiveHint=False),
)
def get_mime_type_tool(value: str, ctx: Context) -> str:
    mime_type = _state(ctx).file_system.get_mime_type(value)
    return _dumps({"value": value, "mime_type": mime_type})


@mcp.tool(
    name="get_documentation",
    description=(
        "Explain storage locations, uri syntax and the write policy. "
        "Sections: 'locations', 'uris', 'policy', or omit for overview."
    ),
    annotations=ToolAnnotations(title="Get Documentation", readOnlyHint=True, destructiveHint=False),
)
def get_documentation(section: str | None = None) -> str:
    return get_documentation_text(section)


@mcp.tool(
    name="write_text_file",
    description=(
        "Write UTF-8 text to a file uri. Fails if the file exists unless `overwrite` is true. "
        "Writes into `bundle://` are always refused."
    ),
    annotations=ToolAnnotations(title="Write Text File", readOnlyHint=False, destructiveHint=True),
)
def write_text_file_tool(uri: str, text: str, ctx: Context, overwrite: bool = False) -> str:
    return _dumps(write_text(_state(ctx), uri, text, overwrite=overwrite))


@mcp.tool(
    name="create_folder",
    description="Create a folder uri, including missing parents.",
    annotations=ToolAnnotations(title="Create Folder", readOnlyHint=False, destructiveHint=False),
)
def create_folder_tool(uri: str, ctx: Context) -> str:
    return _dumps(create_folder(_state(ctx), uri))


@mcp.tool(
    name="delete_folder",
    description="Delete a folder uri and everything inside it.",
    annotations=ToolAnnotations(title="Delete Folder", readOnlyHint=False, destructiveHint=True),
)
def delete_folder_tool(uri: str, ctx: Context) -> str:
    return _dumps(delete_folder(_state(ctx), uri))


@mcp.tool(
    name="copy_file",
    description="Copy a file between uris, possibly across locations. The destination may not be in the bundle.",
    annotations=ToolAnnotations(title="Copy File", readOnlyHint=False, destructiveHint=True),
)
def copy_file_tool(source: str, destination: str, ctx: Context, overwrite: bool = False) -> str:
    return _dumps(copy_file(_state(ctx), source, destination, overwrite=overwrite))


@mcp.tool(
    name="move_file",
    description="Move a file between uris. Fails if the destination exists or is in the bundle.",
    annotations=ToolAnnotations(title="Move File", readOnlyHint=False, destructiveHint=True),
)
def move_file_tool(source: str, destination: str, ctx: Context) -> str:
    return _dumps(move_file(_state(ctx), source, destination))


@mcp.tool(
    name="delete_file",
    description="Delete a file uri.",
    annotations=ToolAnnotations(title="Delete File", readOnlyHint=False, destructiveHint=True),
)
def delete_file_tool(uri: str, ctx: Context) -> str:
    return _dumps(delete_file(_state(ctx), uri))


def main() -> None:
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
