"""Load and save every JSON file beneath one type folder.

Layout:
    <root>/
        <type folder>/
            <relative path>.json

Loading flattens: a file found at ``<type folder>/sub/a.json`` comes back with
``relative_path == "a.json"``, so saving that collection again writes it to
``<type folder>/a.json``. Nested paths do not round-trip.

Saving is per file with no transaction. If the Nth write fails, files 0..N-1
stay written and a StorageError naming the Nth file is raised.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from jsonfs.errors import StorageError, require
from jsonfs.models import JsonItemFile, new_unique_handle, normalize_relative_path

if TYPE_CHECKING:
    from collections.abc import Iterable

    from jsonfs.storage import Storage

logger = logging.getLogger("jsonfs.collection")

JSON_PATTERN = "*.json"


def type_folder(root: Path | str, folder_name: str) -> Path:
    return Path(root) / folder_name


def ensure_folder(storage: Storage, folder: Path, *, item_type: str = "") -> None:
    """Create folder if it does not exist."""
    try:
        if not storage.exists(folder):
            storage.make_dirs(folder)
    except OSError as exc:
        msg = f"Cannot create folder {folder}: {exc}"
        raise StorageError(msg, operation="create_folder", item_type=item_type) from exc


def load_items(storage: Storage, root: Path | str, folder_name: str) -> list[JsonItemFile]:
    """Read every *.json file beneath root/folder_name, recursively.

    Order follows the storage's enumeration and carries no meaning. One
    unreadable file fails the whole load.
    """
    require(root, "root")
    require(folder_name, "folder_name")

    folder = type_folder(root, folder_name)
    ensure_folder(storage, folder, item_type=folder_name)

    try:
        paths = storage.list_files(folder, JSON_PATTERN)
    except OSError as exc:
        msg = f"Cannot list {folder}: {exc}"
        raise StorageError(msg, operation="load", item_type=folder_name) from exc

    items: list[JsonItemFile] = []
    for path in paths:
        try:
            content = storage.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read {path}: {exc}"
            raise StorageError(
                msg, operation="load", item_type=folder_name, file_name=path.name,
            ) from exc
        items.append(JsonItemFile(
            relative_path=path.name,
            content=content,
            display_file_name=path.name,
            item_type_name=folder_name,
            unique_handle=new_unique_handle(path.name),
        ))

    logger.debug("loaded %d items from %s", len(items), folder)
    return items


def item_path(root: Path | str, folder_name: str, item: JsonItemFile) -> Path:
    """Write target for item: root/folder_name/<relative path>.json."""
    return type_folder(root, folder_name) / normalize_relative_path(item.relative_path)


def save_items(
    storage: Storage,
    root: Path | str,
    folder_name: str,
    type_name: str,
    items: Iterable[JsonItemFile],
) -> int:
    """Write each item's content to its own file. Returns the number written."""
    require(root, "root")
    require(folder_name, "folder_name")
    require(type_name, "type_name")
    require(items, "items")

    folder = type_folder(root, folder_name)
    ensure_folder(storage, folder, item_type=type_name)

    written = 0
    for item in items:
        path = item_path(root, folder_name, item)
        try:
            if path.parent != folder and not storage.exists(path.parent):
                storage.make_dirs(path.parent)
            storage.write_text(path, item.content)
        except OSError as exc:
            name = item.display_file_name or item.relative_path
            msg = f"Cannot save {type_name} item ({name}): {exc}"
            raise StorageError(
                msg, operation="save", item_type=type_name, file_name=name,
            ) from exc
        written += 1

    logger.debug("saved %d %s items to %s", written, type_name, folder)
    return written
