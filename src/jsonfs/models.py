"""Data models for the JSON file store."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace

JSON_SUFFIX = ".json"

# Characters stripped from ids before they are used as file names ("{1a-2b}" -> "1a2b").
_UNSAFE_ID_CHARS = ("{", "}", "-")


def new_unique_handle(file_name: str) -> str:
    """Session-scoped handle: file name plus 32 random hex chars. Never persisted."""
    return file_name + uuid.uuid4().hex


def sanitize_file_name(item_id: str) -> str:
    """Strip GUID punctuation so an id can be used as a file name."""
    for ch in _UNSAFE_ID_CHARS:
        item_id = item_id.replace(ch, "")
    return item_id


def normalize_relative_path(path: str) -> str:
    """Strip leading separators and ensure exactly one trailing .json."""
    path = path.lstrip("/\\")
    if not path.endswith(JSON_SUFFIX):
        path += JSON_SUFFIX
    return path


def type_name_of(item_type: type | str) -> str:
    """Simple name of a type: str -> "str", "widget" -> "widget"."""
    if isinstance(item_type, str):
        return item_type
    return item_type.__name__


@dataclass
class JsonItemFile:
    """One JSON document on disk, or one about to be written."""

    relative_path: str                 # beneath <root>/<type folder>; write target + dedup key
    content: str                       # raw JSON, opaque to the merge logic
    display_file_name: str = ""        # base name as seen on disk
    item_type_name: str = ""
    unique_handle: str = ""            # regenerated on every load

    @property
    def key(self) -> str:
        """Dedup key used during merges."""
        return normalize_relative_path(self.relative_path)

    def normalized(self) -> JsonItemFile:
        """Copy with relative_path and display_file_name ending in .json."""
        name = self.display_file_name or self.relative_path
        return replace(
            self,
            relative_path=self.key,
            display_file_name=normalize_relative_path(name).rsplit("/", 1)[-1],
        )
