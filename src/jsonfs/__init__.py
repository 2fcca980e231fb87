"""File-based JSON item store: one file per item, one folder per item type.

Layout:
    <json root>/
        <type folder>/            # conventionally the type's simple name, e.g. "str"
            <item id>.json        # raw JSON; the name (minus .json) is the item's identity

Inserts load the type folder, merge new items in under a MergePolicy and
write every item back, one file at a time. There is no locking and no
transaction across files: this is a single-process, best-effort store.
"""

from jsonfs.config import JsonFsConfig, init_config, load_config
from jsonfs.errors import InvalidArgumentError, JsonFsError, StorageError
from jsonfs.manager import JsonFileStore
from jsonfs.merge import MergePlan, MergePolicy, merge_items
from jsonfs.models import JsonItemFile
from jsonfs.storage import LocalStorage, Storage

__all__ = [
    "InvalidArgumentError",
    "JsonFileStore",
    "JsonFsConfig",
    "JsonFsError",
    "JsonItemFile",
    "LocalStorage",
    "MergePlan",
    "MergePolicy",
    "Storage",
    "StorageError",
    "init_config",
    "load_config",
    "merge_items",
]
