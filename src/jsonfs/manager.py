"""JsonFileStore: insert/merge entry points and the optional read cache.

    store = JsonFileStore("/data/json", item_type="widget")
    store.insert_item(store.root_folder, {"n": 1}, "widget", "widget", "w1", "first")
    store.enable_cache()
    store.cached_items        # snapshot of /data/json/widget/*.json

Inserts always reload from storage and never read through the cache. The
snapshot is refreshed after inserts made through this instance, but writes
made through any other instance (or process) leave it stale until
flush_cache() is called. Nothing is locked: concurrent writers to the same
type folder race, and the last write to a file wins.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jsonfs import collection
from jsonfs.codec import deserialize_object, serialize_object
from jsonfs.errors import InvalidArgumentError, JsonFsError, StorageError, require
from jsonfs.merge import MergePlan, MergePolicy, merge_items
from jsonfs.models import JsonItemFile, sanitize_file_name, type_name_of
from jsonfs.storage import LocalStorage

if TYPE_CHECKING:
    from collections.abc import Iterable

    from jsonfs.storage import Storage

logger = logging.getLogger("jsonfs.manager")


class JsonFileStore:
    """Data access for JSON items stored one file per item, one folder per type."""

    def __init__(
        self,
        root_folder: Path | str | None = None,
        item_type: type | str | None = None,
        storage: Storage | None = None,
    ) -> None:
        self.root_folder = Path(root_folder) if root_folder else None
        self.item_type = item_type
        self.storage: Storage = storage or LocalStorage()

        self._cache_enabled = False
        self._cached_items: list[JsonItemFile] | None = None
        self._cached_type: str | None = None
        self._cache_loaded_at: datetime | None = None

    # ------------------------------------------------------------------
    # Read cache
    # ------------------------------------------------------------------

    @property
    def cache_enabled(self) -> bool:
        return self._cache_enabled

    @property
    def cached_items(self) -> list[JsonItemFile] | None:
        """Copy of the snapshot from the last cache load, or None when disabled and never flushed."""
        return None if self._cached_items is None else list(self._cached_items)

    @property
    def cached_type(self) -> str | None:
        return self._cached_type

    @property
    def cache_loaded_at(self) -> datetime | None:
        return self._cache_loaded_at

    def enable_cache(self) -> None:
        """Load the configured type's collection and serve reads from it."""
        if self.item_type is None:
            msg = "item_type must be set before enabling the read cache"
            raise InvalidArgumentError(msg)
        self._load_cache(type_name_of(self.item_type))
        self._cache_enabled = True
        logger.info("read cache enabled for %s (%d items)", self._cached_type, len(self._cached_items or []))

    def disable_cache(self) -> None:
        """Drop the snapshot."""
        if self._cache_enabled:
            logger.info("read cache disabled for %s", self._cached_type)
        self._cache_enabled = False
        self._cached_items = None
        self._cached_type = None

    def flush_cache(self, item_type: type | str | None = None) -> None:
        """Reload the snapshot now, whether or not the cache is enabled.

        Defaults to the configured item_type.
        """
        target = item_type if item_type is not None else self.item_type
        if target is None:
            msg = "item_type is required to flush the read cache"
            raise InvalidArgumentError(msg)
        self._load_cache(type_name_of(target))

    def _load_cache(self, folder_name: str) -> None:
        if self.root_folder is None:
            msg = "root_folder is required to load the read cache"
            raise InvalidArgumentError(msg)
        self._cached_items = collection.load_items(self.storage, self.root_folder, folder_name)
        self._cached_type = folder_name
        self._cache_loaded_at = datetime.now(UTC)
        logger.debug("cache loaded: %s (%d items)", folder_name, len(self._cached_items))

    def read_items(self) -> list[JsonItemFile]:
        """Items of the configured type, from the cache when it is enabled."""
        if self.item_type is None:
            msg = "item_type is required"
            raise InvalidArgumentError(msg)
        folder_name = type_name_of(self.item_type)
        if self._cache_enabled and self._cached_type == folder_name and self._cached_items is not None:
            return list(self._cached_items)
        if self.root_folder is None:
            msg = "root_folder is required"
            raise InvalidArgumentError(msg)
        return collection.load_items(self.storage, self.root_folder, folder_name)

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def load_items(self, root_folder: Path | str, folder_name: str) -> list[JsonItemFile]:
        """Every JSON file beneath root_folder/folder_name as JsonItemFile records."""
        return collection.load_items(self.storage, root_folder, folder_name)

    def save_items(
        self,
        root_folder: Path | str,
        folder_name: str,
        type_name: str,
        items: Iterable[JsonItemFile],
    ) -> int:
        """Write each record to its own file. Not transactional; see jsonfs.collection."""
        return collection.save_items(self.storage, root_folder, folder_name, type_name, items)

    def load_objects(self, root_folder: Path | str, folder_name: str, item_type: type | str) -> list[Any]:
        """Load and decode every file into item_type.

        The results carry no path metadata, so they cannot be saved back as
        the same files. Use load_items() for that.
        """
        require(item_type, "item_type")
        objects: list[Any] = []
        for item in collection.load_items(self.storage, root_folder, folder_name):
            try:
                objects.append(deserialize_object(item.content, item_type))
            except (json.JSONDecodeError, TypeError, ValueError) as exc:
                msg = f"Cannot decode {item.display_file_name} as {type_name_of(item_type)}: {exc}"
                raise StorageError(
                    msg, operation="load_objects", item_type=type_name_of(item_type),
                    file_name=item.display_file_name,
                ) from exc
        return objects

    def item_for_object(self, obj: Any, item_id: str, item_type: type | str) -> JsonItemFile:
        """Serialize obj into a new record whose file name is the sanitized item_id."""
        if obj is None:
            msg = "item is required"
            raise InvalidArgumentError(msg)
        require(item_id, "item_id")
        require(item_type, "item_type")
        file_name = sanitize_file_name(item_id)
        require(file_name, "item_id (sanitized)")
        return JsonItemFile(
            relative_path=file_name,
            content=serialize_object(obj),
            display_file_name=file_name,
            item_type_name=type_name_of(item_type),
            unique_handle=file_name,
        )

    # ------------------------------------------------------------------
    # Insert
    # ------------------------------------------------------------------

    def insert_item(
        self,
        root_folder: Path | str,
        item: Any,
        folder_name: str,
        item_type: type | str,
        item_id: str,
        item_name: str,
    ) -> MergePlan:
        """Insert one object, replacing any stored file with the same id."""
        require(root_folder, "root_folder")
        if item is None:
            msg = "item is required"
            raise InvalidArgumentError(msg)
        require(folder_name, "folder_name")
        require(item_type, "item_type")
        require(item_id, "item_id")
        require(item_name, "item_name")
        require(sanitize_file_name(item_id), "item_id (sanitized)")

        type_name = type_name_of(item_type)
        try:
            record = self.item_for_object(item, item_id, item_type)
            return self._merge(root_folder, [record], folder_name, type_name, MergePolicy.OVERWRITE_EXISTING)
        except Exception as exc:
            logger.exception("insert failed: %s (%s, %s)", type_name, item_id, item_name)
            msg = f"Error inserting {type_name}: ({item_id}, {item_name})"
            raise StorageError(msg, operation="insert_item", item_type=type_name, item_id=item_id) from exc

    def insert_items(
        self,
        root_folder: Path | str,
        items: Iterable[JsonItemFile],
        folder_name: str,
        item_type: type | str,
        policy: MergePolicy = MergePolicy.SKIP_EXISTING,
    ) -> MergePlan:
        """Merge records into the stored collection under policy.

        SKIP_EXISTING never replaces a stored file; OVERWRITE_EXISTING makes
        the new records win. Stored files not named in items are kept.
        """
        require(root_folder, "root_folder")
        require(items, "items")
        require(folder_name, "folder_name")
        require(item_type, "item_type")

        type_name = type_name_of(item_type)
        try:
            return self._merge(root_folder, list(items), folder_name, type_name, policy)
        except Exception as exc:
            logger.exception("insert failed: %ss (%s)", type_name, policy.value)
            msg = f"Error inserting {type_name}s"
            raise StorageError(msg, operation="insert_items", item_type=type_name) from exc

    def _merge(
        self,
        root_folder: Path | str,
        incoming: list[JsonItemFile],
        folder_name: str,
        type_name: str,
        policy: MergePolicy,
    ) -> MergePlan:
        """Load, merge, save. The cache is off during the write and restored after."""
        was_cached = self._cache_enabled
        prior = (self._cached_items, self._cached_type, self._cache_loaded_at)
        self.disable_cache()
        try:
            existing = collection.load_items(self.storage, root_folder, folder_name)
            plan = merge_items(existing, incoming, policy)
            collection.save_items(self.storage, root_folder, folder_name, type_name, plan.to_save)
        finally:
            if was_cached:
                self._restore_cache(prior)

        logger.info(
            "inserted %s into %s: %d added, %d replaced, %d skipped, %d kept",
            type_name, folder_name, len(plan.added), len(plan.replaced), len(plan.skipped), plan.kept,
        )
        return plan

    def _restore_cache(self, prior: tuple[list[JsonItemFile] | None, str | None, datetime | None]) -> None:
        """Re-enable the cache after an insert.

        If the reload fails, the cache stays enabled with the previous (now
        stale) snapshot and the failure is logged; an insert's own error is
        never replaced by a reload error.
        """
        try:
            self.enable_cache()
        except JsonFsError:
            logger.exception("read cache reload failed for %s; keeping previous snapshot", prior[1])
            self._cached_items, self._cached_type, self._cache_loaded_at = prior
            self._cache_enabled = True
