"""Tests for loading and saving a type folder."""
from __future__ import annotations

import pytest

from jsonfs import collection
from jsonfs.errors import InvalidArgumentError, StorageError
from jsonfs.models import JsonItemFile
from jsonfs.storage import LocalStorage

from conftest import FailingStorage


def test_load_creates_missing_folder(root):
    items = collection.load_items(LocalStorage(), root, "widget")
    assert items == []
    assert (root / "widget").is_dir()


def test_round_trip_preserves_content(root):
    storage = LocalStorage()
    content = '{"name": "café", "tags": ["a", "b"],\n "n": 1.50}'
    collection.save_items(storage, root, "widget", "widget", [JsonItemFile("w1", content)])

    loaded = collection.load_items(storage, root, "widget")
    assert len(loaded) == 1
    assert loaded[0].content == content
    assert loaded[0].relative_path == "w1.json"
    assert loaded[0].display_file_name == "w1.json"
    assert loaded[0].item_type_name == "widget"


def test_load_generates_fresh_handles(root, write_file):
    write_file(root / "widget", "a.json", "{}")
    storage = LocalStorage()
    first = collection.load_items(storage, root, "widget")[0].unique_handle
    second = collection.load_items(storage, root, "widget")[0].unique_handle
    assert first != second


def test_load_flattens_subfolders(root, write_file):
    write_file(root / "widget" / "sub", "deep.json", '{"deep": true}')
    write_file(root / "widget", "notes.txt", "ignored")

    items = collection.load_items(LocalStorage(), root, "widget")
    assert [i.relative_path for i in items] == ["deep.json"]


def test_save_appends_suffix_once(root):
    storage = LocalStorage()
    collection.save_items(storage, root, "widget", "widget", [
        JsonItemFile("a", "1"),
        JsonItemFile("b.json", "2"),
        JsonItemFile("/c", "3"),
    ])
    names = sorted(p.name for p in (root / "widget").iterdir())
    assert names == ["a.json", "b.json", "c.json"]


def test_save_creates_nested_folders(root):
    collection.save_items(LocalStorage(), root, "widget", "widget", [JsonItemFile("sub/a", "1")])
    assert (root / "widget" / "sub" / "a.json").read_text() == "1"


def test_save_partial_failure_keeps_earlier_writes(root):
    storage = FailingStorage(fail_write={"b.json"})
    items = [JsonItemFile("a", "1"), JsonItemFile("b", "2"), JsonItemFile("c", "3")]

    with pytest.raises(StorageError) as info:
        collection.save_items(storage, root, "widget", "widget", items)

    assert info.value.file_name == "b"
    assert info.value.operation == "save"
    assert isinstance(info.value.__cause__, OSError)
    assert (root / "widget" / "a.json").exists()
    assert not (root / "widget" / "b.json").exists()
    assert not (root / "widget" / "c.json").exists()


def test_unreadable_file_fails_whole_load(root, write_file):
    write_file(root / "widget", "ok.json", "{}")
    write_file(root / "widget", "locked.json", "{}")
    storage = FailingStorage(fail_read={"locked.json"})

    with pytest.raises(StorageError) as info:
        collection.load_items(storage, root, "widget")
    assert info.value.file_name == "locked.json"
    assert isinstance(info.value.root_cause, PermissionError)


def test_required_arguments(root):
    with pytest.raises(InvalidArgumentError):
        collection.load_items(LocalStorage(), "", "widget")
    with pytest.raises(InvalidArgumentError):
        collection.save_items(LocalStorage(), root, "widget", "", [])
    with pytest.raises(InvalidArgumentError):
        collection.save_items(LocalStorage(), root, "widget", "widget", None)
    assert not root.exists()


def test_atomic_writes_leave_no_temp_files(root):
    storage = LocalStorage(atomic=True)
    collection.save_items(storage, root, "widget", "widget", [JsonItemFile("a", "1")])
    collection.save_items(storage, root, "widget", "widget", [JsonItemFile("a", "2")])
    assert [p.name for p in (root / "widget").iterdir()] == ["a.json"]
    assert (root / "widget" / "a.json").read_text() == "2"


def test_folder_creation_failure_raises_storage_error(root, write_file):
    write_file(root, "widget", "not a folder")

    with pytest.raises(StorageError) as info:
        collection.load_items(LocalStorage(), root, "widget")
    assert info.value.operation == "create_folder"
    assert isinstance(info.value.__cause__, FileExistsError)
