"""Shared fixtures for the jsonfs tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from jsonfs.manager import JsonFileStore
from jsonfs.storage import LocalStorage


class FailingStorage(LocalStorage):
    """LocalStorage that raises OSError for chosen file names."""

    def __init__(self, *, fail_write: set[str] | None = None, fail_read: set[str] | None = None) -> None:
        super().__init__()
        self.fail_write = fail_write or set()
        self.fail_read = fail_read or set()
        self.writes: list[str] = []

    def write_text(self, path: Path, content: str) -> None:
        if path.name in self.fail_write:
            raise OSError(f"disk full: {path.name}")
        super().write_text(path, content)
        self.writes.append(path.name)

    def read_text(self, path: Path) -> str:
        if path.name in self.fail_read:
            raise PermissionError(f"permission denied: {path.name}")
        return super().read_text(path)


@pytest.fixture()
def root(tmp_path: Path) -> Path:
    return tmp_path / "json"


@pytest.fixture()
def store(root: Path) -> JsonFileStore:
    return JsonFileStore(root, item_type="widget")


def _write_file(folder: Path, name: str, content: str) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / name
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture()
def write_file():
    return _write_file

