"""File system primitives used by the loader and writer.

Anything with the ``Storage`` shape can back a store; ``LocalStorage`` is the
pathlib implementation. Errors are raised as plain ``OSError`` here and given
context one level up, in ``jsonfs.collection``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class Storage(Protocol):
    def exists(self, path: Path) -> bool: ...

    def make_dirs(self, path: Path) -> None: ...

    def list_files(self, path: Path, pattern: str) -> list[Path]: ...

    def read_text(self, path: Path) -> str: ...

    def write_text(self, path: Path, content: str) -> None: ...


class LocalStorage:
    """Local disk storage.

    With ``atomic=True`` each file is written to a sibling ``.tmp`` and renamed
    into place, so a crash never leaves a half-written file. Nothing is locked
    and there is still no atomicity across files.
    """

    def __init__(self, *, atomic: bool = False, encoding: str = "utf-8") -> None:
        self.atomic = atomic
        self.encoding = encoding

    def exists(self, path: Path) -> bool:
        return path.is_dir()

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def list_files(self, path: Path, pattern: str) -> list[Path]:
        """All files under path (recursively) matching pattern, e.g. "*.json"."""
        return [p for p in path.rglob(pattern) if p.is_file()]

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding=self.encoding)

    def write_text(self, path: Path, content: str) -> None:
        if not self.atomic:
            path.write_text(content, encoding=self.encoding)
            return
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(content, encoding=self.encoding)
        tmp.replace(path)
