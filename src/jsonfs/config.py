"""JsonFsConfig: project-local config for a JSON file store.

Default layout (all relative to the project root):

    jsonfs.toml           # project config
    .env                  # optional: JSONFS_ROOT=/abs/or/relative/path
    data/                 # json root folder
        <type folder>/
            <item>.json

jsonfs.toml example:

    [store]
    root = "data"
    default_type = "widget"
    read_cache = false
    atomic_writes = false

JSONFS_ROOT in the environment beats .env, which beats store.root.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonfs.manager import JsonFileStore
from jsonfs.storage import LocalStorage

_CONFIG_FILENAME = "jsonfs.toml"
_DEFAULT_ROOT = "data"
_ROOT_ENV = "JSONFS_ROOT"


@dataclass
class StoreConfig:
    root: str = _DEFAULT_ROOT
    default_type: str = ""
    read_cache: bool = False
    atomic_writes: bool = False


@dataclass
class JsonFsConfig:
    """Resolved configuration for a JSON file store project."""

    root: Path                      # directory that contains jsonfs.toml
    json_root: Path = field(default_factory=Path)
    store: StoreConfig = field(default_factory=StoreConfig)

    def ensure_dirs(self) -> None:
        self.json_root.mkdir(parents=True, exist_ok=True)

    def open_store(self, item_type: str | None = None) -> JsonFileStore:
        """Build a JsonFileStore; enables the read cache if configured and a type is known."""
        store = JsonFileStore(
            self.json_root,
            item_type=item_type or self.store.default_type or None,
            storage=LocalStorage(atomic=self.store.atomic_writes),
        )
        if self.store.read_cache and store.item_type is not None:
            store.enable_cache()
        return store


def _load_env(root: Path) -> dict[str, str]:
    """Parse a simple KEY=VALUE .env file (no external dependency)."""
    env_file = root / ".env"
    if not env_file.exists():
        return {}
    env: dict[str, str] = {}
    for line in env_file.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            k, _, v = line.partition("=")
            env[k.strip()] = v.strip().strip('"').strip("'")
    return env


def load_config(root: Path | str | None = None) -> JsonFsConfig:
    """Load jsonfs.toml from root (or search upward from cwd if root is None)."""
    root_path = _find_root(Path(root) if root else Path.cwd())
    config_path = root_path / _CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            raw = tomllib.load(f)

    st = raw.get("store", {})
    store = StoreConfig(
        root=str(st.get("root", _DEFAULT_ROOT)),
        default_type=str(st.get("default_type", "")),
        read_cache=bool(st.get("read_cache", False)),
        atomic_writes=bool(st.get("atomic_writes", False)),
    )

    env = _load_env(root_path)
    json_root_rel = os.environ.get(_ROOT_ENV) or env.get(_ROOT_ENV) or store.root

    return JsonFsConfig(
        root=root_path,
        json_root=root_path / json_root_rel,
        store=store,
    )


def _find_root(start: Path) -> Path:
    """Walk upward from start looking for jsonfs.toml."""
    for directory in (start, *start.parents):
        if (directory / _CONFIG_FILENAME).exists():
            return directory
    return start


def init_config(root: Path, default_type: str = "") -> Path:
    """Write a default jsonfs.toml at root. Raises if already exists."""
    config_path = root / _CONFIG_FILENAME
    if config_path.exists():
        msg = f"jsonfs.toml already exists at {config_path}"
        raise FileExistsError(msg)

    content = f"""\
[store]
root = "{_DEFAULT_ROOT}"            # json root folder; or set JSONFS_ROOT in .env
default_type = "{default_type}"     # type folder used by the read cache and CLI defaults
# read_cache = false        # load a snapshot of default_type when a store is opened
# atomic_writes = false     # write each file via .tmp + rename
"""
    config_path.write_text(content)
    return config_path
