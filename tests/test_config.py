"""Tests for jsonfs.toml / .env configuration."""
from __future__ import annotations

import pytest

from jsonfs.config import init_config, load_config


@pytest.fixture(autouse=True)
def _no_env_root(monkeypatch):
    monkeypatch.delenv("JSONFS_ROOT", raising=False)


def test_defaults_without_config_file(tmp_path):
    cfg = load_config(tmp_path)
    assert cfg.root == tmp_path
    assert cfg.json_root == tmp_path / "data"
    assert cfg.store.read_cache is False
    assert cfg.store.atomic_writes is False


def test_reads_store_section(tmp_path):
    (tmp_path / "jsonfs.toml").write_text(
        '[store]\nroot = "items"\ndefault_type = "widget"\nread_cache = true\natomic_writes = true\n'
    )
    cfg = load_config(tmp_path)
    assert cfg.json_root == tmp_path / "items"
    assert cfg.store.default_type == "widget"
    assert cfg.store.read_cache is True
    assert cfg.store.atomic_writes is True


def test_finds_config_in_parent(tmp_path):
    (tmp_path / "jsonfs.toml").write_text('[store]\nroot = "items"\n')
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert load_config(nested).root == tmp_path


def test_env_file_and_environment_override_root(tmp_path, monkeypatch):
    (tmp_path / "jsonfs.toml").write_text('[store]\nroot = "items"\n')
    (tmp_path / ".env").write_text("# local\nJSONFS_ROOT='from-dotenv'\n")
    assert load_config(tmp_path).json_root == tmp_path / "from-dotenv"

    monkeypatch.setenv("JSONFS_ROOT", str(tmp_path / "abs"))
    assert load_config(tmp_path).json_root == tmp_path / "abs"


def test_init_config_writes_once(tmp_path):
    path = init_config(tmp_path, default_type="widget")
    cfg = load_config(tmp_path)
    assert cfg.store.default_type == "widget"
    assert cfg.json_root == tmp_path / "data"
    with pytest.raises(FileExistsError):
        init_config(tmp_path)
    assert path.exists()


def test_open_store_applies_settings(tmp_path):
    (tmp_path / "jsonfs.toml").write_text(
        '[store]\ndefault_type = "widget"\nread_cache = true\natomic_writes = true\n'
    )
    store = load_config(tmp_path).open_store()
    assert store.item_type == "widget"
    assert store.cache_enabled is True
    assert store.storage.atomic is True
    assert (tmp_path / "data" / "widget").is_dir()


def test_open_store_without_type_leaves_cache_off(tmp_path):
    (tmp_path / "jsonfs.toml").write_text("[store]\nread_cache = true\n")
    store = load_config(tmp_path).open_store()
    assert store.item_type is None
    assert store.cache_enabled is False
