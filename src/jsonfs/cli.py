"""jsonfs CLI — JSON items stored one file per item under per-type folders.

Commands:
    jsonfs init [TYPE]                 create jsonfs.toml + the json root folder
    jsonfs insert TYPE ID [JSON]       insert or replace one item (JSON from stdin if omitted)
    jsonfs import TYPE FILE...         merge files into TYPE (skip existing unless --overwrite)
    jsonfs list TYPE                   list stored files
    jsonfs show TYPE ID                print one item
    jsonfs xml2json FILE               convert XML to JSON
    jsonfs json2xml FILE               convert JSON to XML
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TextIO

import click

from jsonfs.config import JsonFsConfig, init_config, load_config
from jsonfs.errors import JsonFsError
from jsonfs.merge import MergePolicy
from jsonfs.models import JsonItemFile, normalize_relative_path, sanitize_file_name
from jsonfs.xmlbridge import json_to_xml, xml_to_json

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_cfg() -> JsonFsConfig:
    try:
        return load_config()
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc


def _fail(exc: JsonFsError) -> click.ClickException:
    if exc.__cause__ is not None:
        return click.ClickException(f"{exc}: {exc.__cause__}")
    return click.ClickException(str(exc))


def _read_arg_or_stdin(value: str | None) -> str:
    if value is not None:
        return value
    if sys.stdin.isatty():
        raise click.ClickException("Provide JSON as an argument or on stdin")
    return sys.stdin.read()


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="jsonfs")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def cli(verbose: bool) -> None:
    """jsonfs — JSON items on the local file system."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(name)s %(message)s",
    )


# ---------------------------------------------------------------------------
# jsonfs init
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("default_type", required=False, default="")
@click.option("--dir", "root", default=".", show_default=True, help="Project root")
def init(default_type: str, root: str) -> None:
    """Create jsonfs.toml and the json root folder."""
    root_path = Path(root).resolve()
    try:
        config_path = init_config(root_path, default_type=default_type)
        click.echo(f"Created {config_path}")
    except FileExistsError:
        click.echo("jsonfs.toml already exists — skipping init")

    cfg = load_config(root_path)
    cfg.ensure_dirs()
    click.echo(f"Json root : {cfg.json_root}")


# ---------------------------------------------------------------------------
# jsonfs insert / import
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("item_type")
@click.argument("item_id")
@click.argument("content", required=False)
@click.option("--name", "item_name", default=None, help="Display name (defaults to ID)")
def insert(item_type: str, item_id: str, content: str | None, item_name: str | None) -> None:
    """Insert one item, replacing any stored item with the same ID.

    \b
    jsonfs insert widget w1 '{"n": 1}'
    echo '{"n": 2}' | jsonfs insert widget w2
    """
    cfg = _load_cfg()
    text = _read_arg_or_stdin(content)
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid JSON: {exc}") from exc

    try:
        store = cfg.open_store(item_type)
        plan = store.insert_item(cfg.json_root, obj, item_type, item_type, item_id, item_name or item_id)
    except JsonFsError as exc:
        raise _fail(exc) from exc
    verb = "Replaced" if plan.replaced else "Added"
    click.echo(f"{verb} {item_type}/{normalize_relative_path(sanitize_file_name(item_id))}")


@cli.command("import")
@click.argument("item_type")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--overwrite", is_flag=True, help="Replace stored items with the same name")
def import_cmd(item_type: str, files: tuple[Path, ...], overwrite: bool) -> None:
    """Merge JSON files into TYPE, one item per file (named by file stem).

    \b
    jsonfs import widget exports/*.json
    jsonfs import widget exports/*.json --overwrite
    """
    cfg = _load_cfg()
    items: list[JsonItemFile] = []
    for path in files:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise click.ClickException(f"Cannot read {path}: {exc}") from exc
        items.append(JsonItemFile(
            relative_path=path.name,
            content=content,
            display_file_name=path.name,
            item_type_name=item_type,
        ))
    policy = MergePolicy.OVERWRITE_EXISTING if overwrite else MergePolicy.SKIP_EXISTING

    try:
        store = cfg.open_store(item_type)
        plan = store.insert_items(cfg.json_root, items, item_type, item_type, policy)
    except JsonFsError as exc:
        raise _fail(exc) from exc

    for path in plan.skipped:
        click.echo(f"  skipped: {path}", err=True)
    click.echo(
        f"Imported {item_type}: {len(plan.added)} added, {len(plan.replaced)} replaced, "
        f"{len(plan.skipped)} skipped, {plan.kept} kept",
    )


# ---------------------------------------------------------------------------
# jsonfs list / show
# ---------------------------------------------------------------------------


@cli.command("list")
@click.argument("item_type")
def list_cmd(item_type: str) -> None:
    """List the files stored for TYPE."""
    cfg = _load_cfg()
    try:
        store = cfg.open_store(item_type)
        items = store.read_items()
    except JsonFsError as exc:
        raise _fail(exc) from exc
    for item in sorted(items, key=lambda i: i.display_file_name):
        click.echo(f"{item.display_file_name}  ({len(item.content)} chars)")
    click.echo(f"{len(items)} item(s)")


@cli.command()
@click.argument("item_type")
@click.argument("item_id")
def show(item_type: str, item_id: str) -> None:
    """Print the stored JSON for one item."""
    cfg = _load_cfg()
    wanted = normalize_relative_path(sanitize_file_name(item_id))
    try:
        store = cfg.open_store(item_type)
        items = store.read_items()
    except JsonFsError as exc:
        raise _fail(exc) from exc
    for item in items:
        if item.key == wanted:
            click.echo(item.content)
            return
    raise click.ClickException(f"Item not found: {item_type}/{wanted}")


# ---------------------------------------------------------------------------
# jsonfs xml2json / json2xml
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("file", type=click.File("r"))
@click.option("--indent", default=None, type=int)
def xml2json(file: TextIO, indent: int | None) -> None:
    """Convert an XML document to JSON ('-' reads stdin)."""
    try:
        click.echo(xml_to_json(file.read(), indent=indent))
    except JsonFsError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command()
@click.argument("file", type=click.File("r"))
@click.option("--root", "root_name", default=None, help="Root element name")
def json2xml(file: TextIO, root_name: str | None) -> None:
    """Convert a JSON document to XML ('-' reads stdin)."""
    try:
        click.echo(json_to_xml(file.read(), root_name))
    except JsonFsError as exc:
        raise click.ClickException(str(exc)) from exc
