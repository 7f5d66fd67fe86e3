from __future__ import annotations

import json
import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__, manifest as manifest_mod
from .category import Category
from .config import LOG_LEVELS, Config
from .data import SqliteData
from .errors import WhimsyError
from .generator import generate_compound, generate_single, generate_single_random
from .paths import (
    CONFIG_FILENAME,
    DB_FILENAME,
    DEFAULT_MANIFEST,
    WHIMSY_DIRNAME,
    ensure_in_project,
    get_project_db_path,
)
from .provider import ACTION_CREATE, ACTION_DELETE, ACTION_REPLACE, Provider
from .triggers import parse_trigger_args

app = typer.Typer(name="whimsy", help="whimsy: memorable names from plants, animals and colors.", no_args_is_help=True)
console = Console()

LOG_ENV_VAR = "WHIMSY_LOG_LEVEL"

STARTER_MANIFEST = """\
# Declared whimsy names. Run 'whimsy plan' to preview and 'whimsy apply' to converge.
resources:
  - address: app
    type: whimsy_name
    parts: [color, animal]
    delimiter: "-"
    triggers:
      env: dev
lookups:
  - address: region_plant
    type: whimsy_plant
    triggers:
      region: default
"""

_ACTION_STYLES = {
    ACTION_CREATE: "green",
    ACTION_REPLACE: "yellow",
    ACTION_DELETE: "red",
}


def _configure_logging(verbose: bool) -> None:
    if verbose:
        level = "DEBUG"
    else:
        level = os.getenv(LOG_ENV_VAR, "").upper()
        if level not in LOG_LEVELS:
            try:
                level = Config.load_with_project_context().log_level
            except RuntimeError:
                level = "WARNING"
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format="%(name)s: %(message)s")


@contextmanager
def _open_provider() -> Iterator[Provider]:
    """Provider bound to the enclosing project's state store, closed on exit"""
    ensure_in_project()
    db_path = get_project_db_path()
    if not db_path or not db_path.exists():
        raise RuntimeError(f"State database not found at {db_path}. Run 'whimsy init' first.")
    config = Config.load_with_project_context()
    with SqliteData(db_path=str(db_path)) as data:
        yield Provider(data, config=config)


def _resolve_manifest(path: Optional[Path]) -> Path:
    if path:
        return path
    root = ensure_in_project()
    return root / Config.load_with_project_context().manifest


def _fail(e: Exception) -> int:
    typer.echo(f"Error: {e}", err=True)
    return 2


def cmd_init(path: Optional[Path], force: bool) -> int:
    target = Path(path or ".").resolve()
    target.mkdir(parents=True, exist_ok=True)
    whimsy_dir = target / WHIMSY_DIRNAME
    if whimsy_dir.exists() and force:
        shutil.rmtree(whimsy_dir)
    whimsy_dir.mkdir(parents=True, exist_ok=True)

    cfg = whimsy_dir / CONFIG_FILENAME
    if not cfg.exists():
        cfg.write_text("")
    data = SqliteData(db_path=str(whimsy_dir / DB_FILENAME))
    data.close()

    manifest_path = target / DEFAULT_MANIFEST
    if not manifest_path.exists() or force:
        manifest_path.write_text(STARTER_MANIFEST)

    typer.echo(f"Initialized whimsy project at {whimsy_dir}")
    return 0


def cmd_words(category: str, as_json: bool) -> int:
    try:
        word_set = Category.parse(category).words
    except WhimsyError as e:
        return _fail(e)
    if as_json:
        typer.echo(json.dumps(list(word_set)))
    else:
        for word in word_set:
            typer.echo(word)
    return 0


def cmd_pick(category: str, trigger: Optional[List[str]]) -> int:
    try:
        typer.echo(generate_single(category, parse_trigger_args(trigger)))
        return 0
    except (WhimsyError, ValueError) as e:
        return _fail(e)


def cmd_random(category: str) -> int:
    try:
        typer.echo(generate_single_random(category))
        return 0
    except WhimsyError as e:
        return _fail(e)


def cmd_name(parts: Optional[List[str]], delimiter: Optional[str], shuffle: Optional[bool]) -> int:
    try:
        config = Config.load_with_project_context()
        name = generate_compound(
            parts or config.default_parts,
            config.default_delimiter if delimiter is None else delimiter,
            config.default_random if shuffle is None else shuffle,
        )
        typer.echo(name)
        return 0
    except (WhimsyError, RuntimeError) as e:
        return _fail(e)


def cmd_plan(manifest_path: Optional[Path], prune: bool) -> int:
    try:
        manifest = manifest_mod.Manifest.from_yaml_file(_resolve_manifest(manifest_path))
        with _open_provider() as provider:
            actions = manifest_mod.plan(provider, manifest, prune=prune)
    except (WhimsyError, RuntimeError) as e:
        return _fail(e)

    table = Table(title="Plan", show_header=True, header_style="bold magenta")
    table.add_column("Address")
    table.add_column("Type")
    table.add_column("Action")
    table.add_column("Current name")
    for step in actions:
        style = _ACTION_STYLES.get(step.action, "dim")
        table.add_row(step.address, step.type_name, f"[{style}]{step.action}[/{style}]", step.current_name or "-")
    console.print(table)

    changes = sum(1 for a in actions if a.action in _ACTION_STYLES)
    console.print(f"{changes} change(s) planned")
    return 0


def cmd_apply(manifest_path: Optional[Path], prune: bool, as_json: bool) -> int:
    try:
        manifest = manifest_mod.Manifest.from_yaml_file(_resolve_manifest(manifest_path))
        with _open_provider() as provider:
            result = manifest_mod.apply(provider, manifest, prune=prune)
    except (WhimsyError, RuntimeError) as e:
        return _fail(e)

    if as_json:
        typer.echo(json.dumps(result, indent=2))
        return 0
    for step in result["actions"]:
        address = step["address"]
        if step["action"] == ACTION_DELETE:
            console.print(f"[red]-[/red] {address} (was {step['current_name']})")
        else:
            name = result["resources"][address]["name"]
            console.print(f"[green]✓[/green] {address} = {name} ({step['action']})")
    for address, lookup in result["lookups"].items():
        console.print(f"[blue]?[/blue] {address} = {lookup['name']}")
    return 0


def cmd_show(address: str) -> int:
    try:
        with _open_provider() as provider:
            entity = provider.get(address)
    except (WhimsyError, RuntimeError) as e:
        return _fail(e)
    typer.echo(json.dumps(entity.to_dict(), indent=2))
    return 0


def cmd_state() -> int:
    try:
        with _open_provider() as provider:
            entities = provider.entities()
    except (WhimsyError, RuntimeError) as e:
        return _fail(e)
    if not entities:
        console.print("[dim]No entities in state[/dim]")
        return 0
    table = Table(title="State", show_header=True, header_style="bold green")
    table.add_column("Address")
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Triggers")
    table.add_column("Updated")
    for entity in entities:
        triggers = ", ".join(f"{k}={v}" for k, v in sorted(entity.snapshot.triggers.items()))
        table.add_row(
            entity.address,
            entity.type_name,
            entity.name,
            triggers or "-",
            entity.updated_at.strftime("%Y-%m-%d %H:%M") if entity.updated_at else "-",
        )
    console.print(table)
    return 0


def cmd_destroy(address: str) -> int:
    try:
        with _open_provider() as provider:
            entity = provider.destroy(address)
    except (WhimsyError, RuntimeError) as e:
        return _fail(e)
    typer.echo(f"✓ Destroyed {address} ({entity.name})")
    return 0


def cmd_config_set(key: str, value: str) -> int:
    try:
        config = Config.load_with_project_context()
        if key == "log_level" and value.upper() not in LOG_LEVELS:
            typer.echo(f"Error: Invalid log_level '{value}'. Must be one of: {', '.join(LOG_LEVELS)}", err=True)
            return 2
        if key == "default_parts":
            parts = [p.strip() for p in value.split(",") if p.strip()]
            for part in parts:
                Category.parse(part)
            config.default_parts = parts
        else:
            config.set(key, value)
        config.save()
        typer.echo(f"✓ Set {key} = {value}")
        return 0
    except (WhimsyError, RuntimeError) as e:
        return _fail(e)


def cmd_config_get(key: Optional[str]) -> int:
    try:
        config = Config.load_with_project_context()
    except RuntimeError as e:
        return _fail(e)
    if key:
        value = config.get(key)
        typer.echo(f"{key} = (not set)" if value is None else f"{key} = {value}")
        return 0
    typer.echo("Configuration:")
    typer.echo(f"  default_parts: {','.join(config.default_parts)}")
    typer.echo(f"  default_delimiter: {config.default_delimiter}")
    typer.echo(f"  default_random: {config.default_random}")
    typer.echo(f"  log_level: {config.log_level}")
    typer.echo(f"  manifest: {config.manifest}")
    return 0


# Typer command bindings


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log lifecycle decisions at DEBUG level"),
):
    _configure_logging(verbose)


@app.command("version", help="Print the whimsy version")
def version_command():
    typer.echo(__version__)


@app.command("init", help="Create a .whimsy project with state database and starter manifest")
def init_command(
    path: Optional[Path] = typer.Argument(None, help="Directory to initialize"),
    force: bool = typer.Option(False, "--force", help="Recreate .whimsy and the manifest if present"),
):
    raise typer.Exit(cmd_init(path=path, force=force))


@app.command("words", help="List the words of a category")
def words_command(
    category: str = typer.Argument(..., help="plant, animal or color"),
    as_json: bool = typer.Option(False, "--json", help="Print as a JSON array"),
):
    raise typer.Exit(cmd_words(category, as_json))


@app.command("pick", help="Deterministic word for a category and triggers")
def pick_command(
    category: str = typer.Argument(..., help="plant, animal or color"),
    trigger: Optional[List[str]] = typer.Option(None, "--trigger", "-t", help="Trigger as key=value (repeatable)"),
):
    raise typer.Exit(cmd_pick(category, trigger))


@app.command("random", help="Random word from a category")
def random_command(
    category: str = typer.Argument(..., help="plant, animal or color"),
):
    raise typer.Exit(cmd_random(category))


@app.command("name", help="Random compound name")
def name_command(
    part: Optional[List[str]] = typer.Option(None, "--part", "-p", help="Category to include, in order (repeatable)"),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", "-d", help="Separator between parts"),
    shuffle: Optional[bool] = typer.Option(None, "--random/--ordered", help="Randomize part order"),
):
    raise typer.Exit(cmd_name(part, delimiter, shuffle))


@app.command("plan", help="Show what apply would change")
def plan_command(
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Manifest path (default from config)"),
    prune: bool = typer.Option(True, "--prune/--no-prune", help="Plan deletion of undeclared entities"),
):
    raise typer.Exit(cmd_plan(file, prune))


@app.command("apply", help="Converge state to the manifest")
def apply_command(
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Manifest path (default from config)"),
    prune: bool = typer.Option(True, "--prune/--no-prune", help="Delete undeclared entities"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
):
    raise typer.Exit(cmd_apply(file, prune, as_json))


@app.command("show", help="Show one persisted entity as JSON")
def show_command(address: str = typer.Argument(..., help="Entity address")):
    raise typer.Exit(cmd_show(address))


@app.command("state", help="List persisted entities")
def state_command():
    raise typer.Exit(cmd_state())


@app.command("destroy", help="Delete one persisted entity")
def destroy_command(address: str = typer.Argument(..., help="Entity address")):
    raise typer.Exit(cmd_destroy(address))


@app.command("config", help="Get or set configuration values")
def config_command(
    key: Optional[str] = typer.Argument(None, help="Configuration key"),
    value: Optional[str] = typer.Argument(None, help="Value to set (omit to get current value)"),
):
    if value is not None and key:
        code = cmd_config_set(key, value)
    else:
        code = cmd_config_get(key)
    raise typer.Exit(code)


def main(argv: list[str] | None = None) -> int:
    """Programmatic entry point returning an exit code."""
    try:
        # With standalone_mode=False click returns the exit code instead of raising
        code = app(args=argv, prog_name="whimsy", standalone_mode=False)
        return int(code or 0)
    except typer.Exit as e:
        return int(e.exit_code or 0)
    except SystemExit as e:
        return int(e.code or 0)
    except Exception as e:  # noqa: BLE001
        typer.echo(f"Unexpected error: {e}", err=True)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
