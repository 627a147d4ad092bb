"""CLI entry point: gyp-cli.

Subcommands:
    gyp-cli init              # Generate binding.gyp for the current project
    gyp-cli update            # Reconcile binding.gyp with the source tree
    gyp-cli set key=value     # Store a value in the local config store
    gyp-cli get key           # Read a value from the local config store
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import NoReturn

import click
import structlog

from gyp_cli import __version__
from gyp_cli.builder import MANIFEST_FILE, ManifestBuilder
from gyp_cli.config_store import ConfigStore
from gyp_cli.core.logging import setup_logging
from gyp_cli.core.settings import Settings
from gyp_cli.diff import render_diff
from gyp_cli.exceptions import GypCliError
from gyp_cli.progress import PhaseProgress, ProgressTracker

log = structlog.get_logger("gyp_cli.cli")

_STATUS_ICONS = {
    "succeeded": click.style("✔", fg="green"),
    "failed": click.style("✖", fg="red"),
}


def _echo_phase(p: PhaseProgress) -> None:
    """Print one status line per finished phase."""
    icon = _STATUS_ICONS.get(p.status)
    if icon is None:
        return
    detail = click.style(f" ({p.detail})", fg="bright_black") if p.detail else ""
    click.echo(f"{icon} {click.style(p.label, bold=True)}{detail}")


def _new_builder(root: str) -> ManifestBuilder:
    tracker = ProgressTracker()
    tracker.callbacks.append(_echo_phase)
    return ManifestBuilder(root, progress=tracker)


def _fail(message: str) -> NoReturn:
    click.echo(click.style(message, fg="red", bold=True), err=True)
    sys.exit(1)


@click.group()
@click.version_option(__version__, prog_name="gyp-cli")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--root",
    default=".",
    type=click.Path(exists=True, file_okay=False),
    help="Project root directory (default: current directory)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, root: str) -> None:
    """gyp-cli: generate and update binding.gyp for native addons."""
    settings = Settings.from_env()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
    )
    ctx.obj = {"settings": settings, "root": str(Path(root).resolve())}


@main.command("init")
@click.pass_obj
def init(obj: dict) -> None:
    """Generate binding.gyp from the local project tree."""
    click.echo(click.style(f"\n > Generate {MANIFEST_FILE}\n", fg="cyan", bold=True))
    builder = _new_builder(obj["root"])
    try:
        manifest = asyncio.run(builder.init())
    except GypCliError as e:
        _fail(str(e))
    except OSError as e:
        log.error("cli.init.scan_failed", error=str(e))
        _fail(f"Unable to scan {obj['root']}: {e}")

    click.echo(click.style(f"\n {MANIFEST_FILE}", fg="bright_black", bold=True))
    click.echo(render_diff({}, manifest.to_dict()))
    click.echo("")


@main.command("update")
@click.pass_obj
def update(obj: dict) -> None:
    """Update binding.gyp with added or removed source files."""
    click.echo(click.style(f"\n > Updating {MANIFEST_FILE}\n", fg="cyan", bold=True))
    builder = _new_builder(obj["root"])
    try:
        result = asyncio.run(builder.update())
    except GypCliError as e:
        _fail(str(e))
    except OSError as e:
        log.error("cli.update.scan_failed", error=str(e))
        _fail(f"Unable to scan {obj['root']}: {e}")

    if not result.changed:
        click.echo(click.style(f"\n {MANIFEST_FILE} is already up to date\n", fg="green"))
        return

    click.echo(click.style(f"\n {MANIFEST_FILE}", fg="bright_black", bold=True))
    click.echo(render_diff(result.before.to_dict(), result.after.to_dict()))
    click.echo(
        f"\n  sources: +{len(result.added_sources)} / -{len(result.removed_sources)}\n"
    )


@main.command("set")
@click.argument("assignment")
@click.pass_obj
def set_key(obj: dict, assignment: str) -> None:
    """Store KEY=VALUE in the local config store."""
    key, sep, value = assignment.partition("=")
    if not sep or not key:
        raise click.BadParameter("expected KEY=VALUE", param_hint="ASSIGNMENT")

    store = ConfigStore(obj["settings"].cache_path)
    try:
        store.load()
        store.set(key, value)
        store.save()
    except GypCliError as e:
        _fail(str(e))
    click.echo(
        click.style("\n > Set new config key ", fg="cyan", bold=True)
        + click.style(f'"{key}"', fg="yellow", bold=True)
        + click.style(" with value: ", fg="cyan", bold=True)
        + click.style(value, fg="yellow", bold=True)
        + "\n"
    )


@main.command("get")
@click.argument("key")
@click.pass_obj
def get_key(obj: dict, key: str) -> None:
    """Print the value stored for KEY."""
    store = ConfigStore(obj["settings"].cache_path)
    try:
        value = store.load().get(key)
    except GypCliError as e:
        _fail(str(e))

    if value is None:
        _fail(f"\n> Requested key '{key}' not found in the local cache!")
    click.echo(value)
    click.echo(
        click.style("\n> Requested key ", bold=True)
        + click.style(f"'{key}'", fg="yellow", bold=True)
        + click.style(" has value => ", bold=True)
        + click.style(value, fg="cyan", bold=True)
    )


if __name__ == "__main__":
    main()
