"""Settings commands for the entrylint CLI."""

from __future__ import annotations

import sys
from pathlib import Path

import click
import yaml

from ..console import console
from ..console import err_console
from ..diagnostics import Severity
from ..settings import SETTING_KEYS
from ..settings import get_settings
from ..utils.error_format import escape_markup


def _parse_value(key: str, raw: str) -> Severity | bool:
    if key == "level":
        return Severity(raw)
    lowered = raw.lower()
    if lowered in ("true", "yes", "1", "on"):
        return True
    if lowered in ("false", "no", "0", "off"):
        return False
    raise ValueError(f"Expected a boolean, got {raw!r}")


@click.group(invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context):
    """Manage entrylint settings.

    Settings are read from ~/.entrylint/settings.yaml (global) and
    <package>/.entrylint.yaml (project). Project settings win.
    """
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@config.command(name="show")
@click.argument("pkg_dir", default=".", type=click.Path(file_okay=False, path_type=Path))
def config_show(pkg_dir: Path):
    """Show merged settings for a package."""
    settings = get_settings(pkg_dir.resolve())
    merged = settings.get_merged_settings()
    if not merged:
        console.print("[dim]No settings configured.[/dim]")
        return
    console.print(escape_markup(yaml.safe_dump(merged, default_flow_style=False).rstrip()))


@config.command(name="set")
@click.argument("key", type=click.Choice(list(SETTING_KEYS)))
@click.argument("value")
@click.option(
    "--scope",
    type=click.Choice(["project", "global"]),
    default="project",
    help="Where to store the setting",
)
@click.option(
    "--pkg-dir",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Package directory for project scope",
)
def config_set(key: str, value: str, scope: str, pkg_dir: Path):
    """Store a setting."""
    try:
        parsed = _parse_value(key, value)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {escape_markup(e)}")
        sys.exit(1)

    settings = get_settings(pkg_dir.resolve())
    stored = parsed.value if isinstance(parsed, Severity) else parsed
    settings.set_setting(key, stored, scope=scope)  # type: ignore[arg-type]
    console.print(f"[green]✓ Set {key} = {stored} ({scope})[/green]")
    console.print(f"[dim]{escape_markup(settings.get_scope_path(scope))}[/dim]")  # type: ignore[arg-type]


@config.command(name="unset")
@click.argument("key", type=click.Choice(list(SETTING_KEYS)))
@click.option(
    "--scope",
    type=click.Choice(["project", "global"]),
    default="project",
    help="Scope to clear the setting from",
)
@click.option(
    "--pkg-dir",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Package directory for project scope",
)
def config_unset(key: str, scope: str, pkg_dir: Path):
    """Clear a setting so the other scope or the built-in default applies."""
    settings = get_settings(pkg_dir.resolve())
    settings.remove_setting(key, scope=scope)  # type: ignore[arg-type]
    console.print(f"[green]✓[/green] Cleared {key} ({scope})")
