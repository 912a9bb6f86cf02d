"""Lint command for the entrylint CLI."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..console import err_console
from ..core import lint
from ..diagnostics import Severity
from ..display.formatters import format_diagnostic_args
from ..display.formatters import format_diagnostic_message
from ..display.formatters import format_message_path
from ..errors import EntrylintError
from ..logging_setup import init_json_logging
from ..logging_setup import is_logging_requested
from ..models import LintOptions
from ..models import LintResult
from ..settings import get_settings
from ..utils.error_format import escape_markup

logger = logging.getLogger(__name__)

SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.SUGGESTION: "blue",
}


def _render_table(result: LintResult, pkg_name: str, verbose: bool = False) -> None:
    diagnostics = result.sorted()
    if not diagnostics:
        console.print(f"[green]✓ {escape_markup(pkg_name)}: all good[/green]")
        return

    table = Table(title=f"Lint results for {escape_markup(pkg_name)}")
    table.add_column("Severity")
    table.add_column("Code", style="cyan")
    table.add_column("Path", style="dim")
    table.add_column("Message")
    if verbose:
        table.add_column("Args", style="dim")

    for d in diagnostics:
        style = SEVERITY_STYLES[d.severity]
        row = [
            f"[{style}]{d.severity.value}[/{style}]",
            d.code.value,
            escape_markup(format_message_path(d.path)),
            escape_markup(format_diagnostic_message(d)),
        ]
        if verbose:
            row.append(escape_markup(format_diagnostic_args(d.args)))
        table.add_row(*row)

    console.print(table)
    console.print(
        f"[red]{result.count(Severity.ERROR)} errors[/red], "
        f"[yellow]{result.count(Severity.WARNING)} warnings[/yellow], "
        f"[blue]{result.count(Severity.SUGGESTION)} suggestions[/blue]"
    )


def _render_json(result: LintResult) -> None:
    payload = [
        {
            **d.model_dump(mode="json"),
            "message": format_diagnostic_message(d),
        }
        for d in result.sorted()
    ]
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@click.command(name="lint")
@click.argument("pkg_dir", default=".", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--level",
    type=click.Choice([s.value for s in Severity]),
    default=None,
    help="Minimum severity to report (default: suggestion)",
)
@click.option("--strict/--no-strict", default=None, help="Report warnings as errors")
@click.option("--json", "as_json", is_flag=True, help="Print diagnostics as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Show diagnostic arguments")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write JSONL logs to this file")
def lint_cmd(
    pkg_dir: Path,
    level: str | None,
    strict: bool | None,
    as_json: bool,
    verbose: bool,
    log_file: str | None,
):
    """Lint the package.json in PKG_DIR (default: current directory)."""
    if log_file or is_logging_requested():
        init_json_logging(log_file)

    pkg_dir = pkg_dir.resolve()
    settings = get_settings(pkg_dir)
    options = LintOptions(
        level=Severity(level) if level else (settings.get_level() or Severity.SUGGESTION),
        strict=strict if strict is not None else bool(settings.get_strict()),
    )
    logger.debug(f"Linting {pkg_dir} with {options!r}")

    try:
        result = lint(str(pkg_dir), options=options)
    except EntrylintError as e:
        err_console.print(f"[red]Error:[/red] {escape_markup(e)}")
        sys.exit(1)

    if as_json:
        _render_json(result)
    else:
        _render_table(result, str(result.manifest.get("name") or pkg_dir.name), verbose)

    if result.has_errors:
        sys.exit(1)
