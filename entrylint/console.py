"""Shared Rich console instances for CLI output."""

from rich.console import Console

console = Console()

# Errors go to stderr so `--json` output stays parseable
err_console = Console(stderr=True)

__all__ = ["console", "err_console"]
