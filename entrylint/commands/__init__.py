"""CLI commands."""

from .config import config
from .lint import lint_cmd

__all__ = ["config", "lint_cmd"]
