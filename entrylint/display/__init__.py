"""Display helpers for the CLI."""

from .formatters import format_diagnostic_args
from .formatters import format_diagnostic_message
from .formatters import format_message_path

__all__ = ["format_diagnostic_args", "format_diagnostic_message", "format_message_path"]
