"""Tests for Rich markup escaping in CLI output.

Manifest paths such as `pkg.exports["./[id]"]` and file paths from error
messages contain brackets that Rich would otherwise parse as markup.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console

from entrylint.display.formatters import format_message_path
from entrylint.errors import ManifestNotFoundError
from entrylint.utils.error_format import escape_markup


class TestEscapeMarkup:
    """Unit tests for the escape_markup() helper."""

    def test_path_with_closing_tag_pattern(self):
        """[/pkg/dist] looks like a closing tag."""
        result = escape_markup("[/pkg/dist/index.js]")
        assert "/pkg/dist/index.js" in result

    def test_preserves_plain_text(self):
        assert escape_markup("File does not exist") == "File does not exist"

    def test_handles_non_string_input(self):
        """Exceptions and other objects are str()-converted first."""
        assert escape_markup(ValueError("boom")) == "boom"
        assert escape_markup(42) == "42"
        assert escape_markup(None) == "None"

    def test_empty_string(self):
        assert escape_markup("") == ""

    def test_manifest_path_renders_correctly_in_rich(self):
        """Bracketed subpath keys are not consumed as markup."""
        buf = StringIO()
        c = Console(file=buf, force_terminal=False, no_color=True, width=200)
        path = format_message_path(("exports", "[id]"))
        c.print(f"[dim]{escape_markup(path)}[/dim]")
        assert 'pkg.exports["[id]"]' in buf.getvalue()

    def test_silent_loss_renders_correctly(self):
        buf = StringIO()
        c = Console(file=buf, force_terminal=False, no_color=True, width=200)
        c.print(f"[red]Error:[/red] {escape_markup('Missing [config/file.yaml]')}")
        assert "[config/file.yaml]" in buf.getvalue()

    def test_entrylint_error_message(self):
        """Error messages are escaped from the exception's str()."""
        assert escape_markup(ManifestNotFoundError("/pkg")).startswith("Unable to find package.json at /pkg.")
