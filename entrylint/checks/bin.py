"""Checks for the `bin` field."""

from __future__ import annotations

from typing import Any

from ..constants import LEGACY_TRY_EXTENSIONS
from ..diagnostics import DiagnosticCode
from ..diagnostics import Severity
from ..formats import is_file_path_lintable
from ..formats import starts_with_shebang
from ..manifest import ManifestPath
from .context import LintContext
from .files import check_file_format


def check_bin(ctx: LintContext, bin_value: Any, current_path: ManifestPath) -> None:
    """Check a command path, or every command of a `bin` mapping.

    Args:
        ctx: Lint context
        bin_value: A path string, or a mapping of command name to path
        current_path: Manifest path of `bin_value`
    """
    if isinstance(bin_value, str):
        ctx.queue.push(lambda: _check_bin_file(ctx, bin_value, current_path), label=".".join(current_path))
    elif isinstance(bin_value, dict):
        for name, value in bin_value.items():
            command_path = current_path + (name,)
            # Nested commands are not allowed
            if not ctx.ensure_type_of_field(value, ["string"], command_path):
                continue
            check_bin(ctx, value, command_path)


async def _check_bin_file(ctx: LintContext, bin_value: str, current_path: ManifestPath) -> None:
    bin_path = ctx.vfs.path_join(ctx.pkg_dir, bin_value)
    content = await ctx.read_file(bin_path, current_path, LEGACY_TRY_EXTENSIONS)
    if content is None or not is_file_path_lintable(bin_value):
        return
    if not starts_with_shebang(content):
        ctx.log.add(DiagnosticCode.BIN_FILE_NOT_EXECUTABLE, Severity.ERROR, current_path)
    await check_file_format(ctx, bin_path, content, current_path)
