"""Format checks for individual code files."""

from __future__ import annotations

import logging
from collections.abc import Collection

from ..constants import UNCRAWLED_DIRECTORY_NAMES
from ..diagnostics import DiagnosticCode
from ..diagnostics import Severity
from ..formats import CodeFormat
from ..formats import classify_code
from ..formats import expected_format
from ..formats import get_code_format_extension
from ..formats import is_explicit_extension
from ..formats import is_file_content_lintable
from ..formats import is_file_path_lintable
from ..formats import is_format_mismatch
from ..manifest import ManifestPath
from ..path_matcher import expand_glob
from ..tasks import TaskQueue
from ..utils.paths import replace_last
from .context import LintContext

logger = logging.getLogger(__name__)


def invalid_format_code(actual_extension: str) -> DiagnosticCode:
    """FILE_INVALID_EXPLICIT_FORMAT for `.mjs`/`.cjs` files, FILE_INVALID_FORMAT otherwise."""
    if is_explicit_extension(actual_extension):
        return DiagnosticCode.FILE_INVALID_EXPLICIT_FORMAT
    return DiagnosticCode.FILE_INVALID_FORMAT


async def check_file_format(
    ctx: LintContext,
    file_path: str,
    content: str,
    pkg_path: ManifestPath,
    *,
    allow_bundler_esm: bool = False,
    allow_sibling_with_expected_extension: bool = False,
    actual_file_path: str | None = None,
) -> CodeFormat:
    """Compare a file's code format with the format its path expects.

    Reports FILE_INVALID_FORMAT or FILE_INVALID_EXPLICIT_FORMAT (warning).

    Args:
        ctx: Lint context
        file_path: Absolute file path
        content: File content
        pkg_path: Manifest path that refers to the file
        allow_bundler_esm: Skip ESM files whose path mentions "browser" or
            "bundler"; those are meant for bundlers, which accept any format
        allow_sibling_with_expected_extension: Skip when a file with the
            expected extension already exists next to this one. Only relaxed
            for implicitly exported (globbed) files.
        actual_file_path: File path to include in the message arguments

    Returns:
        The detected code format
    """
    actual_format = classify_code(content)
    expect_format = await expected_format(file_path, ctx.vfs)
    if not is_format_mismatch(actual_format, expect_format):
        return actual_format

    if allow_bundler_esm and actual_format == CodeFormat.ESM and ("browser" in file_path or "bundler" in file_path):
        return actual_format

    actual_extension = ctx.vfs.get_ext_name(file_path)
    expect_extension = get_code_format_extension(actual_format)

    if allow_sibling_with_expected_extension:
        expect_file_path = replace_last(file_path, actual_extension, expect_extension)
        if await ctx.vfs.is_path_exist(expect_file_path):
            logger.debug(f"Skipping format check, {expect_file_path} exists")
            return actual_format

    args: dict[str, object] = {
        "actual_format": actual_format,
        "expect_format": expect_format,
        "actual_extension": actual_extension,
        "expect_extension": expect_extension,
    }
    if actual_file_path is not None:
        args["actual_file_path"] = actual_file_path
    ctx.log.add(invalid_format_code(actual_extension), Severity.WARNING, pkg_path, **args)
    return actual_format


def check_all_files(ctx: LintContext, checked_paths: Collection[str] = ()) -> None:
    """Without `exports`, every published file is importable. Check them all.

    Args:
        ctx: Lint context
        checked_paths: Files already format-checked through another field
            (e.g. `main`), skipped so each file is reported once
    """

    async def run() -> None:
        files = await expand_glob(
            ctx.vfs.path_join(ctx.pkg_dir, "./*"),
            ctx.vfs,
            ctx.published_files,
            skip_dir_names=UNCRAWLED_DIRECTORY_NAMES,
        )
        pq = TaskQueue("all-files")
        for file_path in files:
            if file_path in checked_paths:
                continue
            relative_path = "/" + ctx.relative(file_path)
            if ctx.has_invalid_jsx_extension(file_path, ("name",), relative_path):
                continue
            if not is_file_path_lintable(file_path):
                continue
            pq.push(lambda file_path=file_path, relative_path=relative_path: check_one(file_path, relative_path))
        await pq.wait()

    async def check_one(file_path: str, relative_path: str) -> None:
        content = await ctx.read_file(file_path)
        if content is None or not is_file_content_lintable(content):
            return
        await check_file_format(
            ctx,
            file_path,
            content,
            ("name",),
            allow_bundler_esm=True,
            allow_sibling_with_expected_extension=True,
            actual_file_path=relative_path,
        )

    ctx.queue.push(run, label="all-files")
