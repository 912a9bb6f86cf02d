"""Checks for manifest fields outside `exports` and `imports`.

Each `check_*` function inspects the manifest synchronously and pushes any
file-reading work onto the pass queue.
"""

from __future__ import annotations

import logging
from typing import Any

from ..conditions import ConditionMap
from ..conditions import ConditionTree
from ..constants import COMMON_INTERNAL_PATHS
from ..constants import KNOWN_FILE_FIELDS
from ..constants import LEGACY_TRY_EXTENSIONS
from ..constants import LICENSE_FILES
from ..diagnostics import DiagnosticCode
from ..diagnostics import Severity
from ..formats import CodeFormat
from ..formats import classify_code
from ..formats import expected_format
from ..formats import is_file_path_lintable
from ..formats import is_format_mismatch
from ..manifest import ManifestPath
from ..manifest import get_published_field
from ..repository import is_deprecated_github_git_url
from ..repository import is_git_url
from ..repository import is_shorthand_github_or_gitlab_url
from ..repository import is_shorthand_repository_url
from ..repository import to_full_git_url
from .context import LintContext
from .files import check_file_format

logger = logging.getLogger(__name__)


def check_use_files(ctx: LintContext) -> None:
    """Suggest a `files` field when tests or tool configs would be published."""
    if ctx.manifest.get("files") is not None:
        return

    async def run() -> None:
        for internal_path in COMMON_INTERNAL_PATHS:
            path = ctx.vfs.path_join(ctx.pkg_dir, internal_path)
            if ctx.published_files is not None and not any(f.startswith(path) for f in ctx.published_files):
                continue
            if await ctx.vfs.is_path_exist(path):
                logger.debug(f"Internal path would be published: {internal_path}")
                ctx.log.add(DiagnosticCode.USE_FILES, Severity.SUGGESTION, ("name",))
                return

    ctx.queue.push(run, label="use-files")


def check_use_license(ctx: LintContext) -> None:
    """Suggest a `license` field when a license file sits at the package root."""
    if ctx.manifest.get("license") is not None:
        return

    async def run() -> None:
        for name in await ctx.vfs.read_dir(ctx.pkg_dir):
            if await ctx.vfs.is_path_dir(ctx.vfs.path_join(ctx.pkg_dir, name)):
                continue
            if any(pattern.match(name) for pattern in LICENSE_FILES):
                ctx.log.add(
                    DiagnosticCode.USE_LICENSE,
                    Severity.SUGGESTION,
                    ("name",),
                    license_file_path="/" + name,
                )
                return

    ctx.queue.push(run, label="use-license")


def check_local_dependencies(ctx: LintContext) -> None:
    """Published dependencies cannot point at local paths."""
    dependencies = ctx.manifest.get("dependencies")
    if not isinstance(dependencies, dict):
        return
    for name, version in dependencies.items():
        if isinstance(version, str) and version.startswith(("file:", "link:")):
            ctx.log.add(DiagnosticCode.LOCAL_DEPENDENCY, Severity.ERROR, ("dependencies", name))


def check_use_type(ctx: LintContext) -> None:
    """Suggest an explicit `type` field."""
    if ctx.manifest.get("type") is None:
        ctx.log.add(DiagnosticCode.USE_TYPE, Severity.SUGGESTION, ("name",))


def check_implicit_index(ctx: LintContext) -> None:
    """Without main, module and exports, runtimes fall back to `index.js`."""

    async def run() -> None:
        index_path = ctx.vfs.path_join(ctx.pkg_dir, "index.js")
        if not await ctx.vfs.is_path_exist(index_path):
            return
        content = await ctx.read_file(index_path)
        if content is None:
            return
        actual_format = classify_code(content)
        expect_format = await expected_format(index_path, ctx.vfs)
        if is_format_mismatch(actual_format, expect_format):
            ctx.log.add(
                DiagnosticCode.IMPLICIT_INDEX_JS_INVALID_FORMAT,
                Severity.WARNING,
                ("name",),
                actual_format=actual_format,
                expect_format=expect_format,
            )

    ctx.queue.push(run, label="implicit-index")


async def _read_legacy_entry(ctx: LintContext, value: Any, pkg_path: ManifestPath) -> str | None:
    """Read a `main`-like entry the way legacy CommonJS resolution does.

    Returns:
        Content of a lintable entry file, or None when there is nothing to lint
    """
    if not ctx.ensure_type_of_field(value, ["string"], pkg_path):
        return None
    path = ctx.vfs.path_join(ctx.pkg_dir, value)
    content = await ctx.read_file(path, pkg_path, LEGACY_TRY_EXTENSIONS)
    if content is None:
        return None
    if ctx.has_invalid_jsx_extension(value, pkg_path):
        return None
    if not is_file_path_lintable(value):
        return None
    return content


def check_main(ctx: LintContext, main: Any, main_path: ManifestPath, has_exports: bool) -> None:
    """`main` is mostly for CommonJS; ESM packages should use `exports`."""

    async def run() -> None:
        content = await _read_legacy_entry(ctx, main, main_path)
        if content is None:
            return
        actual_format = await check_file_format(ctx, ctx.vfs.path_join(ctx.pkg_dir, main), content, main_path)
        if actual_format == CodeFormat.ESM and not has_exports:
            ctx.log.add(DiagnosticCode.HAS_ESM_MAIN_BUT_NO_EXPORTS, Severity.SUGGESTION, main_path)

    ctx.queue.push(run, label="main")


def check_module(ctx: LintContext, module: Any, module_path: ManifestPath, has_exports: bool) -> None:
    """`module` is a bundler-only field and must always point at ESM."""

    async def run() -> None:
        content = await _read_legacy_entry(ctx, module, module_path)
        if content is None:
            return
        if classify_code(content) == CodeFormat.CJS:
            ctx.log.add(DiagnosticCode.MODULE_SHOULD_BE_ESM, Severity.ERROR, module_path)
        if not has_exports:
            ctx.log.add(DiagnosticCode.HAS_MODULE_BUT_NO_EXPORTS, Severity.SUGGESTION, module_path)

    ctx.queue.push(run, label="module")


def check_exports_root_entrypoint(
    ctx: LintContext,
    exports: ConditionTree,
    exports_path: ManifestPath,
    main: Any,
    module: Any,
) -> None:
    """Warn when `exports` only maps subpaths while `main`/`module` define a root entry.

    An exports map is a subpath map when its first key starts with ".";
    otherwise it is a condition map for the root entry.
    """
    if not isinstance(exports, ConditionMap):
        return
    keys = exports.keys()
    if not keys or not keys[0].startswith(".") or "." in keys:
        return
    main_fields = []
    if main:
        main_fields.append("main")
    if module:
        main_fields.append("module")
    ctx.log.add(
        DiagnosticCode.EXPORTS_MISSING_ROOT_ENTRYPOINT,
        Severity.WARNING,
        exports_path,
        main_fields=main_fields,
    )


def check_repository(ctx: LintContext) -> None:
    """Validate the `repository` shorthand string or `{type, url}` object."""
    if "repository" not in ctx.manifest:
        return
    repository = ctx.manifest["repository"]
    if not ctx.ensure_type_of_field(repository, ["string", "object"], ("repository",)):
        return

    if isinstance(repository, str):
        # Strings accept shorthands only
        if not is_shorthand_repository_url(repository):
            ctx.log.add(
                DiagnosticCode.INVALID_REPOSITORY_VALUE,
                Severity.WARNING,
                ("repository",),
                type="invalid-string-shorthand",
            )
        return

    url = repository.get("url")
    if not url or not isinstance(url, str) or repository.get("type") != "git":
        return
    url_path = ("repository", "url")
    if not is_git_url(url):
        ctx.log.add(DiagnosticCode.INVALID_REPOSITORY_VALUE, Severity.WARNING, url_path, type="invalid-git-url")
    elif is_deprecated_github_git_url(url):
        ctx.log.add(
            DiagnosticCode.INVALID_REPOSITORY_VALUE,
            Severity.SUGGESTION,
            url_path,
            type="deprecated-github-git-protocol",
        )
    elif is_shorthand_github_or_gitlab_url(url):
        ctx.log.add(
            DiagnosticCode.INVALID_REPOSITORY_VALUE,
            Severity.SUGGESTION,
            url_path,
            type="shorthand-git-sites",
            suggest_value=to_full_git_url(url),
        )


def check_known_fields(ctx: LintContext) -> None:
    """Files named by other well-known fields must exist."""
    field_names = list(KNOWN_FILE_FIELDS)
    # `typesVersions` redirects types resolution in ways not modelled here
    if get_published_field(ctx.manifest, "typesVersions")[0]:
        field_names = [name for name in field_names if name not in ("types", "typings")]

    has_module = bool(get_published_field(ctx.manifest, "module")[0])
    for field_name in field_names:
        value, field_path = get_published_field(ctx.manifest, field_name)
        if value is None or not ctx.ensure_type_of_field(value, ["string"], field_path):
            continue
        ctx.queue.push(
            lambda field_name=field_name, value=value, field_path=field_path: _check_known_field(
                ctx, field_name, value, field_path, has_module
            ),
            label=field_name,
        )


async def _check_known_field(
    ctx: LintContext,
    field_name: str,
    value: str,
    field_path: ManifestPath,
    has_module: bool,
) -> None:
    content = await ctx.read_file(ctx.vfs.path_join(ctx.pkg_dir, value), field_path, LEGACY_TRY_EXTENSIONS)
    if content is None:
        return
    if field_name in ("jsnext:main", "jsnext"):
        # With `module` present, jsnext is likely kept for compatibility only
        ctx.log.add(
            DiagnosticCode.DEPRECATED_FIELD_JSNEXT,
            Severity.SUGGESTION if has_module else Severity.WARNING,
            field_path,
        )


def check_browser(ctx: LintContext, browser: Any, browser_path: ManifestPath, has_exports: bool) -> None:
    """Files remapped by `browser` must exist; prefer the `browser` condition when `exports` exists."""
    _crawl_browser(ctx, browser, browser_path)
    if not has_exports:
        return
    code = DiagnosticCode.USE_EXPORTS_BROWSER if isinstance(browser, str) else DiagnosticCode.USE_EXPORTS_OR_IMPORTS_BROWSER
    ctx.log.add(code, Severity.SUGGESTION, browser_path)


def _crawl_browser(ctx: LintContext, value: Any, current_path: ManifestPath) -> None:
    if isinstance(value, str):
        path = ctx.vfs.path_join(ctx.pkg_dir, value)
        ctx.queue.push(
            lambda: ctx.read_file(path, current_path, LEGACY_TRY_EXTENSIONS),
            label=".".join(current_path),
        )
    elif isinstance(value, dict):
        for key, item in value.items():
            _crawl_browser(ctx, item, current_path + (key,))
