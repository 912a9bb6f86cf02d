"""Lint pass orchestration.

A pass loads the root manifest, schedules every applicable check on one task
queue, waits for all of them, then applies strict-mode escalation and level
filtering. Checks only communicate through the shared diagnostics log.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from .checks import ExportsCrawler
from .checks import LintContext
from .checks import TypesExportedChecker
from .checks import check_all_files
from .checks import check_bin
from .checks import check_browser
from .checks import check_exports_root_entrypoint
from .checks import check_implicit_index
from .checks import check_known_fields
from .checks import check_local_dependencies
from .checks import check_main
from .checks import check_module
from .checks import check_repository
from .checks import check_use_files
from .checks import check_use_license
from .checks import check_use_type
from .conditions import parse_condition_tree
from .constants import LEGACY_TRY_EXTENSIONS
from .constants import MANIFEST_FILE_NAME
from .diagnostics import DiagnosticLog
from .errors import ManifestNotFoundError
from .errors import ManifestParseError
from .manifest import get_published_field
from .models import LintOptions
from .models import LintResult
from .tasks import TaskQueue
from .vfs import LocalVfs
from .vfs import Vfs

logger = logging.getLogger(__name__)


def _is_set(value: Any) -> bool:
    """JSON truthiness: null, false, 0 and "" count as unset; empty objects do not."""
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    return True


def _legacy_entry_candidates(ctx: LintContext, value: Any) -> list[str]:
    """Files a `main`-like field may resolve to, in resolution order."""
    if not isinstance(value, str):
        return []
    path = ctx.vfs.path_join(ctx.pkg_dir, value)
    return [path] + [ctx.vfs.path_join(path, ext) if ext.startswith("/") else path + ext for ext in LEGACY_TRY_EXTENSIONS]


async def load_manifest(pkg_dir: str, vfs: Vfs) -> dict[str, Any]:
    """Read and parse the root package.json.

    Raises:
        ManifestNotFoundError: If the file cannot be read
        ManifestParseError: If the file cannot be decoded or is not a JSON object
    """
    manifest_path = vfs.path_join(pkg_dir, MANIFEST_FILE_NAME)
    try:
        content = await vfs.read_file(manifest_path)
    except OSError as e:
        raise ManifestNotFoundError(pkg_dir) from e
    except UnicodeDecodeError as e:
        raise ManifestParseError(manifest_path, str(e)) from e
    try:
        manifest = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestParseError(manifest_path, str(e)) from e
    if not isinstance(manifest, dict):
        raise ManifestParseError(manifest_path, "root value must be an object")
    return manifest


def schedule_checks(ctx: LintContext) -> None:
    """Push every check that applies to the manifest onto the pass queue."""
    manifest = ctx.manifest
    main, main_path = get_published_field(manifest, "main")
    module, module_path = get_published_field(manifest, "module")
    exports, exports_path = get_published_field(manifest, "exports")
    has_exports = _is_set(exports)

    check_use_files(ctx)
    check_use_license(ctx)
    check_local_dependencies(ctx)
    check_use_type(ctx)

    # Runtimes fall back to index.js
    checked_paths: list[str] = []
    if main is None and module is None and exports is None:
        check_implicit_index(ctx)
        checked_paths.append(ctx.vfs.path_join(ctx.pkg_dir, "index.js"))

    if main is not None:
        check_main(ctx, main, main_path, has_exports)
    if module is not None:
        check_module(ctx, module, module_path, has_exports)

    exports_tree = parse_condition_tree(exports) if exports is not None else None
    if exports_tree is not None and (main is not None or module is not None):
        check_exports_root_entrypoint(ctx, exports_tree, exports_path, main, module)

    check_repository(ctx)
    check_known_fields(ctx)

    browser, browser_path = get_published_field(manifest, "browser")
    if _is_set(browser):
        check_browser(ctx, browser, browser_path, has_exports)

    if has_exports and exports_tree is not None:
        ExportsCrawler(ctx, exports_tree, exports_path, browser=browser, browser_path=browser_path).start()
        TypesExportedChecker(ctx, exports_tree, exports_path).start()
    else:
        # Without `exports`, every published file can be imported
        checked_paths += _legacy_entry_candidates(ctx, main) + _legacy_entry_candidates(ctx, module)
        check_all_files(ctx, checked_paths)

    bin_value, bin_path = get_published_field(manifest, "bin")
    if _is_set(bin_value):
        check_bin(ctx, bin_value, bin_path)

    imports, imports_path = get_published_field(manifest, "imports")
    if _is_set(imports) and ctx.ensure_type_of_field(imports, ["object"], imports_path):
        ExportsCrawler(ctx, parse_condition_tree(imports), imports_path, is_imports=True).start()


async def lint_package(
    pkg_dir: str,
    vfs: Vfs | None = None,
    options: LintOptions | None = None,
) -> LintResult:
    """Lint a package.

    Args:
        pkg_dir: Package root directory, containing package.json
        vfs: File tree to read from (defaults to the local file system)
        options: Lint options

    Returns:
        LintResult with unordered diagnostics and the parsed manifest

    Raises:
        ManifestNotFoundError: If the root package.json cannot be read
        ManifestParseError: If the root package.json is invalid
    """
    vfs = vfs or LocalVfs()
    options = options or LintOptions()

    manifest = await load_manifest(pkg_dir, vfs)
    log = DiagnosticLog()
    queue = TaskQueue("lint")
    ctx = LintContext(
        pkg_dir=pkg_dir,
        vfs=vfs,
        manifest=manifest,
        log=log,
        queue=queue,
        published_files=options.published_files,
    )

    logger.debug(f"Linting {pkg_dir}")
    schedule_checks(ctx)
    await queue.wait()

    if options.strict:
        log.escalate_warnings()

    diagnostics = log.filter_level(options.level)
    logger.info(f"Linted {pkg_dir}: {len(diagnostics)} diagnostics")
    return LintResult(diagnostics=diagnostics, manifest=manifest)


def lint(pkg_dir: str, vfs: Vfs | None = None, options: LintOptions | None = None) -> LintResult:
    """Synchronous wrapper around `lint_package`. Must not be called from a running event loop."""
    return asyncio.run(lint_package(pkg_dir, vfs, options))
