"""Declaration file pairing.

Replays how a type-checker in bundler resolution mode finds the declaration
file for each code entry point, and reports entry points whose types are
missing or in the wrong module format.
"""

from __future__ import annotations

import logging
from typing import Any

from ..conditions import ConditionMap
from ..conditions import ConditionTree
from ..conditions import FallbackArray
from ..conditions import Leaf
from ..conditions import ResolvedEntry
from ..conditions import resolve_exports
from ..constants import TYPES_RESOLUTION_ENVIRONMENTS
from ..diagnostics import DiagnosticCode
from ..diagnostics import Severity
from ..formats import CodeFormat
from ..formats import expected_dts_format
from ..formats import expected_format
from ..formats import get_adjacent_dts_path
from ..formats import get_dts_code_format_extension
from ..formats import is_dts_file
from ..manifest import ManifestPath
from ..manifest import get_published_field
from .context import LintContext

logger = logging.getLogger(__name__)

# Module format a `types` target is expected to have, per resolution condition
CONDITION_FORMATS: dict[str, CodeFormat] = {
    "import": CodeFormat.ESM,
    "require": CodeFormat.CJS,
}


class TypesExportedChecker:
    """Checks that `exports` pairs every code entry with usable declarations.

    Only the root entry point is checked. The package is considered to ship
    types when it declares `types` or `typings`, or has an `./index.d.ts`.

    Args:
        ctx: Lint context
        exports: Parsed `exports` tree
        exports_path: Manifest path of the `exports` field
    """

    def __init__(self, ctx: LintContext, exports: ConditionTree, exports_path: ManifestPath):
        self.ctx = ctx
        self.exports = exports
        self.exports_path = exports_path

    def start(self) -> None:
        """Pick the root entry point of `exports` and schedule its check."""
        exports = self.exports
        if isinstance(exports, (Leaf, FallbackArray)):
            self._schedule(None, exports)
        elif isinstance(exports, ConditionMap):
            keys = exports.keys()
            if not keys:
                return
            # Condition keys at the top level: the whole map is the root entry
            if not keys[0].startswith("."):
                self._schedule(None, exports)
            elif "." in exports:
                self._schedule(".", exports.get("."))

    def _schedule(self, exports_key: str | None, root_value: ConditionTree | None) -> None:
        self.ctx.queue.push(lambda: self.check(exports_key, root_value), label="types-exported")

    async def find_types_file_path(self, exports_key: str | None = None) -> str | None:
        """Declaration file of the root entry point, if the package ships one."""
        if exports_key not in (None, "."):
            return None
        types, _ = get_published_field(self.ctx.manifest, "types")
        typings, _ = get_published_field(self.ctx.manifest, "typings")
        if types and isinstance(types, str):
            return types
        if typings and isinstance(typings, str):
            return typings
        if await self.ctx.read_file(self.ctx.vfs.path_join(self.ctx.pkg_dir, "./index.d.ts")) is not None:
            return "./index.d.ts"
        return None

    async def check(self, exports_key: str | None, root_value: ConditionTree | None) -> None:
        """Resolve every environment and format, and check the declaration targets.

        Args:
            exports_key: Entry key to check, or None when `exports` itself is
                the root entry
            root_value: Condition tree of that entry
        """
        types_file_path = await self.find_types_file_path(exports_key)
        if types_file_path is None:
            logger.debug("No declaration file found, skipping types pairing")
            return

        ctx = self.ctx
        root_path = self.exports_path if exports_key is None else self.exports_path + (exports_key,)

        def resolve(*conditions: str | None) -> ResolvedEntry | None:
            return resolve_exports(root_value, [c for c in conditions if c], root_path)

        seen_keys: set[str] = set()
        for env in TYPES_RESOLUTION_ENVIRONMENTS:
            code_results: dict[str, Any] = {
                "import": resolve("import", env),
                "require": resolve("require", env),
            }
            is_dual_publish = (
                code_results["import"] is not None
                and code_results["require"] is not None
                and code_results["import"].value != code_results["require"].value
            )

            for condition in ("import", "require"):
                types_result = resolve("types", condition, env)
                if types_result is None:
                    continue

                # Dual publishing needs a declaration per format, so both are checked
                seen_key = ".".join(types_result.path) + (condition if is_dual_publish else "")
                if seen_key in seen_keys:
                    continue
                seen_keys.add(seen_key)

                # A missing target is reported by the exports crawl
                types_resolved_path = ctx.vfs.path_join(ctx.pkg_dir, types_result.value)
                if not await ctx.vfs.is_path_exist(types_resolved_path):
                    continue

                if is_dts_file(types_result.value):
                    code_result = None if is_dual_publish else code_results[condition]
                    await self._check_dts_format(condition, types_result, types_resolved_path, code_result)
                else:
                    await self._check_adjacent_dts(condition, types_result, types_file_path)

    async def _check_dts_format(
        self,
        condition: str,
        types_result: ResolvedEntry,
        types_resolved_path: str,
        code_result: ResolvedEntry | None,
    ) -> None:
        """Report a declaration file whose format differs from the code it types."""
        ctx = self.ctx
        actual_format = await expected_dts_format(types_resolved_path, ctx.vfs)

        # Prefer the format of the code file this declaration sits beside
        expect_format: CodeFormat | None = None
        if code_result is not None:
            code_resolved_path = ctx.vfs.path_join(ctx.pkg_dir, code_result.value)
            if await ctx.vfs.is_path_exist(code_resolved_path):
                expect_format = await expected_format(code_resolved_path, ctx.vfs)
        if expect_format is None:
            expect_format = CONDITION_FORMATS[condition]

        if actual_format == expect_format:
            return

        ctx.log.add(
            DiagnosticCode.EXPORTS_TYPES_INVALID_FORMAT,
            Severity.WARNING,
            types_result.path,
            condition=condition,
            actual_format=actual_format,
            expect_format=expect_format,
            actual_extension=ctx.vfs.get_ext_name(types_result.value),
            expect_extension=get_dts_code_format_extension(expect_format),
            expect_path=_expect_condition_path(types_result.path, condition),
        )

    async def _check_adjacent_dts(self, condition: str, types_result: ResolvedEntry, types_file_path: str) -> None:
        """Report a code target with no declaration file next to it."""
        ctx = self.ctx
        adjacent_dts_path = ctx.vfs.path_join(ctx.pkg_dir, get_adjacent_dts_path(types_result.value))
        if await ctx.vfs.is_path_exist(adjacent_dts_path):
            return

        # The root declaration file can be reused only if it has the condition's format
        actual_format = await expected_dts_format(ctx.vfs.path_join(ctx.pkg_dir, types_file_path), ctx.vfs)
        expect_format = CONDITION_FORMATS[condition]
        args: dict[str, Any] = {"types_file_path": types_file_path}
        if actual_format != expect_format:
            args["actual_extension"] = ctx.vfs.get_ext_name(types_file_path)
            args["expect_extension"] = get_dts_code_format_extension(expect_format)
        ctx.log.add(DiagnosticCode.TYPES_NOT_EXPORTED, Severity.WARNING, types_result.path, **args)


def _expect_condition_path(path: ManifestPath, condition: str) -> list[str]:
    """Where the declaration for `condition` should be declared.

    ("exports", "types") -> ("exports", "import", "types")
    ("exports", "types", "node") -> ("exports", "types", "node", "import")
    """
    expect_path = list(path)
    if condition in expect_path:
        return expect_path
    if "types" in expect_path and expect_path.index("types") == len(expect_path) - 1:
        expect_path.insert(len(expect_path) - 1, condition)
    else:
        expect_path.append(condition)
    return expect_path
