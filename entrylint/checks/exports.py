"""Condition tree resolver for the `exports` and `imports` fields.

Walks a condition tree in declared key order, enforcing the ordering rules
runtimes and bundlers rely on, then expands every target and checks the
files it resolves to.

Ordering rules checked at each ConditionMap:
- `types` comes first (exports only), so type-checkers see it before code
- `module` precedes `require`
- `default` comes last
- top-level `imports` keys start with `#`

Once a `node` key has been passed, later siblings and all their descendants
are only read by bundlers, which accept any format, so format checks stop.
"""

from __future__ import annotations

import logging
from typing import Any

from ..conditions import ConditionMap
from ..conditions import ConditionTree
from ..conditions import Exclusion
from ..conditions import FallbackArray
from ..conditions import InvalidValue
from ..conditions import Leaf
from ..conditions import has_key_nested
from ..conditions import has_value_nested
from ..constants import KNOWN_BROWSERISH_CONDITIONS
from ..diagnostics import DiagnosticCode
from ..diagnostics import Severity
from ..diagnostics import scoped_code
from ..formats import CodeFormat
from ..formats import classify_code
from ..formats import is_file_content_lintable
from ..formats import is_file_path_lintable
from ..formats import is_file_path_raw_ts
from ..manifest import ManifestPath
from ..manifest import get_path_value
from ..manifest import json_type_name
from ..path_matcher import expand_glob
from ..tasks import TaskQueue
from ..utils.paths import is_absolute_path
from ..utils.paths import is_relative_path
from .context import LintContext
from .files import check_file_format

logger = logging.getLogger(__name__)


class ExportsCrawler:
    """Recursively checks one `exports` or `imports` condition tree.

    Args:
        ctx: Lint context
        root: Parsed condition tree of the field
        root_path: Manifest path of the field, e.g. ("exports",) or
            ("publishConfig", "exports")
        is_imports: Whether this is the `imports` field
        browser: Raw `browser` field value, for remap conflict detection
        browser_path: Manifest path of the `browser` field
    """

    def __init__(
        self,
        ctx: LintContext,
        root: ConditionTree,
        root_path: ManifestPath,
        is_imports: bool = False,
        browser: Any = None,
        browser_path: ManifestPath = ("browser",),
    ):
        self.ctx = ctx
        self.root = root
        self.root_path = root_path
        self.is_imports = is_imports
        self.browser = browser
        self.browser_path = browser_path

    def start(self) -> None:
        """Crawl the whole tree, scheduling file checks on the pass queue."""
        self.crawl(self.root, self.root_path)

    def crawl(self, tree: ConditionTree, current_path: ManifestPath, after_node_condition: bool = False) -> None:
        if isinstance(tree, Leaf):
            self.ctx.queue.push(
                lambda: self._check_leaf(tree.value, current_path, after_node_condition),
                label=".".join(current_path),
            )
        elif isinstance(tree, FallbackArray):
            self.ctx.log.add(self._code("FALLBACK_ARRAY_USE"), Severity.WARNING, current_path)
            for index, item in enumerate(tree.items):
                self.crawl(item, current_path + (str(index),), after_node_condition)
        elif isinstance(tree, ConditionMap):
            self._crawl_map(tree, current_path, after_node_condition)
        elif isinstance(tree, InvalidValue):
            self.ctx.log.add(
                DiagnosticCode.FIELD_INVALID_VALUE_TYPE,
                Severity.ERROR,
                current_path,
                actual_type=json_type_name(tree.value),
                expect_types=["string", "array", "object", "null"],
            )
        elif isinstance(tree, Exclusion):
            # Only hides glob matches of sibling keys, see path_matcher.expand_glob
            pass

    def _code(self, name: str) -> DiagnosticCode:
        return scoped_code(name, self.is_imports)

    # ----- ConditionMap -----

    def _crawl_map(self, tree: ConditionMap, current_path: ManifestPath, after_node_condition: bool) -> None:
        keys = tree.keys()

        if not self.is_imports and "types" in tree and keys[0] != "types":
            self._check_types_first(tree, keys, current_path)

        if "module" in tree and "require" in tree and keys.index("module") > keys.index("require"):
            self.ctx.log.add(
                self._code("MODULE_SHOULD_PRECEDE_REQUIRE"),
                Severity.ERROR,
                current_path + ("module",),
            )

        if "default" in tree and keys[-1] != "default":
            self.ctx.log.add(
                self._code("DEFAULT_SHOULD_BE_LAST"),
                Severity.ERROR,
                current_path + ("default",),
            )

        is_top_level_imports = self.is_imports and current_path[-1:] == ("imports",)

        is_key_after_node_condition = after_node_condition
        for key, value in tree:
            if is_top_level_imports and not key.startswith("#"):
                self.ctx.log.add(
                    DiagnosticCode.IMPORTS_KEY_INVALID,
                    Severity.ERROR,
                    current_path + (key,),
                    suggest_key="#" + key.lstrip("/"),
                )
            self.crawl(value, current_path + (key,), is_key_after_node_condition)
            if key == "node":
                is_key_after_node_condition = True

    def _check_types_first(self, tree: ConditionMap, keys: list[str], current_path: ManifestPath) -> None:
        """Report a `types` condition that is not first.

        Preceding keys are tolerated when they are versioned `types*`
        conditions, point at raw TypeScript sources (which also carry types),
        or nest their own `types` condition; then this `types` is a fallback.
        """
        preceding_keys = [key for key in keys[: keys.index("types")] if not _is_types_like(key, tree.get(key))]
        if not preceding_keys:
            return
        for key in preceding_keys:
            value = tree.get(key)
            if isinstance(value, (ConditionMap, FallbackArray)) and has_key_nested(value, "types"):
                return
        self.ctx.log.add(
            DiagnosticCode.EXPORTS_TYPES_SHOULD_BE_FIRST,
            Severity.ERROR,
            current_path + ("types",),
        )

    # ----- Leaf -----

    async def _check_leaf(self, value: str, current_path: ManifestPath, after_node_condition: bool) -> None:
        ctx = self.ctx

        # In `imports`, non-relative targets are external packages or builtins
        if self.is_imports and not value.startswith("."):
            return

        # Folder mappings ("./sub/": "./sub/") were removed from Node.js
        if value.endswith("/"):
            expect_path = tuple(part + "*" if part.endswith("/") else part for part in current_path)
            expect_path_exists = bool(get_path_value(ctx.manifest, expect_path))
            ctx.log.add(
                self._code("GLOB_NO_DEPRECATED_SUBPATH_MAPPING"),
                # With a `*` mapping alongside, this key only exists for backwards compatibility
                Severity.SUGGESTION if expect_path_exists else Severity.ERROR,
                current_path,
                expect_path=list(expect_path),
                expect_value=value + "*",
            )
            value += "*"

        if not value.startswith("./"):
            ctx.log.add(
                self._code("VALUE_INVALID"),
                Severity.ERROR,
                current_path,
                suggest_value="./" + value.lstrip("/"),
            )

        is_glob = "*" in value
        files = await self._get_target_files(value, current_path)

        if is_glob and not files:
            ctx.log.add(self._code("GLOB_NO_MATCHED_FILES"), Severity.WARNING, current_path)
            return

        if not self.is_imports and isinstance(self.browser, dict) and value in self.browser:
            browserish_condition = next((c for c in KNOWN_BROWSERISH_CONDITIONS if c in current_path), None)
            if browserish_condition is not None:
                ctx.log.add(
                    DiagnosticCode.EXPORTS_VALUE_CONFLICTS_WITH_BROWSER,
                    Severity.WARNING,
                    current_path,
                    browser_path=list(self.browser_path) + [value],
                    browserish_condition=browserish_condition,
                )

        pq = TaskQueue("exports-files")
        for file_path in files:
            globbed_file_path = "./" + ctx.relative(file_path) if is_glob else None
            if ctx.has_invalid_jsx_extension(file_path, current_path, globbed_file_path):
                continue
            if not is_file_path_lintable(file_path):
                # Existence only. Skip non-paths like `std:lib`, and raw TS that
                # some setups only export for local development.
                if is_absolute_path(file_path) and not is_file_path_raw_ts(file_path):
                    pq.push(lambda file_path=file_path: ctx.read_file(file_path, current_path))
                continue
            pq.push(
                lambda file_path=file_path, globbed_file_path=globbed_file_path: self._check_file(
                    file_path, value, current_path, after_node_condition, globbed_file_path
                )
            )
        await pq.wait()

    async def _get_target_files(self, value: str, current_path: ManifestPath) -> list[str]:
        ctx = self.ctx
        target_path = ctx.vfs.path_join(ctx.pkg_dir, value) if is_relative_path(value) else value
        if "*" not in value:
            return [target_path]
        entry_key = current_path[len(self.root_path)] if len(current_path) > len(self.root_path) else None
        return await expand_glob(target_path, ctx.vfs, ctx.published_files, entry_key, self.root)

    async def _check_file(
        self,
        file_path: str,
        value: str,
        current_path: ManifestPath,
        after_node_condition: bool,
        globbed_file_path: str | None,
    ) -> None:
        ctx = self.ctx
        content = await ctx.read_file(file_path, current_path)
        if content is None or not is_file_content_lintable(content):
            return

        # The `module` condition is only read by bundlers and must be ESM
        if "module" in current_path:
            if classify_code(content) == CodeFormat.CJS:
                ctx.log.add(self._code("MODULE_SHOULD_BE_ESM"), Severity.ERROR, current_path)
            return

        # Node.js never reads `browser` or anything after `node`; bundlers accept any format
        if after_node_condition or "browser" in current_path:
            return

        is_glob = globbed_file_path is not None
        await check_file_format(
            ctx,
            file_path,
            content,
            current_path,
            allow_bundler_esm=True,
            allow_sibling_with_expected_extension=is_glob,
            actual_file_path=globbed_file_path if is_glob else value,
        )


def _is_types_like(key: str, value: ConditionTree | None) -> bool:
    if key.startswith("types"):
        return True
    if isinstance(value, Leaf):
        return is_file_path_raw_ts(value.value)
    if isinstance(value, (ConditionMap, FallbackArray)):
        return has_value_nested(value, is_file_path_raw_ts)
    return False
