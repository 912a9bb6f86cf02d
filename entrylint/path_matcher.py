"""Subpath pattern expansion.

Expands a path containing a `*` wildcard into the concrete files it matches.
A pattern's wildcard always stands for one substitution, so when the pattern
repeats it (e.g. "./dist/*/*.js") every capture must be identical.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Collection

from .conditions import ConditionMap
from .conditions import ConditionTree
from .conditions import Exclusion
from .utils.paths import slash
from .vfs import Vfs

logger = logging.getLogger(__name__)

_TOP_DIR_RE = re.compile(r"(.+)[/\\]")


def pattern_to_regex(pattern: str) -> re.Pattern[str]:
    """Regex matching a whole path, with every `*` captured as `(.+)`."""
    return re.compile("^" + "(.+)".join(re.escape(part) for part in pattern.split("*")) + "$")


def _excluded_key_patterns(exports: ConditionTree | None) -> list[re.Pattern[str]]:
    if not isinstance(exports, ConditionMap):
        return []
    return [pattern_to_regex(key) for key, value in exports if isinstance(value, Exclusion)]


async def expand_glob(
    pattern: str,
    vfs: Vfs,
    published_files: Collection[str] | None = None,
    exports_key: str | None = None,
    exports: ConditionTree | None = None,
    skip_dir_names: Collection[str] = (),
) -> list[str]:
    """Expand an absolute wildcard path into matching file paths.

    Args:
        pattern: Absolute path containing `*`
        vfs: File tree to search
        published_files: If given, only files (and directories leading to
            files) that prefix-match an entry are visited
        exports_key: Key of the exports/imports entry the pattern came from,
            e.g. "./features/*"
        exports: The whole exports/imports map; sibling keys mapped to `null`
            exclude files whose substituted key matches them
        skip_dir_names: Directory names never descended into

    Returns:
        Matching file paths, in directory listing order
    """
    file_paths: list[str] = []
    pattern_re = pattern_to_regex(slash(pattern))

    top_dir_match = _TOP_DIR_RE.match(pattern.split("*")[0])
    if top_dir_match is None:
        logger.debug(f"Pattern has no literal directory: {pattern}")
        return file_paths
    top_dir = top_dir_match.group(1)
    if not await vfs.is_path_dir(top_dir):
        return file_paths

    excluded_keys = _excluded_key_patterns(exports) if exports_key else []

    async def scan_dir(dir_path: str) -> None:
        for item in await vfs.read_dir(dir_path):
            item_path = vfs.path_join(dir_path, item)
            if published_files is not None and not any(f.startswith(item_path) for f in published_files):
                continue
            if await vfs.is_path_dir(item_path):
                if item not in skip_dir_names:
                    await scan_dir(item_path)
                continue
            matched = pattern_re.match(slash(item_path))
            if matched is None:
                continue
            captures = matched.groups()
            if any(capture != captures[0] for capture in captures[1:]):
                continue
            if captures and excluded_keys and exports_key:
                substituted_key = exports_key.replace("*", captures[0], 1)
                if any(key_re.match(substituted_key) for key_re in excluded_keys):
                    continue
            file_paths.append(item_path)

    await scan_dir(top_dir)
    return file_paths
