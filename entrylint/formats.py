"""Source format classification.

Two separate questions are answered here:

- What format does a piece of code *look like*? (`classify_code`)
  A regex heuristic over comment-stripped source. It can be fooled, e.g. by
  module keywords inside string literals, and reports `mixed` instead of
  guessing when both syntaxes appear.
- What format does a file path *expect*? (`expected_format`)
  Decided by an explicit extension, else by the `type` field of the nearest
  ancestor package.json.
"""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from typing import Any

from .constants import LINTABLE_FILE_EXTENSIONS
from .constants import MANIFEST_FILE_NAME
from .vfs import Vfs

logger = logging.getLogger(__name__)


class CodeFormat(str, Enum):
    """Module format of a unit of source text."""

    ESM = "ESM"
    CJS = "CJS"
    MIXED = "mixed"
    UNKNOWN = "unknown"


# Reference: https://github.com/unjs/mlly/blob/c5ae321725cbabe230c16c315d474c36eee6a30c/src/syntax.ts#L7
ESM_CONTENT_RE = re.compile(
    r"([\s;]|^)"
    r"(import[\w,{}\s*]*from"
    r"|import\s*['\"*{]"
    r"|export\b\s*(?:[*{]|default|type|function|const|var|let|async function)"
    r"|import\.meta\b)",
    re.MULTILINE,
)

# Reference: https://github.com/unjs/mlly/blob/c5ae321725cbabe230c16c315d474c36eee6a30c/src/syntax.ts#L15
CJS_CONTENT_RE = re.compile(
    r"([\s;]|^)"
    r"(module.exports\b"
    r"|exports\.\w"
    r"|require\s*\("
    r"|global\.\w"
    r"|Object\.(defineProperty|defineProperties|assign)\s*\(\s*exports\b)",
    re.MULTILINE,
)

MULTILINE_COMMENTS_RE = re.compile(r"/\*[\s\S]*?\*/")
SINGLELINE_COMMENTS_RE = re.compile(r"//.*")

# Matches `// @flow`, `/* @flow */`, `/** @flow */` and a `* @flow` line in a block comment
FLOW_COMMENT_RE = re.compile(r"^\s*(?://|/\*\*?|\*)\s*@flow", re.MULTILINE)

SHEBANG_RE = re.compile(r"#!\s*/usr/bin/env")

DTS_RE = re.compile(r"\.d\.[mc]?ts$")
ADJACENT_DTS_RE = re.compile(r"\.([mc]?)jsx?$")

# React Native treats `.native.js` as a platform extension; the real format is behind it
NATIVE_SUFFIX = ".native.js"


def strip_comments(code: str) -> str:
    """Remove block and line comments."""
    return SINGLELINE_COMMENTS_RE.sub("", MULTILINE_COMMENTS_RE.sub("", code))


def is_code_esm(code: str) -> bool:
    return ESM_CONTENT_RE.search(code) is not None


def is_code_cjs(code: str) -> bool:
    return CJS_CONTENT_RE.search(code) is not None


def classify_code(code: str) -> CodeFormat:
    """Guess the module format of source text.

    Args:
        code: JavaScript source

    Returns:
        ESM or CJS when exactly one syntax is detected, MIXED when both are
        (a real file cannot be both, so the regex was fooled), UNKNOWN when
        neither is (side-effect only files, compatible with any format).
    """
    code = strip_comments(code)
    is_esm = is_code_esm(code)
    is_cjs = is_code_cjs(code)
    if is_esm and is_cjs:
        return CodeFormat.MIXED
    if is_esm:
        return CodeFormat.ESM
    if is_cjs:
        return CodeFormat.CJS
    return CodeFormat.UNKNOWN


def is_format_mismatch(actual: CodeFormat, expected: CodeFormat) -> bool:
    """Whether an actual code format contradicts the expected one.

    `mixed` and `unknown` never count as a mismatch.
    """
    if actual in (CodeFormat.MIXED, CodeFormat.UNKNOWN):
        return False
    return actual != expected


async def get_nearest_manifest(file_path: str, vfs: Vfs) -> dict[str, Any] | None:
    """Find and parse the closest package.json above a file.

    Malformed manifests are skipped and the walk continues upwards.
    """
    current_dir = vfs.get_dir_name(file_path)
    while True:
        manifest_path = vfs.path_join(current_dir, MANIFEST_FILE_NAME)
        if await vfs.is_path_exist(manifest_path):
            try:
                manifest = json.loads(await vfs.read_file(manifest_path))
            except (OSError, ValueError):
                logger.debug(f"Ignoring unreadable manifest: {manifest_path}")
            else:
                if isinstance(manifest, dict):
                    return manifest
                logger.debug(f"Ignoring non-object manifest: {manifest_path}")
        next_dir = vfs.get_dir_name(current_dir)
        if next_dir == current_dir:
            return None
        current_dir = next_dir


async def _format_from_nearest_manifest(file_path: str, vfs: Vfs) -> CodeFormat:
    nearest = await get_nearest_manifest(file_path, vfs)
    if nearest is not None and nearest.get("type") == "module":
        return CodeFormat.ESM
    return CodeFormat.CJS


async def expected_format(file_path: str, vfs: Vfs) -> CodeFormat:
    """Format a code file must have to be loaded correctly: ESM or CJS."""
    if file_path.endswith(NATIVE_SUFFIX):
        file_path = file_path[: -len(NATIVE_SUFFIX)]
    if file_path.endswith(".mjs"):
        return CodeFormat.ESM
    if file_path.endswith(".cjs"):
        return CodeFormat.CJS
    return await _format_from_nearest_manifest(file_path, vfs)


async def expected_dts_format(file_path: str, vfs: Vfs) -> CodeFormat:
    """Format a type-checker assumes for a declaration file: ESM or CJS."""
    if file_path.endswith(".d.mts"):
        return CodeFormat.ESM
    if file_path.endswith(".d.cts"):
        return CodeFormat.CJS
    return await _format_from_nearest_manifest(file_path, vfs)


def get_code_format_extension(code_format: CodeFormat) -> str:
    if code_format == CodeFormat.ESM:
        return ".mjs"
    if code_format == CodeFormat.CJS:
        return ".cjs"
    return ".js"


def get_dts_code_format_extension(code_format: CodeFormat) -> str:
    if code_format == CodeFormat.ESM:
        return ".mts"
    if code_format == CodeFormat.CJS:
        return ".cts"
    return ".ts"


def is_explicit_extension(path: str) -> bool:
    return path.endswith((".mjs", ".cjs"))


def is_file_path_lintable(file_path: str) -> bool:
    """Only JavaScript files are format-checked."""
    return file_path.endswith(LINTABLE_FILE_EXTENSIONS)


def is_file_path_raw_ts(file_path: str) -> bool:
    """TypeScript sources (not declarations), which some setups export for local use."""
    return (file_path.endswith(".ts") and not file_path.endswith(".d.ts")) or file_path.endswith(".tsx")


def is_file_content_lintable(content: str) -> bool:
    """Flow files, marked by an initial `@flow` comment, are not linted."""
    return FLOW_COMMENT_RE.search(content) is None


def is_dts_file(file_path: str) -> bool:
    return DTS_RE.search(file_path) is not None


def get_adjacent_dts_path(file_path: str) -> str:
    """Declaration file a type-checker looks for next to a code file.

    foo.js -> foo.d.ts, foo.mjs -> foo.d.mts, foo.cjs -> foo.d.cts, foo.jsx -> foo.d.ts
    """
    return ADJACENT_DTS_RE.sub(r".d.\1ts", file_path, count=1)


def starts_with_shebang(code: str) -> bool:
    return SHEBANG_RE.search(code) is not None
