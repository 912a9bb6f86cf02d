"""Formatting utilities for CLI display."""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any

from ..diagnostics import Diagnostic
from ..diagnostics import DiagnosticCode

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")

MESSAGE_TEMPLATES: dict[DiagnosticCode, str] = {
    DiagnosticCode.FILE_DOES_NOT_EXIST: "File does not exist",
    DiagnosticCode.FILE_NOT_PUBLISHED: "File exists but is not published",
    DiagnosticCode.FILE_INVALID_FORMAT: (
        "Written in {actual_format} but interpreted as {expect_format}; "
        "use the {expect_extension} extension or fix the `type` field"
    ),
    DiagnosticCode.FILE_INVALID_EXPLICIT_FORMAT: (
        "Ends with {actual_extension} but is written in {actual_format}; use {expect_extension} instead"
    ),
    DiagnosticCode.FILE_INVALID_JSX_EXTENSION: "{actual_extension} is not a valid extension; use .jsx instead",
    DiagnosticCode.FIELD_INVALID_VALUE_TYPE: "Value is {actual_type} but should be one of {expect_types}",
    DiagnosticCode.IMPLICIT_INDEX_JS_INVALID_FORMAT: "index.js is written in {actual_format} but interpreted as {expect_format}",
    DiagnosticCode.HAS_ESM_MAIN_BUT_NO_EXPORTS: "ESM `main` without `exports`; consider adding `exports`",
    DiagnosticCode.HAS_MODULE_BUT_NO_EXPORTS: "`module` is bundler-only; consider adding `exports`",
    DiagnosticCode.MODULE_SHOULD_BE_ESM: "Should point to an ESM file but it is written in CJS",
    DiagnosticCode.EXPORTS_MISSING_ROOT_ENTRYPOINT: 'Missing the root "." entry point that {main_fields} provide',
    DiagnosticCode.EXPORTS_TYPES_SHOULD_BE_FIRST: "`types` should be the first condition",
    DiagnosticCode.EXPORTS_MODULE_SHOULD_PRECEDE_REQUIRE: "`module` should come before `require`",
    DiagnosticCode.EXPORTS_DEFAULT_SHOULD_BE_LAST: "`default` should be the last condition",
    DiagnosticCode.EXPORTS_MODULE_SHOULD_BE_ESM: "The `module` condition should point to ESM but the file is CJS",
    DiagnosticCode.EXPORTS_VALUE_INVALID: 'Value must start with "./"; use {suggest_value}',
    DiagnosticCode.EXPORTS_GLOB_NO_MATCHED_FILES: "Pattern does not match any files",
    DiagnosticCode.EXPORTS_GLOB_NO_DEPRECATED_SUBPATH_MAPPING: (
        "Folder mappings are removed from Node.js; use {expect_value} at {expect_path}"
    ),
    DiagnosticCode.EXPORTS_FALLBACK_ARRAY_USE: "Fallback arrays are unreliable; use conditions instead",
    DiagnosticCode.EXPORTS_VALUE_CONFLICTS_WITH_BROWSER: (
        "Remapped by {browser_path} under the {browserish_condition} condition"
    ),
    DiagnosticCode.EXPORTS_TYPES_INVALID_FORMAT: (
        "Types for `{condition}` are interpreted as {actual_format} but should be {expect_format}; "
        "use the {expect_extension} extension at {expect_path}"
    ),
    DiagnosticCode.TYPES_NOT_EXPORTED: "No types exported; {types_file_path} is not reachable with this condition",
    DiagnosticCode.IMPORTS_KEY_INVALID: 'Keys must start with "#"; use {suggest_key}',
    DiagnosticCode.IMPORTS_MODULE_SHOULD_PRECEDE_REQUIRE: "`module` should come before `require`",
    DiagnosticCode.IMPORTS_DEFAULT_SHOULD_BE_LAST: "`default` should be the last condition",
    DiagnosticCode.IMPORTS_MODULE_SHOULD_BE_ESM: "The `module` condition should point to ESM but the file is CJS",
    DiagnosticCode.IMPORTS_VALUE_INVALID: 'Value must start with "./"; use {suggest_value}',
    DiagnosticCode.IMPORTS_GLOB_NO_MATCHED_FILES: "Pattern does not match any files",
    DiagnosticCode.IMPORTS_GLOB_NO_DEPRECATED_SUBPATH_MAPPING: (
        "Folder mappings are removed from Node.js; use {expect_value} at {expect_path}"
    ),
    DiagnosticCode.IMPORTS_FALLBACK_ARRAY_USE: "Fallback arrays are unreliable; use conditions instead",
    DiagnosticCode.USE_EXPORTS_BROWSER: "Prefer the `browser` condition in `exports`",
    DiagnosticCode.USE_EXPORTS_OR_IMPORTS_BROWSER: "Prefer `browser` conditions in `exports` or `imports`",
    DiagnosticCode.BIN_FILE_NOT_EXECUTABLE: "Missing a `#!/usr/bin/env` shebang",
    DiagnosticCode.USE_FILES: "Tests or config files would be published; add a `files` field",
    DiagnosticCode.USE_LICENSE: "Has {license_file_path} but no `license` field",
    DiagnosticCode.USE_TYPE: 'No `type` field; set it to "module" or "commonjs"',
    DiagnosticCode.LOCAL_DEPENDENCY: "Local dependencies cannot be installed from the registry",
    DiagnosticCode.DEPRECATED_FIELD_JSNEXT: "jsnext fields are deprecated; use `module` instead",
    DiagnosticCode.INVALID_REPOSITORY_VALUE: "Invalid repository value ({type})",
}


def format_message_path(path: tuple[str, ...] | list[str]) -> str:
    """Render a manifest path the way it would be written in JavaScript.

    Args:
        path: Manifest keys, e.g. ("exports", ".", "import")

    Returns:
        Accessor string like 'pkg.exports["."].import'
    """
    parts = ["pkg"]
    for key in path:
        if key.isdigit():
            parts.append(f"[{key}]")
        elif _IDENTIFIER_RE.match(key):
            parts.append(f".{key}")
        else:
            parts.append(f"[{json.dumps(key)}]")
    return "".join(parts)


def _render_arg(key: str, value: Any) -> str:
    # Path arguments (expect_path, browser_path) hold manifest keys
    if key.endswith("_path") and isinstance(value, (list, tuple)):
        return format_message_path(tuple(value))
    if isinstance(value, (list, tuple)):
        return ", ".join(_render_arg(key, v) for v in value)
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class _Args(dict):
    def __missing__(self, key: str) -> str:
        return "?"


def format_diagnostic_message(diagnostic: Diagnostic) -> str:
    """Human-readable message for a diagnostic.

    Args:
        diagnostic: Diagnostic to describe

    Returns:
        Message with its arguments filled in
    """
    template = MESSAGE_TEMPLATES.get(diagnostic.code, diagnostic.code.value)
    args = _Args({key: _render_arg(key, value) for key, value in diagnostic.args.items() if value is not None})
    return template.format_map(args)


def format_diagnostic_args(args: dict[str, Any], max_length: int = 50) -> str:
    """Format diagnostic arguments for compact display.

    Args:
        args: Diagnostic arguments dictionary
        max_length: Maximum length for individual argument values

    Returns:
        Formatted argument string like "(key=value, key2=value2)"
    """
    if not args:
        return "()"

    formatted_pairs = []
    for key, value in args.items():
        if value is None:
            continue
        cleaned_value = " ".join(_render_arg(key, value).split())

        if len(cleaned_value) > max_length:
            truncated_value = cleaned_value[:max_length] + "..."
        else:
            truncated_value = cleaned_value

        if isinstance(value, str) and not isinstance(value, Enum):
            formatted_pairs.append(f'{key}="{truncated_value}"')
        else:
            formatted_pairs.append(f"{key}={truncated_value}")

    return f"({', '.join(formatted_pairs)})"
