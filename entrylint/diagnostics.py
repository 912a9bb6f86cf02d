"""Diagnostics produced by a lint pass.

A `Diagnostic` is immutable once created. Checks append them to a shared
`DiagnosticLog`; emission order across checks is not guaranteed, so consumers
sort (see `DiagnosticLog.sorted`) before comparing. The only rewrite after
creation is the strict-mode escalation, applied once after all checks finish.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Severity of a diagnostic, from most to least severe."""

    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"


class DiagnosticCode(str, Enum):
    """Stable identifiers of every finding the linter can report."""

    # files
    FILE_DOES_NOT_EXIST = "FILE_DOES_NOT_EXIST"
    FILE_NOT_PUBLISHED = "FILE_NOT_PUBLISHED"
    FILE_INVALID_FORMAT = "FILE_INVALID_FORMAT"
    FILE_INVALID_EXPLICIT_FORMAT = "FILE_INVALID_EXPLICIT_FORMAT"
    FILE_INVALID_JSX_EXTENSION = "FILE_INVALID_JSX_EXTENSION"
    FIELD_INVALID_VALUE_TYPE = "FIELD_INVALID_VALUE_TYPE"
    IMPLICIT_INDEX_JS_INVALID_FORMAT = "IMPLICIT_INDEX_JS_INVALID_FORMAT"
    # main / module
    HAS_ESM_MAIN_BUT_NO_EXPORTS = "HAS_ESM_MAIN_BUT_NO_EXPORTS"
    HAS_MODULE_BUT_NO_EXPORTS = "HAS_MODULE_BUT_NO_EXPORTS"
    MODULE_SHOULD_BE_ESM = "MODULE_SHOULD_BE_ESM"
    # exports
    EXPORTS_MISSING_ROOT_ENTRYPOINT = "EXPORTS_MISSING_ROOT_ENTRYPOINT"
    EXPORTS_TYPES_SHOULD_BE_FIRST = "EXPORTS_TYPES_SHOULD_BE_FIRST"
    EXPORTS_MODULE_SHOULD_PRECEDE_REQUIRE = "EXPORTS_MODULE_SHOULD_PRECEDE_REQUIRE"
    EXPORTS_DEFAULT_SHOULD_BE_LAST = "EXPORTS_DEFAULT_SHOULD_BE_LAST"
    EXPORTS_MODULE_SHOULD_BE_ESM = "EXPORTS_MODULE_SHOULD_BE_ESM"
    EXPORTS_VALUE_INVALID = "EXPORTS_VALUE_INVALID"
    EXPORTS_GLOB_NO_MATCHED_FILES = "EXPORTS_GLOB_NO_MATCHED_FILES"
    EXPORTS_GLOB_NO_DEPRECATED_SUBPATH_MAPPING = "EXPORTS_GLOB_NO_DEPRECATED_SUBPATH_MAPPING"
    EXPORTS_FALLBACK_ARRAY_USE = "EXPORTS_FALLBACK_ARRAY_USE"
    EXPORTS_VALUE_CONFLICTS_WITH_BROWSER = "EXPORTS_VALUE_CONFLICTS_WITH_BROWSER"
    EXPORTS_TYPES_INVALID_FORMAT = "EXPORTS_TYPES_INVALID_FORMAT"
    TYPES_NOT_EXPORTED = "TYPES_NOT_EXPORTED"
    # imports
    IMPORTS_KEY_INVALID = "IMPORTS_KEY_INVALID"
    IMPORTS_MODULE_SHOULD_PRECEDE_REQUIRE = "IMPORTS_MODULE_SHOULD_PRECEDE_REQUIRE"
    IMPORTS_DEFAULT_SHOULD_BE_LAST = "IMPORTS_DEFAULT_SHOULD_BE_LAST"
    IMPORTS_MODULE_SHOULD_BE_ESM = "IMPORTS_MODULE_SHOULD_BE_ESM"
    IMPORTS_VALUE_INVALID = "IMPORTS_VALUE_INVALID"
    IMPORTS_GLOB_NO_MATCHED_FILES = "IMPORTS_GLOB_NO_MATCHED_FILES"
    IMPORTS_GLOB_NO_DEPRECATED_SUBPATH_MAPPING = "IMPORTS_GLOB_NO_DEPRECATED_SUBPATH_MAPPING"
    IMPORTS_FALLBACK_ARRAY_USE = "IMPORTS_FALLBACK_ARRAY_USE"
    # browser
    USE_EXPORTS_BROWSER = "USE_EXPORTS_BROWSER"
    USE_EXPORTS_OR_IMPORTS_BROWSER = "USE_EXPORTS_OR_IMPORTS_BROWSER"
    # bin
    BIN_FILE_NOT_EXECUTABLE = "BIN_FILE_NOT_EXECUTABLE"
    # other fields
    USE_FILES = "USE_FILES"
    USE_LICENSE = "USE_LICENSE"
    USE_TYPE = "USE_TYPE"
    LOCAL_DEPENDENCY = "LOCAL_DEPENDENCY"
    DEPRECATED_FIELD_JSNEXT = "DEPRECATED_FIELD_JSNEXT"
    INVALID_REPOSITORY_VALUE = "INVALID_REPOSITORY_VALUE"


def scoped_code(name: str, is_imports: bool) -> DiagnosticCode:
    """Pick the `EXPORTS_*` or `IMPORTS_*` variant of a code.

    Args:
        name: Code name without its prefix, e.g. "VALUE_INVALID"
        is_imports: Whether the finding is inside the `imports` field
    """
    prefix = "IMPORTS_" if is_imports else "EXPORTS_"
    return DiagnosticCode(prefix + name)


class Diagnostic(BaseModel):
    """A single finding, located by its path in the manifest."""

    model_config = ConfigDict(frozen=True)

    code: DiagnosticCode = Field(..., description="Stable finding identifier")
    severity: Severity = Field(..., description="error, warning or suggestion")
    path: tuple[str, ...] = Field(..., description="Keys locating the offending manifest value")
    args: dict[str, Any] = Field(default_factory=dict, description="Structured values for message rendering")

    def sort_key(self) -> tuple[str, tuple[str, ...], str]:
        return (self.code.value, self.path, self.severity.value)


_LEVEL_INCLUDES: dict[Severity, tuple[Severity, ...]] = {
    Severity.SUGGESTION: (Severity.ERROR, Severity.WARNING, Severity.SUGGESTION),
    Severity.WARNING: (Severity.ERROR, Severity.WARNING),
    Severity.ERROR: (Severity.ERROR,),
}


class DiagnosticLog:
    """Append-only collection of diagnostics shared by all checks of a pass.

    Appends are plain list appends; checks run as cooperative tasks on one
    event loop, so no locking is needed. No check ever reads another check's
    diagnostics.
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []
        self._escalated = False

    def add(
        self,
        code: DiagnosticCode,
        severity: Severity,
        path: Iterable[str],
        **args: Any,
    ) -> Diagnostic:
        """Create and record a diagnostic.

        Args:
            code: Finding identifier
            severity: Finding severity
            path: Manifest keys locating the finding
            **args: Structured message arguments

        Returns:
            The recorded diagnostic
        """
        diagnostic = Diagnostic(code=code, severity=severity, path=tuple(path), args=args)
        self._diagnostics.append(diagnostic)
        logger.debug(f"{severity.value}: {code.value} at {'.'.join(diagnostic.path)}")
        return diagnostic

    def escalate_warnings(self) -> None:
        """Promote every warning to an error (strict mode). Applied at most once."""
        if self._escalated:
            return
        self._escalated = True
        self._diagnostics = [
            d.model_copy(update={"severity": Severity.ERROR}) if d.severity == Severity.WARNING else d
            for d in self._diagnostics
        ]

    def filter_level(self, level: Severity) -> list[Diagnostic]:
        """Diagnostics at or above a minimum severity."""
        included = _LEVEL_INCLUDES[level]
        return [d for d in self._diagnostics if d.severity in included]

    def sorted(self) -> list[Diagnostic]:
        """Diagnostics in a stable order, independent of emission order."""
        return sort_diagnostics(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._diagnostics))

    def __len__(self) -> int:
        return len(self._diagnostics)


def sort_diagnostics(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    """Sort diagnostics by code, then path, then severity."""
    return sorted(diagnostics, key=lambda d: d.sort_key())
