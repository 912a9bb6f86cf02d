"""Options and results of a lint pass."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import Field

from .diagnostics import Diagnostic
from .diagnostics import Severity
from .diagnostics import sort_diagnostics


class LintOptions(BaseModel):
    """Options for one lint pass.

    Attributes:
        level: Minimum severity to report
        strict: Report warnings as errors
        published_files: Absolute paths that will be published. When set,
            files outside this list are reported as not published and are
            skipped by glob expansion.
    """

    level: Severity = Field(default=Severity.SUGGESTION, description="Minimum severity to report")
    strict: bool = Field(default=False, description="Report warnings as errors")
    published_files: list[str] | None = Field(default=None, description="Absolute paths that will be published")


class LintResult(BaseModel):
    """Diagnostics of a pass together with the manifest they refer to."""

    diagnostics: list[Diagnostic] = Field(default_factory=list, description="Reported findings, unordered")
    manifest: dict[str, Any] = Field(default_factory=dict, description="Parsed root package.json")

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    def sorted(self) -> list[Diagnostic]:
        """Diagnostics in a stable order, independent of emission order."""
        return sort_diagnostics(self.diagnostics)

    def count(self, severity: Severity) -> int:
        return sum(1 for d in self.diagnostics if d.severity == severity)
