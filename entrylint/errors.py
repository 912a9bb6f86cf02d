"""Exceptions raised by entrylint.

Lint findings are never raised; they are reported as diagnostics. These
exceptions cover the conditions that make a lint pass impossible.
"""

from __future__ import annotations


class EntrylintError(Exception):
    """Base class for all entrylint errors."""


class ManifestNotFoundError(EntrylintError):
    """No readable package.json exists at the package root."""

    def __init__(self, pkg_dir: str):
        self.pkg_dir = pkg_dir
        super().__init__(
            f"Unable to find package.json at {pkg_dir}. If a published files list is given, "
            "make sure the package directory is set to the root directory of those files."
        )


class ManifestParseError(EntrylintError):
    """The root package.json exists but is not a JSON object."""

    def __init__(self, manifest_path: str, reason: str):
        self.manifest_path = manifest_path
        self.reason = reason
        super().__init__(f"Invalid package.json at {manifest_path}: {reason}")
