"""State shared by every check of one lint pass."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..constants import INVALID_JSX_EXTENSIONS
from ..diagnostics import DiagnosticCode
from ..diagnostics import DiagnosticLog
from ..diagnostics import Severity
from ..manifest import ManifestPath
from ..manifest import json_type_name
from ..tasks import TaskQueue
from ..vfs import Vfs

logger = logging.getLogger(__name__)


@dataclass
class LintContext:
    """Everything a check needs: the package, its files, and where to report.

    Attributes:
        pkg_dir: Package root directory
        vfs: File tree the package lives in
        manifest: Parsed root package.json, never mutated
        log: Shared diagnostics sink
        queue: Pass-wide task set
        published_files: Absolute paths that will be published, if known
    """

    pkg_dir: str
    vfs: Vfs
    manifest: dict[str, Any]
    log: DiagnosticLog
    queue: TaskQueue
    published_files: list[str] | None = None

    def relative(self, file_path: str) -> str:
        """Path of a file relative to the package root."""
        return self.vfs.path_relative(self.pkg_dir, file_path)

    def is_published(self, file_path: str) -> bool:
        return self.published_files is None or file_path in self.published_files

    async def read_file(
        self,
        path: str,
        pkg_path: ManifestPath | None = None,
        try_extensions: Sequence[str] = (),
    ) -> str | None:
        """Read a file the manifest refers to.

        Args:
            path: Absolute file path
            pkg_path: Manifest path that refers to the file. When given, a
                missing or unpublished file is reported against it.
            try_extensions: Suffixes tried in order when `path` is missing,
                e.g. ".js" and "/index.js" for legacy CommonJS fields

        Returns:
            File content, or None if no candidate could be read
        """
        candidates = [path]
        for ext in try_extensions:
            if ext.startswith("/") and path.endswith("/"):
                ext = ext[1:]
            candidates.append(path + ext)

        for candidate in candidates:
            try:
                content = await self.vfs.read_file(candidate)
            except OSError:
                continue
            if pkg_path is not None and not self.is_published(candidate):
                self.file_not_published(pkg_path)
            return content

        logger.debug(f"File not found: {path}")
        if pkg_path is not None:
            self.log.add(DiagnosticCode.FILE_DOES_NOT_EXIST, Severity.ERROR, pkg_path)
        return None

    def file_not_published(self, pkg_path: ManifestPath) -> None:
        self.log.add(DiagnosticCode.FILE_NOT_PUBLISHED, Severity.ERROR, pkg_path)

    def ensure_type_of_field(self, value: Any, expect_types: Sequence[str], pkg_path: ManifestPath) -> bool:
        """Report FIELD_INVALID_VALUE_TYPE unless the value has one of the JSON types.

        Returns:
            True if the type is acceptable
        """
        actual_type = json_type_name(value)
        if actual_type in expect_types:
            return True
        self.log.add(
            DiagnosticCode.FIELD_INVALID_VALUE_TYPE,
            Severity.ERROR,
            pkg_path,
            actual_type=actual_type,
            expect_types=list(expect_types),
        )
        return False

    def has_invalid_jsx_extension(
        self,
        file_path: str,
        pkg_path: ManifestPath,
        globbed_file_path: str | None = None,
    ) -> bool:
        """Report FILE_INVALID_JSX_EXTENSION for `.mjsx`/`.cjsx` files.

        Args:
            file_path: File path or manifest value
            pkg_path: Manifest path that refers to the file
            globbed_file_path: Matched file when `pkg_path` holds a glob
        """
        matched = next((ext for ext in INVALID_JSX_EXTENSIONS if file_path.endswith(ext)), None)
        if matched is None:
            return False
        self.log.add(
            DiagnosticCode.FILE_INVALID_JSX_EXTENSION,
            Severity.ERROR,
            pkg_path,
            actual_extension=matched,
            globbed_file_path=globbed_file_path,
        )
        return True
