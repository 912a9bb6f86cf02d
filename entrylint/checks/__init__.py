"""Individual lint checks. Each one reads the shared context and reports to its log."""

from .bin import check_bin
from .context import LintContext
from .exports import ExportsCrawler
from .fields import check_browser
from .fields import check_exports_root_entrypoint
from .fields import check_implicit_index
from .fields import check_known_fields
from .fields import check_local_dependencies
from .fields import check_main
from .fields import check_module
from .fields import check_repository
from .fields import check_use_files
from .fields import check_use_license
from .fields import check_use_type
from .files import check_all_files
from .files import check_file_format
from .types_exported import TypesExportedChecker

__all__ = [
    "LintContext",
    "ExportsCrawler",
    "TypesExportedChecker",
    "check_all_files",
    "check_bin",
    "check_browser",
    "check_exports_root_entrypoint",
    "check_file_format",
    "check_implicit_index",
    "check_known_fields",
    "check_local_dependencies",
    "check_main",
    "check_module",
    "check_repository",
    "check_use_files",
    "check_use_license",
    "check_use_type",
]
