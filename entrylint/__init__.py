"""entrylint - lint package.json entry points against runtimes, bundlers and type-checkers."""

from .conditions import ConditionMap
from .conditions import Exclusion
from .conditions import FallbackArray
from .conditions import InvalidValue
from .conditions import Leaf
from .conditions import parse_condition_tree
from .conditions import resolve_exports
from .core import lint
from .core import lint_package
from .diagnostics import Diagnostic
from .diagnostics import DiagnosticCode
from .diagnostics import DiagnosticLog
from .diagnostics import Severity
from .errors import EntrylintError
from .errors import ManifestNotFoundError
from .errors import ManifestParseError
from .formats import CodeFormat
from .formats import classify_code
from .formats import expected_format
from .models import LintOptions
from .models import LintResult
from .path_matcher import expand_glob
from .vfs import LocalVfs
from .vfs import MemoryVfs
from .vfs import Vfs

__all__ = [
    "CodeFormat",
    "ConditionMap",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticLog",
    "EntrylintError",
    "Exclusion",
    "FallbackArray",
    "InvalidValue",
    "Leaf",
    "LintOptions",
    "LintResult",
    "LocalVfs",
    "ManifestNotFoundError",
    "ManifestParseError",
    "MemoryVfs",
    "Severity",
    "Vfs",
    "classify_code",
    "expand_glob",
    "expected_format",
    "lint",
    "lint_package",
    "parse_condition_tree",
    "resolve_exports",
]
