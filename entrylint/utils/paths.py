"""String helpers for manifest path values."""

import re

_WINDOWS_DRIVE_RE = re.compile(r"^[a-zA-Z]:")


def is_relative_path(file_path: str) -> bool:
    """Whether the value looks like a relative path.

    Examples: "./foo", "../foo" and "foo/bar" are relative; "/foo" and
    "std:lib" are not.
    """
    if file_path.startswith("."):
        return True
    return not file_path.startswith("/") and ":" not in file_path


def is_absolute_path(file_path: str) -> bool:
    """Whether the value looks like an absolute POSIX or Windows path."""
    return file_path.startswith("/") or bool(_WINDOWS_DRIVE_RE.match(file_path))


def replace_last(value: str, search: str, replace: str) -> str:
    """Replace the last occurrence of `search` in `value`."""
    index = value.rfind(search)
    if index == -1:
        return value
    return value[:index] + replace + value[index + len(search) :]


def slash(value: str) -> str:
    """Normalize Windows separators to forward slashes."""
    return value.replace("\\", "/")
