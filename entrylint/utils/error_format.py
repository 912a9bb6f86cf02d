"""Rich markup escaping for values interpolated into console output."""

from __future__ import annotations

from rich.markup import escape as _escape_markup


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings.

    Manifest keys like `exports["./[id]"]` contain brackets that Rich would
    otherwise read as markup tags.

    Args:
        value: Any value to escape (will be converted to str)

    Returns:
        String safe for interpolation into Rich markup f-strings
    """
    return _escape_markup(str(value))
