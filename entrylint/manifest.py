"""Helpers for reading values out of a parsed package.json."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

ManifestPath = tuple[str, ...]


def get_published_field(manifest: dict[str, Any], field: str) -> tuple[Any, ManifestPath]:
    """Read a field, preferring its `publishConfig` override.

    Returns:
        Tuple of (value, path of the value in the manifest)
    """
    publish_config = manifest.get("publishConfig")
    if isinstance(publish_config, dict) and publish_config.get(field):
        return publish_config[field], ("publishConfig", field)
    return manifest.get(field), (field,)


def get_path_value(manifest: Any, path: Iterable[str]) -> Any:
    """Follow a manifest path. Returns None when any segment is missing."""
    value = manifest
    for part in path:
        if isinstance(value, dict):
            value = value.get(part)
        elif isinstance(value, list) and part.isdigit() and int(part) < len(value):
            value = value[int(part)]
        else:
            return None
    return value


def json_type_name(value: Any) -> str:
    """Name of a value's JSON type: string, number, boolean, object, array or null."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"
