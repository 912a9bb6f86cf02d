"""Settings management for entrylint.

Scope-aware YAML settings supplying defaults for CLI options. Command-line
flags always win over anything read here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Literal

import yaml

from .diagnostics import Severity

logger = logging.getLogger(__name__)

Scope = Literal["project", "global"]

SETTING_KEYS = ("level", "strict")


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path

    @classmethod
    def default(cls, pkg_dir: str | Path | None = None) -> SettingsPaths:
        """Create default paths, with project settings at the package root."""
        project_dir = Path(pkg_dir) if pkg_dir is not None else Path.cwd()
        return cls(
            global_settings=Path.home() / ".entrylint" / "settings.yaml",
            project_settings=project_dir / ".entrylint.yaml",
        )


class LintSettings:
    """Simple settings manager with scope-aware merging.

    Scope priority (most specific wins):
    1. project (<pkg>/.entrylint.yaml) - committed with the package
    2. global (~/.entrylint/settings.yaml) - user defaults

    Usage:
        settings = LintSettings(SettingsPaths.default(pkg_dir))
        level = settings.get_level()  # Severity or None
        settings.set_setting("strict", True, scope="project")
    """

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge settings from all scopes."""
        result: dict[str, Any] = {}
        for path in [self.paths.global_settings, self.paths.project_settings]:
            if path.exists():
                try:
                    with open(path) as f:
                        content = yaml.safe_load(f) or {}
                except (OSError, yaml.YAMLError) as e:
                    logger.warning(f"Skipping malformed settings file {path}: {e}")
                    continue
                if not isinstance(content, dict):
                    logger.warning(f"Skipping settings file {path}: top level must be a mapping")
                    continue
                result = self._deep_merge(result, content)
        return result

    # ----- Lint settings -----

    def get_level(self) -> Severity | None:
        """Get the configured minimum severity, ignoring unknown values."""
        level = self.get_merged_settings().get("level")
        if level is None:
            return None
        try:
            return Severity(str(level))
        except ValueError:
            logger.warning(f"Ignoring unknown level setting: {level!r}")
            return None

    def get_strict(self) -> bool | None:
        """Get the configured strict mode."""
        strict = self.get_merged_settings().get("strict")
        return strict if isinstance(strict, bool) else None

    def set_setting(self, key: str, value: Any, scope: Scope = "project") -> None:
        """Set a single setting at specified scope."""
        if key not in SETTING_KEYS:
            raise ValueError(f"Unknown setting: {key}")
        settings = self._read_scope(scope)
        settings[key] = value
        self._write_scope(scope, settings)

    def remove_setting(self, key: str, scope: Scope = "project") -> None:
        """Remove a setting from specified scope."""
        settings = self._read_scope(scope)
        if key in settings:
            del settings[key]
            self._write_scope(scope, settings)

    # ----- Scope utilities -----

    def get_scope_path(self, scope: Scope) -> Path:
        """Get settings file path for scope."""
        return {
            "project": self.paths.project_settings,
            "global": self.paths.global_settings,
        }[scope]

    def _read_scope(self, scope: Scope) -> dict[str, Any]:
        """Read settings from a specific scope."""
        path = self.get_scope_path(scope)
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return {}
        return content if isinstance(content, dict) else {}

    def _write_scope(self, scope: Scope, settings: dict[str, Any]) -> None:
        """Write settings to a specific scope."""
        path = self.get_scope_path(scope)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(settings, f, default_flow_style=False)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dicts, overlay wins."""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def get_settings(pkg_dir: str | Path | None = None) -> LintSettings:
    """Get a settings instance with default paths."""
    return LintSettings(SettingsPaths.default(pkg_dir))
