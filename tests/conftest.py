"""Pytest configuration for entrylint tests."""

import json
from typing import Any

import pytest

from entrylint.core import lint_package
from entrylint.models import LintOptions
from entrylint.vfs import MemoryVfs

PKG_DIR = "/pkg"


def build_vfs(files: dict[str, Any]) -> MemoryVfs:
    """Build an in-memory package under /pkg. Dict values are written as JSON."""
    return MemoryVfs(
        {
            f"{PKG_DIR}/{path}": json.dumps(content) if isinstance(content, dict | list) else content
            for path, content in files.items()
        }
    )


@pytest.fixture
def pkg_dir() -> str:
    return PKG_DIR


@pytest.fixture
def make_vfs():
    return build_vfs


@pytest.fixture
def lint_files():
    """Lint an in-memory package and return its diagnostics, sorted."""

    async def run(files: dict[str, Any], **options):
        result = await lint_package(PKG_DIR, build_vfs(files), LintOptions(**options))
        return result.sorted()

    return run
