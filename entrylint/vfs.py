"""Virtual file system port.

Every check reads the package through a `Vfs`, so the linter never touches
the disk directly. Two implementations ship with the package:

- LocalVfs: the real file system, with blocking calls moved off the event loop
- MemoryVfs: an in-memory tree keyed by absolute POSIX paths

Contract:
- read_file raises an OSError subclass (FileNotFoundError, IsADirectoryError)
  when the path cannot be read as a file
- path_join mirrors a JavaScript-style join: later segments are appended even
  when they start with a separator, and a trailing separator is preserved
"""

from __future__ import annotations

import asyncio
import os
import posixpath
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Protocol


class Vfs(Protocol):
    """Capabilities the linter needs from a file tree."""

    async def read_file(self, path: str) -> str:
        """Read a text file, raising OSError when it cannot be read."""
        ...

    async def read_dir(self, path: str) -> list[str]:
        """List entry names directly inside a directory."""
        ...

    async def is_path_dir(self, path: str) -> bool:
        """Whether the path is an existing directory."""
        ...

    async def is_path_exist(self, path: str) -> bool:
        """Whether the path exists as a file or directory."""
        ...

    def path_join(self, *paths: str) -> str:
        """Join and normalize path segments."""
        ...

    def path_relative(self, from_path: str, to_path: str) -> str:
        """Relative path from one location to another."""
        ...

    def get_dir_name(self, path: str) -> str:
        """Parent directory of a path."""
        ...

    def get_ext_name(self, path: str) -> str:
        """Extension of the last path segment, including the dot."""
        ...


def _join(pathmod: ModuleType, *paths: str) -> str:
    if not paths:
        return "."
    separators = "/\\" if pathmod is not posixpath else "/"
    head, *rest = paths
    joined = pathmod.normpath(pathmod.join(head, *(p.lstrip(separators) for p in rest)))
    if paths[-1].endswith(tuple(separators)) and not joined.endswith(pathmod.sep):
        joined += pathmod.sep
    return joined


class LocalVfs:
    """Vfs backed by the local file system."""

    async def read_file(self, path: str) -> str:
        # Undecodable bytes are replaced, as Node does for utf8 reads
        return await asyncio.to_thread(Path(path).read_text, encoding="utf-8", errors="replace")

    async def read_dir(self, path: str) -> list[str]:
        return await asyncio.to_thread(os.listdir, path)

    async def is_path_dir(self, path: str) -> bool:
        return await asyncio.to_thread(os.path.isdir, path)

    async def is_path_exist(self, path: str) -> bool:
        return await asyncio.to_thread(os.path.exists, path)

    def path_join(self, *paths: str) -> str:
        return _join(os.path, *paths)

    def path_relative(self, from_path: str, to_path: str) -> str:
        return os.path.relpath(to_path, from_path)

    def get_dir_name(self, path: str) -> str:
        return os.path.dirname(path)

    def get_ext_name(self, path: str) -> str:
        return os.path.splitext(path)[1]


class MemoryVfs:
    """Vfs over an in-memory mapping of absolute POSIX file paths to contents.

    Directories are implied by the file paths. Useful for linting manifests
    that were never written to disk, and for tests.

    Example:
        vfs = MemoryVfs({
            "/pkg/package.json": '{"name": "foo", "main": "./index.js"}',
            "/pkg/index.js": "module.exports = {}",
        })
    """

    def __init__(self, files: Mapping[str, str] | None = None) -> None:
        self._files: dict[str, str] = {}
        self._dirs: dict[str, list[str]] = {"/": []}
        for path, content in (files or {}).items():
            self.write_file(path, content)

    def write_file(self, path: str, content: str) -> None:
        """Add or replace a file, creating its parent directories."""
        path = posixpath.normpath(path)
        if not path.startswith("/"):
            raise ValueError(f"MemoryVfs paths must be absolute: {path}")
        self._files[path] = content
        child = path
        parent = posixpath.dirname(child)
        while True:
            entries = self._dirs.setdefault(parent, [])
            name = posixpath.basename(child)
            if name not in entries:
                entries.append(name)
            if parent == "/":
                break
            child, parent = parent, posixpath.dirname(parent)

    async def read_file(self, path: str) -> str:
        key = posixpath.normpath(path)
        if key in self._files and not path.endswith("/"):
            return self._files[key]
        if key in self._dirs:
            raise IsADirectoryError(path)
        raise FileNotFoundError(path)

    async def read_dir(self, path: str) -> list[str]:
        key = posixpath.normpath(path)
        if key not in self._dirs:
            raise FileNotFoundError(path)
        return list(self._dirs[key])

    async def is_path_dir(self, path: str) -> bool:
        return posixpath.normpath(path) in self._dirs

    async def is_path_exist(self, path: str) -> bool:
        key = posixpath.normpath(path)
        if path.endswith("/"):
            return key in self._dirs
        return key in self._files or key in self._dirs

    def path_join(self, *paths: str) -> str:
        return _join(posixpath, *paths)

    def path_relative(self, from_path: str, to_path: str) -> str:
        return posixpath.relpath(to_path, from_path)

    def get_dir_name(self, path: str) -> str:
        return posixpath.dirname(path)

    def get_ext_name(self, path: str) -> str:
        return posixpath.splitext(path)[1]
