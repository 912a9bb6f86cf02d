"""Condition trees for the `exports` and `imports` fields.

The JSON value of these fields is parsed once into a closed set of node
types, so that every recursive walk handles each shape explicitly:

- Leaf: a target path string
- FallbackArray: a list of alternatives (deprecated)
- ConditionMap: condition keys or subpaths, in declared order
- Exclusion: `null`, which hides matching glob subpaths
- InvalidValue: any other JSON scalar (numbers, booleans)

Declared key order of a ConditionMap is significant and always preserved.
"""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Iterator
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any
from typing import Union


@dataclass(frozen=True)
class Leaf:
    """Terminal path value."""

    value: str


@dataclass(frozen=True)
class FallbackArray:
    """Array of alternative targets."""

    items: tuple[ConditionTree, ...]


@dataclass(frozen=True)
class ConditionMap:
    """Ordered mapping from condition key (or subpath) to subtree."""

    entries: tuple[tuple[str, ConditionTree], ...]

    def keys(self) -> list[str]:
        return [key for key, _ in self.entries]

    def get(self, key: str) -> ConditionTree | None:
        for entry_key, value in self.entries:
            if entry_key == key:
                return value
        return None

    def __contains__(self, key: object) -> bool:
        return any(entry_key == key for entry_key, _ in self.entries)

    def __iter__(self) -> Iterator[tuple[str, ConditionTree]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class Exclusion:
    """Explicit `null` target."""


@dataclass(frozen=True)
class InvalidValue:
    """JSON value that is not a valid condition tree node."""

    value: Any


ConditionTree = Union[Leaf, FallbackArray, ConditionMap, Exclusion, InvalidValue]


@dataclass(frozen=True)
class ResolvedEntry:
    """Outcome of matching a condition chain: the target and where it was found."""

    value: str
    path: tuple[str, ...]


def parse_condition_tree(raw: Any) -> ConditionTree:
    """Parse a JSON value into a condition tree."""
    if isinstance(raw, str):
        return Leaf(raw)
    if isinstance(raw, list):
        return FallbackArray(tuple(parse_condition_tree(item) for item in raw))
    if isinstance(raw, dict):
        return ConditionMap(tuple((str(key), parse_condition_tree(value)) for key, value in raw.items()))
    if raw is None:
        return Exclusion()
    return InvalidValue(raw)


def _children(tree: ConditionTree) -> list[tuple[str, ConditionTree]]:
    if isinstance(tree, ConditionMap):
        return list(tree.entries)
    if isinstance(tree, FallbackArray):
        return [(str(index), item) for index, item in enumerate(tree.items)]
    return []


def has_key_nested(tree: ConditionTree, key: str) -> bool:
    """Whether any nested ConditionMap declares `key`."""
    for child_key, child in _children(tree):
        if isinstance(tree, ConditionMap) and child_key == key:
            return True
        if has_key_nested(child, key):
            return True
    return False


def has_value_nested(tree: ConditionTree, predicate: Callable[[str], bool]) -> bool:
    """Whether any nested Leaf satisfies `predicate`."""
    for _, child in _children(tree):
        if isinstance(child, Leaf) and predicate(child.value):
            return True
        if has_value_nested(child, predicate):
            return True
    return False


def resolve_exports(
    tree: ConditionTree | None,
    conditions: Sequence[str],
    current_path: tuple[str, ...] = (),
) -> ResolvedEntry | None:
    """Resolve a condition tree against a set of active conditions.

    Simplified resolver: `tree` must be the value of one entry point, so no
    subpath matching happens. Keys are tried in declared order; `default`
    always matches and ends the search even if its branch yields nothing.
    Fallback arrays resolve to their first element.

    Args:
        tree: Condition tree of one entry point
        conditions: Active condition keys
        current_path: Resolution path of `tree`

    Returns:
        The resolved target and its path, or None if nothing matched
    """
    if isinstance(tree, Leaf):
        return ResolvedEntry(tree.value, current_path)
    if isinstance(tree, FallbackArray):
        if not tree.items:
            return None
        return resolve_exports(tree.items[0], conditions, current_path + ("0",))
    if isinstance(tree, ConditionMap):
        for key, value in tree.entries:
            if key in conditions or key == "default":
                result = resolve_exports(value, conditions, current_path + (key,))
                if result is not None or key == "default":
                    return result
    return None
