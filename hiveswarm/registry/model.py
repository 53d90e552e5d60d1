# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/registry/model.py
"""
In-memory registry tree shared by every format reader and writer.

A tree is built in one pass (by a parser or a hive/policy reader) and is
treated as read-only once handed to a renderer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Set, Tuple

from ..core.exceptions import wrap_tree
from .constants import MAX_VALUE_TYPE, PATH_SEPARATOR


def fold_name(name: str) -> str:
    """Comparison form of a key or value name; registry names are case-insensitive."""
    return name.casefold()


@dataclass
class RegistryValue:
    """A named, typed, byte-bearing leaf. An empty name is the key's default value."""

    name: str
    type: int
    data: bytes = b""

    def __post_init__(self) -> None:
        if not 0 <= int(self.type) <= MAX_VALUE_TYPE:
            raise wrap_tree(f"value type {self.type!r} does not fit in 32 bits", value=self.name)
        self.type = int(self.type)
        self.data = bytes(self.data)


@dataclass
class RegistryKey:
    """A named node; children and values keep document order."""

    name: str
    subkeys: List["RegistryKey"] = field(default_factory=list)
    values: List[RegistryValue] = field(default_factory=list)

    def walk(self, parent_path: str = "") -> Iterator[Tuple[str, "RegistryKey"]]:
        """Yield (full_path, key) pairs in pre-order, the same order the .reg renderer uses."""
        stack: List[Tuple[str, RegistryKey]] = [(parent_path, self)]
        while stack:
            parent, key = stack.pop()
            path = key.name if not parent else parent + PATH_SEPARATOR + key.name
            yield path, key
            for child in reversed(key.subkeys):
                stack.append((path, child))

    def count(self) -> Tuple[int, int]:
        keys = 0
        values = 0
        for _path, key in self.walk():
            keys += 1
            values += len(key.values)
        return keys, values

    def validate(self) -> None:
        """
        Check the invariants the serialized forms rely on:
          - no key name contains the path separator, and only the root may be unnamed
          - full paths are unique across the tree
          - value names are unique within a key
        Both uniqueness checks ignore case, as the registry does.
        """
        seen_paths: Set[str] = set()
        for path, key in self.walk():
            if PATH_SEPARATOR in key.name:
                raise wrap_tree(f"key name {key.name!r} contains the path separator", key=path)
            if not key.name and key is not self:
                raise wrap_tree("only the root key may have an empty name", key=path)
            folded = fold_name(path)
            if folded in seen_paths:
                raise wrap_tree(f"duplicated key path {path!r}", key=path)
            seen_paths.add(folded)

            names: Set[str] = set()
            for value in key.values:
                if fold_name(value.name) in names:
                    raise wrap_tree(f"duplicated value name {value.name!r} under {path!r}", key=path, value=value.name)
                names.add(fold_name(value.name))

    def find(self, path: str) -> "RegistryKey":
        """Resolve a separator-joined path relative to this key ('' is the key itself)."""
        node = self
        if not path:
            return node
        for part in path.split(PATH_SEPARATOR):
            for child in node.subkeys:
                if child.name == part:
                    node = child
                    break
            else:
                raise KeyError(path)
        return node
