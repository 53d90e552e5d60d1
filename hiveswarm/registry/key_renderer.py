# SPDX-License-Identifier: LGPL-3.0-or-later
# hiveswarm/registry/key_renderer.py
"""
Key tree -> .reg text: the structural inverse of key_parser.

Pre-order: "[full\\path]" CRLF, one line per value, a blank line, then each
child in document order.
"""
from __future__ import annotations

from typing import Iterator

from ..core.exceptions import wrap_tree
from .constants import (
    DEFAULT_MAX_DEPTH,
    KEY_CLOSING,
    KEY_CLOSING_AT_EOL,
    KEY_OPENING,
    NEWLINE,
    PATH_SEPARATOR,
)
from .model import RegistryKey
from .value_codec import render_value_line


def render_key_header(path: str) -> str:
    escaped = path.replace("\n", NEWLINE)
    if KEY_CLOSING_AT_EOL in escaped:
        # The header would end early when read back.
        raise wrap_tree(f"key path {path!r} contains a closing bracket followed by a line break", key=path)
    return KEY_OPENING + escaped + KEY_CLOSING + NEWLINE


def iter_key_tree(
    key: RegistryKey,
    parent_path: str = "",
    *,
    extensions: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
    _depth: int = 0,
) -> Iterator[str]:
    """Yield the .reg text for `key` and its descendants, one chunk per line."""
    path = key.name if not parent_path else parent_path + PATH_SEPARATOR + key.name
    if _depth > max_depth:
        raise wrap_tree(f"key nesting deeper than {max_depth} levels at {path!r}", key=path)

    yield render_key_header(path)
    for value in key.values:
        yield render_value_line(value, extensions=extensions)
    yield NEWLINE

    for child in key.subkeys:
        yield from iter_key_tree(child, path, extensions=extensions, max_depth=max_depth, _depth=_depth + 1)


def render_key_tree(
    key: RegistryKey,
    parent_path: str = "",
    *,
    extensions: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> str:
    return "".join(iter_key_tree(key, parent_path, extensions=extensions, max_depth=max_depth))
