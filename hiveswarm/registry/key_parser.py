# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/registry/key_parser.py
"""
Rebuild a key tree from the flat run of [full\\path] blocks of a .reg file.

The format carries no explicit nesting: every key header spells its whole
path, and a key's descendants are serialized contiguously right after it.
parse_key_list() collects every block whose path strictly extends the
current scope prefix, recursing with "<path>\\" as the new prefix, and hands
control back to its caller on the first header outside the scope.
"""
from __future__ import annotations

import logging
from typing import List, Set

from ..core.exceptions import RegFileFormatError, wrap_regfile
from ..core.logger import Log
from .constants import (
    DEFAULT_MAX_DEPTH,
    KEY_CLOSING_AT_EOL,
    KEY_OPENING,
    NEWLINE,
    PATH_SEPARATOR,
)
from .cursor import ReadHead
from .model import RegistryKey, RegistryValue, fold_name
from .value_codec import decode_value

logger = logging.getLogger(__name__)


def _scope(prefix: str) -> str:
    return prefix.replace(NEWLINE, "\n") if prefix else "<root>"


def _fail(head: ReadHead, msg: str, **context) -> RegFileFormatError:
    return wrap_regfile(msg, offset=head.pos, **context)


def _skip_blank_lines(head: ReadHead) -> None:
    while head.consume(NEWLINE):
        pass


def parse_value_list(head: ReadHead, key_path: str, *, extensions: bool = True) -> List[RegistryValue]:
    """
    Consume `name=rendering` lines up to and including the blank line that
    closes the key's block (and any further blank lines).
    """
    values: List[RegistryValue] = []
    seen: Set[str] = set()
    while True:
        if head.at_end():
            raise _fail(head, f"key {key_path!r}: missing blank line after the value list", key=key_path)
        if head.consume(NEWLINE):
            _skip_blank_lines(head)
            return values

        value = decode_value(head, key=key_path, extensions=extensions)
        if fold_name(value.name) in seen:
            raise _fail(
                head,
                f"key {key_path!r}: duplicated value name {value.name!r}",
                key=key_path,
                value=value.name,
            )
        seen.add(fold_name(value.name))
        values.append(value)


def parse_key_list(
    head: ReadHead,
    path_prefix: str = "",
    *,
    extensions: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
    _depth: int = 0,
) -> List[RegistryKey]:
    """
    Collect the keys whose raw header path strictly extends `path_prefix`.

    `path_prefix` is compared against header text as written in the file
    (newlines still as CRLF); names are folded back to '\\n' once extracted.
    """
    if _depth > max_depth:
        raise _fail(head, f"key nesting deeper than {max_depth} levels under {_scope(path_prefix)!r}", scope=_scope(path_prefix))

    _skip_blank_lines(head)
    if head.at_end():
        raise _fail(head, f"reading keys under {_scope(path_prefix)!r}: expecting content", scope=_scope(path_prefix))

    keys: List[RegistryKey] = []
    names: Set[str] = set()
    while not head.at_end():
        if not head.startswith(KEY_OPENING):
            raise _fail(
                head,
                f"reading keys under {_scope(path_prefix)!r}: line does not begin with an opening bracket",
                scope=_scope(path_prefix),
            )
        end = head.find(KEY_CLOSING_AT_EOL, len(KEY_OPENING))
        if end < 0:
            raise _fail(
                head,
                f"reading keys under {_scope(path_prefix)!r}: could not find closing bracket followed by a line break",
                scope=_scope(path_prefix),
            )

        raw_path = head.text[head.pos + len(KEY_OPENING):end]
        if len(raw_path) <= len(path_prefix) or not raw_path.startswith(path_prefix):
            # Belongs to an enclosing scope.
            break

        full_path = raw_path.replace(NEWLINE, "\n")
        name = raw_path[len(path_prefix):].replace(NEWLINE, "\n")
        if PATH_SEPARATOR in name:
            raise _fail(
                head,
                f"key {full_path!r} appears before its parent key {full_path.rsplit(PATH_SEPARATOR, 1)[0]!r}",
                key=full_path,
            )
        if fold_name(name) in names:
            raise _fail(head, f"duplicated key path {full_path!r}", key=full_path)
        names.add(fold_name(name))

        head.pos = end + len(KEY_CLOSING_AT_EOL)
        key = RegistryKey(name=name)
        key.values = parse_value_list(head, full_path, extensions=extensions)
        Log.trace(logger, "key %r: %d value(s)", full_path, len(key.values))

        if not head.at_end():
            key.subkeys = parse_key_list(
                head,
                raw_path + PATH_SEPARATOR,
                extensions=extensions,
                max_depth=max_depth,
                _depth=_depth + 1,
            )

        keys.append(key)
        _skip_blank_lines(head)

    return keys
