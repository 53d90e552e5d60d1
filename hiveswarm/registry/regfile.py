# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/registry/regfile.py
"""
.reg export file driver.

The file is UTF-16LE; the byte-order mark is kept as the first character of
the decoded text, so the preamble is matched (and written) as text:

    U+FEFF "Windows Registry Editor Version 5.00" CRLF CRLF

followed by the key blocks of exactly one root key.
"""
from __future__ import annotations

import logging
from typing import Iterator, Optional

from ..core.exceptions import HiveswarmError, wrap_regfile, wrap_tree
from ..core.file_ops import PathLike, read_file_bytes, write_file_bytes
from ..core.logger import Log
from .constants import DEFAULT_MAX_DEPTH, PREAMBLE
from .cursor import ReadHead
from .key_parser import parse_key_list
from .key_renderer import iter_key_tree
from .model import RegistryKey

_UTF16 = "utf-16-le"


def decode_regfile_bytes(raw: bytes) -> str:
    if len(raw) % 2 != 0:
        raise wrap_regfile(f"file length {len(raw)} is not a whole number of UTF-16 code units", size=len(raw))
    return raw.decode(_UTF16, "surrogatepass")


def encode_regfile_text(text: str) -> bytes:
    return text.encode(_UTF16, "surrogatepass")


def parse_regfile(
    text: str,
    *,
    extensions: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> RegistryKey:
    """Parse decoded .reg text into its single root key."""
    head = ReadHead(text)
    if not head.consume(PREAMBLE):
        raise wrap_regfile("registry file preamble not found", offset=0)

    try:
        keys = parse_key_list(head, "", extensions=extensions, max_depth=max_depth)
    except RecursionError as e:
        raise wrap_regfile(f"key nesting exceeds the interpreter stack (max_depth={max_depth})", e, offset=head.pos)

    if len(keys) != 1:
        raise wrap_regfile(
            f"expected exactly one root key, found {len(keys)}",
            roots=[k.name for k in keys],
        )

    if not head.at_end():
        raise wrap_regfile(
            f"conversion left {head.remaining()} code units unparsed",
            offset=head.pos,
            next=head.peek(40),
        )

    return keys[0]


def iter_regfile(
    key: RegistryKey,
    *,
    extensions: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[str]:
    """Preamble then key blocks, as text chunks in file order."""
    key.validate()
    if not key.name:
        raise wrap_regfile("the root key needs a name to be written to a .reg file")
    yield PREAMBLE
    try:
        yield from iter_key_tree(key, extensions=extensions, max_depth=max_depth)
    except RecursionError as e:
        raise wrap_tree(f"key nesting exceeds the interpreter stack (max_depth={max_depth})", key=key.name) from e


def render_regfile(
    key: RegistryKey,
    *,
    extensions: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> str:
    return "".join(iter_regfile(key, extensions=extensions, max_depth=max_depth))


def read_regfile(
    path: PathLike,
    *,
    extensions: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
    logger: Optional[logging.Logger] = None,
) -> RegistryKey:
    raw = read_file_bytes(path)
    if logger is not None:
        Log.trace(logger, "read %d bytes from %s", len(raw), path)
    try:
        return parse_regfile(decode_regfile_bytes(raw), extensions=extensions, max_depth=max_depth)
    except HiveswarmError as e:
        e.with_context(file=str(path))
        raise


def write_regfile(
    key: RegistryKey,
    path: PathLike,
    *,
    extensions: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
    logger: Optional[logging.Logger] = None,
) -> int:
    # Fully rendered before the output is opened.
    data = encode_regfile_text(render_regfile(key, extensions=extensions, max_depth=max_depth))
    written = write_file_bytes(path, data)
    if logger is not None:
        Log.trace(logger, "wrote %d bytes to %s", written, path)
    return written
