# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/registry/polfile.py
"""
Group Policy registry (.pol, "PReg") codec.

Layout (MS-GPREG):
  b"PReg" || u32le version (1) || entries...
  entry := '[' key-path NUL ';' value-name NUL ';' u32le type ';' u32le size ';' data ']'

Brackets, semicolons and strings are UTF-16LE code units. Entries carry full
key paths relative to the policy root; they are folded back into a tree.
A key with no values is written as one marker entry (empty name, type 0,
no data) and such markers add no value when read.
"""
from __future__ import annotations

import logging
import struct
from typing import Dict, Iterator, List, Optional, Tuple

from ..core.exceptions import HiveswarmError, wrap_polfile
from ..core.file_ops import PathLike, read_file_bytes, write_file_bytes
from ..core.logger import Log
from .constants import (
    DEFAULT_ROOT_NAME,
    PATH_SEPARATOR,
    POL_ENTRY_CLOSING,
    POL_ENTRY_OPENING,
    POL_ENTRY_SEPARATOR,
    POL_SIGNATURE,
    POL_VERSION,
    REG_NONE,
)
from .model import RegistryKey, RegistryValue, fold_name

_U32 = struct.Struct("<I")
_UTF16 = "utf-16-le"
_MAX_DATA = 0xFFFFFFFF


class _PolReader:
    """Byte cursor over a .pol buffer."""

    def __init__(self, raw: bytes):
        self.raw = raw
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.raw)

    def expect(self, token: bytes, what: str) -> None:
        if self.raw[self.pos:self.pos + len(token)] != token:
            raise wrap_polfile(f"{what} not found", offset=self.pos)
        self.pos += len(token)

    def u32(self, what: str) -> int:
        if self.pos + _U32.size > len(self.raw):
            raise wrap_polfile(f"could not read {what}: end of data", offset=self.pos)
        (n,) = _U32.unpack_from(self.raw, self.pos)
        self.pos += _U32.size
        return n

    def take(self, size: int, what: str) -> bytes:
        if self.pos + size > len(self.raw):
            raise wrap_polfile(f"end of data before end of {what}", offset=self.pos, size=size)
        out = self.raw[self.pos:self.pos + size]
        self.pos += size
        return out

    def terminated_string(self, what: str) -> str:
        """UTF-16 string up to the next ';' code unit, which must follow a NUL."""
        end = self.pos
        while True:
            if end + 2 > len(self.raw):
                raise wrap_polfile(f"{what} separator not found", offset=self.pos)
            if self.raw[end:end + 2] == POL_ENTRY_SEPARATOR:
                break
            end += 2
        s = self.raw[self.pos:end].decode(_UTF16, "surrogatepass")
        if not s.endswith("\0"):
            raise wrap_polfile(f"{what} not null-terminated", offset=self.pos)
        self.pos = end + len(POL_ENTRY_SEPARATOR)
        return s[:-1]


def _read_entry(reader: _PolReader) -> Tuple[str, Optional[RegistryValue]]:
    reader.expect(POL_ENTRY_OPENING, "entry opening bracket")
    key_path = reader.terminated_string("key name")
    name = reader.terminated_string("value name")
    vtype = reader.u32("value type")
    reader.expect(POL_ENTRY_SEPARATOR, "separator after value type")
    size = reader.u32("value size")
    reader.expect(POL_ENTRY_SEPARATOR, "separator after value size")
    data = reader.take(size, f"value {name!r} data")
    reader.expect(POL_ENTRY_CLOSING, "entry closing bracket")

    if not name and vtype == REG_NONE:
        return key_path, None
    return key_path, RegistryValue(name=name, type=vtype, data=data)


def _ensure_path(root: RegistryKey, key_path: str, index: Dict[str, RegistryKey]) -> RegistryKey:
    if not key_path:
        return root
    node = index.get(fold_name(key_path))
    if node is not None:
        return node

    parent = root
    walked = ""
    for part in key_path.split(PATH_SEPARATOR):
        if not part:
            raise wrap_polfile(f"empty component in key path {key_path!r}", key=key_path)
        walked = part if not walked else walked + PATH_SEPARATOR + part
        node = index.get(fold_name(walked))
        if node is None:
            node = RegistryKey(name=part)
            parent.subkeys.append(node)
            index[fold_name(walked)] = node
        parent = node
    return parent


def parse_polfile(raw: bytes, root_name: str = DEFAULT_ROOT_NAME) -> RegistryKey:
    """Parse a whole .pol buffer into a tree rooted at `root_name`."""
    reader = _PolReader(raw)
    reader.expect(POL_SIGNATURE, "PReg signature")
    version = reader.u32("version")
    if version != POL_VERSION:
        raise wrap_polfile(f"unsupported PReg version {version}", offset=4)

    root = RegistryKey(name=root_name)
    index: Dict[str, RegistryKey] = {}
    while not reader.at_end():
        start = reader.pos
        key_path, value = _read_entry(reader)
        key = _ensure_path(root, key_path, index)
        if value is None:
            continue
        if any(fold_name(v.name) == fold_name(value.name) for v in key.values):
            raise wrap_polfile(
                f"duplicated value {value.name!r} under {key_path!r}",
                key=key_path,
                value=value.name,
                offset=start,
            )
        key.values.append(value)
    return root


def _entry(key_path: str, value: RegistryValue) -> bytes:
    if len(value.data) > _MAX_DATA:
        raise wrap_polfile(f"value {value.name!r} under {key_path!r} is too long", key=key_path, value=value.name)
    return b"".join(
        (
            POL_ENTRY_OPENING,
            (key_path + "\0").encode(_UTF16, "surrogatepass"),
            POL_ENTRY_SEPARATOR,
            (value.name + "\0").encode(_UTF16, "surrogatepass"),
            POL_ENTRY_SEPARATOR,
            _U32.pack(value.type),
            POL_ENTRY_SEPARATOR,
            _U32.pack(len(value.data)),
            POL_ENTRY_SEPARATOR,
            value.data,
            POL_ENTRY_CLOSING,
        )
    )


def iter_polfile(key: RegistryKey) -> Iterator[bytes]:
    """Header then one entry per value; the root key's own name is not stored."""
    key.validate()
    yield POL_SIGNATURE + _U32.pack(POL_VERSION)

    for value in key.values:
        yield _entry("", value)

    marker = RegistryValue(name="", type=REG_NONE)
    for child in key.subkeys:
        for path, node in child.walk():
            if not node.values:
                yield _entry(path, marker)
            for value in node.values:
                yield _entry(path, value)


def render_polfile(key: RegistryKey) -> bytes:
    return b"".join(iter_polfile(key))


def read_polfile(
    path: PathLike,
    *,
    root_name: str = DEFAULT_ROOT_NAME,
    logger: Optional[logging.Logger] = None,
) -> RegistryKey:
    raw = read_file_bytes(path)
    if logger is not None:
        Log.trace(logger, "read %d bytes from %s", len(raw), path)
    try:
        return parse_polfile(raw, root_name=root_name)
    except HiveswarmError as e:
        e.with_context(file=str(path))
        raise


def write_polfile(key: RegistryKey, path: PathLike, *, logger: Optional[logging.Logger] = None) -> int:
    chunks: List[bytes] = list(iter_polfile(key))
    written = write_file_bytes(path, chunks)
    if logger is not None:
        Log.trace(logger, "wrote %d bytes to %s", written, path)
    return written
