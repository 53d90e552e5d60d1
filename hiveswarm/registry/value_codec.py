# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/registry/value_codec.py
"""
Registry value <-> .reg rendering token.

Encode direction:
  Each specific encoder returns Rendered(text) or FALLBACK_TO_HEX when its
  preconditions do not hold (wrong length, missing terminator, embedded NUL...).
  encode_value() dispatches on the type tag and falls back to the generic
  hex renderer silently; nothing in this direction raises.

Decode direction:
  decode_value() consumes one complete value line (name, '=', rendering, CRLF)
  from a ReadHead and is strict: a declared prefix must be followed by a
  well-formed rendering or a RegFileFormatError is raised.

Line wrapping follows reg.exe/regedit output byte for byte for hex data:
lines never exceed 80 columns including the trailing continuation backslash.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from ..core.exceptions import RegFileFormatError, wrap_regfile
from ..core.logger import Log
from .constants import (
    DEFAULT_VALUE_NAME,
    DWORD_PREFIX,
    ESCAPED_NEWLINE,
    EXPAND_SZ_PREFIX,
    HEX_BYTE_SEPARATOR,
    HEX_CONTINUATION_INDENT,
    HEX_DIGITS,
    HEX_PREFIX,
    HEX_TYPE_CLOSING,
    HEX_TYPE_OPENING,
    HEX_WRAP_LIMIT,
    LEADING_SPACE,
    MAX_VALUE_TYPE,
    MULTI_SZ_PREFIX,
    MULTI_SZ_SEPARATOR,
    MULTI_SZ_WRAP_LIMIT,
    NEWLINE,
    QWORD_PREFIX,
    REG_BINARY,
    REG_DWORD,
    REG_EXPAND_SZ,
    REG_MULTI_SZ,
    REG_QWORD,
    REG_SZ,
    STRING_DELIMITER,
    STRING_ESCAPE,
    TYPE_DATA_SEPARATOR,
    VALUE_NAME_SEPARATOR,
)
from .cursor import ReadHead
from .model import RegistryValue

logger = logging.getLogger(__name__)

_UTF16 = "utf-16-le"
_UTF16_ERRORS = "surrogatepass"

# ---------------------------------------------------------------------------
# Tagged encoder results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rendered:
    text: str


class _FallbackToHex:
    __slots__ = ()

    def __repr__(self) -> str:
        return "FALLBACK_TO_HEX"


FALLBACK_TO_HEX = _FallbackToHex()

EncodeResult = Union[Rendered, _FallbackToHex]

# ---------------------------------------------------------------------------
# String helpers
# ---------------------------------------------------------------------------


def code_units(s: str) -> int:
    """Length of `s` in UTF-16 code units (what the column counter measures)."""
    return len(s.encode(_UTF16, _UTF16_ERRORS)) // 2


def utf16_bytes(s: str) -> bytes:
    return s.encode(_UTF16, _UTF16_ERRORS)


def escape_string(s: str) -> str:
    """Escape a value name or string for use between double quotes."""
    return (
        s.replace(STRING_ESCAPE, STRING_ESCAPE + STRING_ESCAPE)
        .replace(STRING_DELIMITER, STRING_ESCAPE + STRING_DELIMITER)
        .replace("\n", NEWLINE)
    )


def _decode_utf16(data: bytes) -> Optional[str]:
    if len(data) % 2 != 0:
        return None
    return data.decode(_UTF16, _UTF16_ERRORS)


def render_value_name(name: str) -> str:
    """'@=' for the default value, '"escaped"=' otherwise."""
    if not name:
        return DEFAULT_VALUE_NAME + VALUE_NAME_SEPARATOR
    return STRING_DELIMITER + escape_string(name) + STRING_DELIMITER + VALUE_NAME_SEPARATOR


# ---------------------------------------------------------------------------
# Encoders
# ---------------------------------------------------------------------------


def encode_hex(value: RegistryValue, prefix_len: int) -> str:
    """
    hex:xx,xx,... (REG_BINARY) or hex(t):xx,xx,... for any other type.

    `prefix_len` is what is already written on the line (value name and '=').
    A continuation is emitted after a separator once "xx,\\" would no longer
    fit in the wrap limit; continuation lines start with two spaces.
    """
    tag = HEX_PREFIX
    if value.type != REG_BINARY:
        tag += f"{HEX_TYPE_OPENING}{value.type:x}{HEX_TYPE_CLOSING}"
    tag += TYPE_DATA_SEPARATOR

    parts: List[str] = [tag]
    column = prefix_len + len(tag)
    last = len(value.data) - 1
    for i, byte in enumerate(value.data):
        parts.append(f"{byte:02x}")
        column += 2
        if i == last:
            break
        parts.append(HEX_BYTE_SEPARATOR)
        column += 1
        if column > HEX_WRAP_LIMIT - 4:
            parts.append(ESCAPED_NEWLINE + LEADING_SPACE * HEX_CONTINUATION_INDENT)
            column = HEX_CONTINUATION_INDENT
    return "".join(parts)


def encode_dword(value: RegistryValue) -> EncodeResult:
    if value.type != REG_DWORD or len(value.data) != 4:
        return FALLBACK_TO_HEX
    number = int.from_bytes(value.data, "little", signed=False)
    return Rendered(f"{DWORD_PREFIX}{TYPE_DATA_SEPARATOR}{number:08x}")


def encode_qword(value: RegistryValue) -> EncodeResult:
    if value.type != REG_QWORD or len(value.data) != 8:
        return FALLBACK_TO_HEX
    number = int.from_bytes(value.data, "little", signed=False)
    return Rendered(f"{QWORD_PREFIX}{TYPE_DATA_SEPARATOR}{number:016x}")


def encode_string(value: RegistryValue) -> EncodeResult:
    if value.type != REG_SZ or not value.data:
        return FALLBACK_TO_HEX
    text = _decode_utf16(value.data)
    if text is None or not text.endswith("\0") or "\0" in text[:-1]:
        return FALLBACK_TO_HEX
    return Rendered(STRING_DELIMITER + escape_string(text[:-1]) + STRING_DELIMITER)


def encode_multi_string(value: RegistryValue, prefix_len: int, type_prefix: str) -> EncodeResult:
    """
    multi_sz:"a","b","" / expand_sz:"a" - one quoted string per NUL-terminated
    string in the data. A unit (quoted string plus its separator) moves to a
    continuation line, indented by `prefix_len` spaces, when it would not fit
    in the wrap limit together with the continuation backslash.
    """
    if not value.data:
        return FALLBACK_TO_HEX
    text = _decode_utf16(value.data)
    if text is None or not text.endswith("\0"):
        return FALLBACK_TO_HEX

    strings = text[:-1].split("\0")
    head = type_prefix + TYPE_DATA_SEPARATOR
    parts: List[str] = [head]
    column = prefix_len + len(head)
    on_line = 0
    for i, s in enumerate(strings):
        unit = STRING_DELIMITER + escape_string(s) + STRING_DELIMITER
        if i < len(strings) - 1:
            unit += MULTI_SZ_SEPARATOR
        width = code_units(unit)
        # +1 for the continuation backslash
        if on_line and column + width + 1 > MULTI_SZ_WRAP_LIMIT:
            parts.append(ESCAPED_NEWLINE + LEADING_SPACE * prefix_len)
            column = prefix_len
            on_line = 0
        parts.append(unit)
        column += width
        on_line += 1
    return Rendered("".join(parts))


def encode_value(value: RegistryValue, prefix_len: int, *, extensions: bool = False) -> str:
    """
    Rendering token for `value` (without the name prefix and line terminator).

    qword/multi_sz/expand_sz renderings are only produced with `extensions`.
    """
    result: EncodeResult = FALLBACK_TO_HEX
    if value.type == REG_DWORD:
        result = encode_dword(value)
    elif value.type == REG_SZ:
        result = encode_string(value)
    elif extensions and value.type == REG_QWORD:
        result = encode_qword(value)
    elif extensions and value.type == REG_MULTI_SZ:
        result = encode_multi_string(value, prefix_len, MULTI_SZ_PREFIX)
    elif extensions and value.type == REG_EXPAND_SZ:
        result = encode_multi_string(value, prefix_len, EXPAND_SZ_PREFIX)

    if isinstance(result, Rendered):
        return result.text

    Log.trace(logger, "hex rendering for value %r (type %d, %d bytes)", value.name, value.type, len(value.data))
    return encode_hex(value, prefix_len)


def render_value_line(value: RegistryValue, *, extensions: bool = False) -> str:
    """Complete value line, CRLF included."""
    prefix = render_value_name(value.name)
    return prefix + encode_value(value, code_units(prefix), extensions=extensions) + NEWLINE


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------


def _fail(head: ReadHead, msg: str, *, key: str, value: Optional[str] = None) -> RegFileFormatError:
    where = f"key {key!r}" if value is None else f"key {key!r}, value {value!r}"
    return wrap_regfile(f"{where}: {msg}", key=key, value=value, offset=head.pos)


def read_quoted(head: ReadHead, *, key: str, value: Optional[str] = None) -> str:
    """
    Read a double-quoted string: backslash takes the next character literally,
    CR immediately followed by LF is dropped so CRLF folds to a newline.
    """
    if not head.consume(STRING_DELIMITER):
        raise _fail(head, "double quote expected", key=key, value=value)

    text = head.text
    pos = head.pos
    end = len(text)
    out: List[str] = []
    while True:
        if pos >= end:
            head.pos = pos
            raise _fail(head, "missing closing quotation mark", key=key, value=value)
        ch = text[pos]
        if ch == STRING_DELIMITER:
            break
        if ch == STRING_ESCAPE:
            if pos + 1 >= end:
                head.pos = pos
                raise _fail(head, "escape character at end of input", key=key, value=value)
            pos += 1
            ch = text[pos]
        if ch == "\r" and text.startswith("\n", pos + 1):
            pos += 1
            continue
        out.append(ch)
        pos += 1
    head.pos = pos + 1
    return "".join(out)


def read_value_name(head: ReadHead, *, key: str) -> str:
    if head.consume(DEFAULT_VALUE_NAME):
        return ""
    if head.startswith(STRING_DELIMITER):
        return read_quoted(head, key=key)
    raise _fail(head, "value name should be literal @ or begin with a double quote", key=key)


def _read_type_tag(head: ReadHead, default: int, *, key: str, value: str) -> int:
    """Optional '(t)' after a typed prefix; the prefix implies the type otherwise."""
    if head.at_end():
        raise _fail(head, "end of input after type declaration", key=key, value=value)
    if not head.consume(HEX_TYPE_OPENING):
        return default

    start = head.pos
    text = head.text
    pos = start
    while pos < len(text) and text[pos] in HEX_DIGITS:
        pos += 1
    if pos == start or not text.startswith(HEX_TYPE_CLOSING, pos):
        raise _fail(head, "could not find closing parenthesis of value type", key=key, value=value)
    tag = int(text[start:pos], 16)
    if tag > MAX_VALUE_TYPE:
        raise _fail(head, f"value type {text[start:pos]} does not fit in 32 bits", key=key, value=value)
    head.pos = pos + 1
    return tag


def _read_integral(head: ReadHead, size: int, *, key: str, value: str) -> bytes:
    """
    Fixed-width hex number (dword: 8 digits, qword: 16), verified by
    re-encoding it and comparing with the source text case-insensitively.
    """
    digits = 2 * size
    if head.remaining() <= digits:
        raise _fail(head, f"less than {digits} characters after numeric declaration", key=key, value=value)

    literal = head.peek(digits)
    try:
        number = int(literal, 16)
    except ValueError:
        number = -1
    if number < 0 or f"{number:0{digits}x}" != literal.lower():
        raise _fail(head, f"could not parse number from {literal!r}", key=key, value=value)
    head.advance(digits)

    if not head.consume(NEWLINE):
        raise _fail(head, "numeric value not followed by a line break", key=key, value=value)
    return number.to_bytes(size, "little", signed=False)


def _skip_continuations(head: ReadHead) -> None:
    while head.consume(ESCAPED_NEWLINE):
        while head.consume(LEADING_SPACE):
            pass


def _read_hex_data(head: ReadHead, *, key: str, value: str) -> bytes:
    """
    xx,xx,... then CRLF. A '\\' CRLF + spaces continuation may follow the
    type prefix or any separator; regedit breaks right after `hex:` when the
    value name fills the line.
    """
    out = bytearray()
    if head.consume(NEWLINE):
        return bytes(out)
    _skip_continuations(head)
    while True:
        pair = head.peek(2)
        if len(pair) != 2 or pair[0] not in HEX_DIGITS or pair[1] not in HEX_DIGITS:
            raise _fail(head, "expecting two hexadecimal digits", key=key, value=value)
        out.append(int(pair, 16))
        head.advance(2)

        if head.consume(NEWLINE):
            return bytes(out)
        if not head.consume(HEX_BYTE_SEPARATOR):
            if head.at_end():
                raise _fail(head, "end of input while reading binary value", key=key, value=value)
            raise _fail(head, "expecting byte separator or line break", key=key, value=value)
        _skip_continuations(head)


def _read_string_data(head: ReadHead, *, key: str, value: str) -> bytes:
    s = read_quoted(head, key=key, value=value)
    if not head.consume(NEWLINE):
        raise _fail(head, "string value not followed by a line break", key=key, value=value)
    return utf16_bytes(s + "\0")


def _read_multi_string_data(head: ReadHead, *, key: str, value: str) -> bytes:
    out = bytearray(utf16_bytes(read_quoted(head, key=key, value=value) + "\0"))
    while not head.consume(NEWLINE):
        if not head.consume(MULTI_SZ_SEPARATOR):
            if head.at_end():
                raise _fail(head, "end of input while reading string list", key=key, value=value)
            raise _fail(head, "expecting string separator or line break", key=key, value=value)
        _skip_continuations(head)
        out += utf16_bytes(read_quoted(head, key=key, value=value) + "\0")
    return bytes(out)


def decode_value(head: ReadHead, *, key: str, extensions: bool = True) -> RegistryValue:
    """
    Consume one value line at the read head. `key` is the full path of the
    owning key, used in error messages.
    """
    name = read_value_name(head, key=key)
    if not head.consume(VALUE_NAME_SEPARATOR):
        raise _fail(head, "missing = sign", key=key, value=name)

    if head.consume(DWORD_PREFIX):
        vtype = _read_type_tag(head, REG_DWORD, key=key, value=name)
        _expect_type_separator(head, key=key, value=name)
        data = _read_integral(head, 4, key=key, value=name)
    elif head.startswith(QWORD_PREFIX):
        _require_extensions(head, extensions, QWORD_PREFIX, key=key, value=name)
        head.consume(QWORD_PREFIX)
        vtype = _read_type_tag(head, REG_QWORD, key=key, value=name)
        _expect_type_separator(head, key=key, value=name)
        data = _read_integral(head, 8, key=key, value=name)
    elif head.consume(HEX_PREFIX):
        vtype = _read_type_tag(head, REG_BINARY, key=key, value=name)
        _expect_type_separator(head, key=key, value=name)
        data = _read_hex_data(head, key=key, value=name)
    elif head.startswith(MULTI_SZ_PREFIX) or head.startswith(EXPAND_SZ_PREFIX):
        prefix = MULTI_SZ_PREFIX if head.startswith(MULTI_SZ_PREFIX) else EXPAND_SZ_PREFIX
        _require_extensions(head, extensions, prefix, key=key, value=name)
        head.consume(prefix)
        default = REG_MULTI_SZ if prefix == MULTI_SZ_PREFIX else REG_EXPAND_SZ
        vtype = _read_type_tag(head, default, key=key, value=name)
        _expect_type_separator(head, key=key, value=name)
        data = _read_multi_string_data(head, key=key, value=name)
    else:
        vtype = REG_SZ
        data = _read_string_data(head, key=key, value=name)

    return RegistryValue(name=name, type=vtype, data=data)


def _expect_type_separator(head: ReadHead, *, key: str, value: str) -> None:
    if not head.consume(TYPE_DATA_SEPARATOR):
        raise _fail(head, "missing : sign after type declaration", key=key, value=value)


def _require_extensions(head: ReadHead, extensions: bool, prefix: str, *, key: str, value: str) -> None:
    if not extensions:
        raise _fail(head, f"{prefix} rendering requires format extensions", key=key, value=value)
