# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the value rendering encoders and the strict value-line decoder."""
from __future__ import annotations

import pytest

from hiveswarm.core.exceptions import RegFileFormatError
from hiveswarm.registry.constants import (
    REG_BINARY,
    REG_DWORD,
    REG_EXPAND_SZ,
    REG_MULTI_SZ,
    REG_QWORD,
    REG_SZ,
)
from hiveswarm.registry.cursor import ReadHead
from hiveswarm.registry.model import RegistryValue
from hiveswarm.registry.value_codec import (
    FALLBACK_TO_HEX,
    Rendered,
    decode_value,
    encode_dword,
    encode_hex,
    encode_multi_string,
    encode_string,
    encode_value,
    escape_string,
    render_value_line,
)


def sz(s: str) -> bytes:
    return (s + "\0").encode("utf-16-le")


def decode(line: str, *, extensions: bool = True) -> RegistryValue:
    head = ReadHead(line)
    value = decode_value(head, key="Root", extensions=extensions)
    assert head.at_end()
    return value


@pytest.mark.unit
class TestEncoders:
    def test_dword_is_little_endian_lowercase(self):
        v = RegistryValue("n", REG_DWORD, bytes([0x78, 0x56, 0x34, 0x12]))
        assert encode_value(v, 0) == "dword:12345678"
        v = RegistryValue("n", REG_DWORD, bytes([0xef, 0xbe, 0xad, 0xde]))
        assert encode_value(v, 0) == "dword:deadbeef"

    def test_dword_with_wrong_length_falls_back(self):
        v = RegistryValue("n", REG_DWORD, b"\x01\x02")
        assert encode_dword(v) is FALLBACK_TO_HEX
        assert encode_value(v, 0) == "hex(4):01,02"

    def test_string(self):
        v = RegistryValue("n", REG_SZ, sz("AB"))
        assert encode_string(v) == Rendered('"AB"')

    def test_string_without_terminator_falls_back_with_type_tag(self):
        v = RegistryValue("n", REG_SZ, b"A\x00B\x00")
        assert encode_string(v) is FALLBACK_TO_HEX
        assert encode_value(v, 0) == "hex(1):41,00,42,00"

    def test_string_with_embedded_nul_falls_back(self):
        v = RegistryValue("n", REG_SZ, "a\0b\0".encode("utf-16-le"))
        assert encode_string(v) is FALLBACK_TO_HEX

    def test_empty_string_data_falls_back(self):
        assert encode_value(RegistryValue("n", REG_SZ, b""), 0) == "hex(1):"

    def test_binary_uses_plain_hex_prefix(self):
        assert encode_value(RegistryValue("n", REG_BINARY, b"\x00\xff\x10"), 0) == "hex:00,ff,10"

    def test_unknown_type_tag_is_unpadded_lowercase_hex(self):
        assert encode_value(RegistryValue("n", 0x1234ABCD, b"\x01"), 0) == "hex(1234abcd):01"

    def test_escape_string(self):
        assert escape_string('a"b\\c\nd') == 'a\\"b\\\\c\r\nd'

    def test_hex_wraps_after_25_bytes_on_first_line(self):
        out = encode_hex(RegistryValue("", REG_BINARY, b"\x00" * 41), 0)
        first, second = out.split("\r\n")
        assert first == "hex:" + "00," * 25 + "\\"
        assert len(first) == 80
        assert second == "  " + "00," * 15 + "00"

    def test_hex_wrap_accounts_for_prefix(self):
        out = encode_hex(RegistryValue("x", REG_BINARY, b"\x00" * 41), 10)
        first = out.split("\r\n")[0]
        assert 10 + len(first) <= 80
        assert first.endswith(",\\")

    def test_hex_lines_never_exceed_80_columns(self):
        line = render_value_line(RegistryValue("SomeLongValueName", REG_BINARY, bytes(range(256))))
        for row in line.split("\r\n"):
            assert len(row) <= 80

    def test_qword_and_multi_sz_need_extensions(self):
        q = RegistryValue("q", REG_QWORD, (0x0102030405060708).to_bytes(8, "little"))
        assert encode_value(q, 0).startswith("hex(b):")
        assert encode_value(q, 0, extensions=True) == "qword:0102030405060708"

        m = RegistryValue("m", REG_MULTI_SZ, "a\0b\0\0".encode("utf-16-le"))
        assert encode_value(m, 0).startswith("hex(7):")
        assert encode_value(m, 0, extensions=True) == 'multi_sz:"a","b",""'

    def test_expand_sz_with_extensions(self):
        v = RegistryValue("p", REG_EXPAND_SZ, sz("%SystemRoot%\\x"))
        assert encode_value(v, 0, extensions=True) == 'expand_sz:"%SystemRoot%\\\\x"'

    def test_multi_sz_wraps_with_prefix_indent(self):
        strings = ["s%02d" % i for i in range(30)]
        v = RegistryValue("m", REG_MULTI_SZ, ("\0".join(strings) + "\0").encode("utf-16-le"))
        result = encode_multi_string(v, 4, "multi_sz")
        assert isinstance(result, Rendered)
        rows = result.text.split("\r\n")
        assert len(rows) > 1
        assert 4 + len(rows[0]) <= 80
        for row in rows[1:]:
            assert row.startswith("    \"")
            assert len(row) <= 80

    def test_multi_sz_breaks_before_a_string_that_would_reach_column_80(self):
        # prefix 5 + "multi_sz:" 9 + five 11-wide units = column 69; a sixth
        # unit would end at 80 and leave no room for the backslash.
        v = RegistryValue("m", REG_MULTI_SZ, ("\0".join(["aaaaaaaa"] * 8) + "\0").encode("utf-16-le"))
        rows = encode_multi_string(v, 5, "multi_sz").text.split("\r\n")
        assert rows[0] == "multi_sz:" + '"aaaaaaaa",' * 5 + "\\"
        assert 5 + len(rows[0]) == 70
        assert rows[1] == "     " + '"aaaaaaaa",' * 2 + '"aaaaaaaa"'

    def test_default_value_name(self):
        assert render_value_line(RegistryValue("", REG_SZ, sz("x"))) == '@="x"\r\n'


@pytest.mark.unit
class TestDecoder:
    def test_dword(self):
        v = decode('"n"=dword:12345678\r\n')
        assert v == RegistryValue("n", REG_DWORD, bytes([0x78, 0x56, 0x34, 0x12]))

    def test_dword_accepts_uppercase_digits(self):
        assert decode('"n"=dword:0000ABCD\r\n').data == (0xABCD).to_bytes(4, "little")

    def test_default_name_and_string(self):
        assert decode('@="hello"\r\n') == RegistryValue("", REG_SZ, sz("hello"))

    def test_string_escapes_and_embedded_newline(self):
        v = decode('"a\\"b"="x\\\\y\r\nz"\r\n')
        assert v.name == 'a"b'
        assert v.data == sz("x\\y\nz")

    def test_hex_with_type_and_continuation(self):
        v = decode('"n"=hex(7):61,00,\\\r\n  00,00\r\n')
        assert v.type == 7
        assert v.data == b"\x61\x00\x00\x00"

    def test_hex_continuation_right_after_type_prefix(self):
        v = decode('"n"=hex:\\\r\n  00,01\r\n')
        assert v == RegistryValue("n", REG_BINARY, b"\x00\x01")
        v = decode('"n"=hex(3):\\\r\n  ff\r\n')
        assert v == RegistryValue("n", REG_BINARY, b"\xff")

    def test_empty_hex(self):
        assert decode('"n"=hex:\r\n') == RegistryValue("n", REG_BINARY, b"")

    def test_multi_sz(self):
        v = decode('"m"=multi_sz:"a",\\\r\n    "b",""\r\n')
        assert v.type == REG_MULTI_SZ
        assert v.data == "a\0b\0\0".encode("utf-16-le")

    def test_qword(self):
        v = decode('"q"=qword:0102030405060708\r\n')
        assert v.type == REG_QWORD
        assert v.data == (0x0102030405060708).to_bytes(8, "little")

    @pytest.mark.parametrize(
        "line",
        [
            '"n"=dword:1234\r\n',
            '"n"=dword:1234567g\r\n',
            '"n"=dword:12345678 \r\n',
            '"n"=hex:0\r\n',
            '"n"=hex:00,,01\r\n',
            '"n"=hex(zz):00\r\n',
            '"n"="abc',
            '"n"="abc"',
            '"n"hex:00\r\n',
            'n=hex:00\r\n',
        ],
    )
    def test_malformed_lines(self, line):
        with pytest.raises(RegFileFormatError):
            decode_value(ReadHead(line), key="Root")

    def test_extensions_disabled_rejects_qword(self):
        with pytest.raises(RegFileFormatError, match="extensions"):
            decode_value(ReadHead('"q"=qword:0102030405060708\r\n'), key="Root", extensions=False)

    def test_error_names_key_and_value(self):
        with pytest.raises(RegFileFormatError) as ei:
            decode_value(ReadHead('"Count"=dword:xyz\r\n'), key="Root\\Sub")
        err = ei.value
        assert "Count" in str(err)
        assert err.context["key"] == "Root\\Sub"
        assert err.context["value"] == "Count"
        assert err.code == 2

    def test_encode_then_decode_line(self):
        v = RegistryValue("bin", REG_BINARY, bytes(range(100)))
        assert decode(render_value_line(v)) == v
