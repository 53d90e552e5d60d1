# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for whole .reg export files: preamble, root rules, bytes on disk."""
from __future__ import annotations

import sys

import pytest

from hiveswarm.core.exceptions import RegFileFormatError, TreeError
from hiveswarm.registry.constants import (
    PREAMBLE,
    REG_BINARY,
    REG_DWORD,
    REG_EXPAND_SZ,
    REG_MULTI_SZ,
    REG_NONE,
    REG_QWORD,
    REG_SZ,
)
from hiveswarm.registry.model import RegistryKey, RegistryValue
from hiveswarm.registry.regfile import (
    decode_regfile_bytes,
    encode_regfile_text,
    parse_regfile,
    read_regfile,
    render_regfile,
    write_regfile,
)


def sz(s: str) -> bytes:
    return (s + "\0").encode("utf-16-le")


def plain_tree() -> RegistryKey:
    return RegistryKey(
        "HKEY_LOCAL_MACHINE",
        values=[RegistryValue("", REG_SZ, sz("default"))],
        subkeys=[
            RegistryKey(
                "Software",
                values=[
                    RegistryValue("Version", REG_DWORD, (7).to_bytes(4, "little")),
                    RegistryValue('quote"and\\slash', REG_SZ, sz('a "b" c\\d')),
                    RegistryValue("multi\nline", REG_SZ, sz("one\ntwo")),
                    RegistryValue("Blob", REG_BINARY, bytes(range(200))),
                    RegistryValue("Odd", REG_SZ, b"\x41"),
                    RegistryValue("None", REG_NONE, b""),
                    RegistryValue("Q", REG_QWORD, (1 << 40).to_bytes(8, "little")),
                    RegistryValue("M", REG_MULTI_SZ, "a\0b\0\0".encode("utf-16-le")),
                ],
                subkeys=[RegistryKey("Nested\nName", subkeys=[RegistryKey("Leaf")])],
            ),
            RegistryKey("System"),
        ],
    )


def extension_tree() -> RegistryKey:
    return RegistryKey(
        "Root",
        values=[
            RegistryValue("Q", REG_QWORD, (0x1122334455667788).to_bytes(8, "little")),
            RegistryValue("M", REG_MULTI_SZ, ("\0".join("item%d" % i for i in range(40)) + "\0\0").encode("utf-16-le")),
            RegistryValue("E", REG_EXPAND_SZ, sz("%PATH%;C:\\x")),
        ],
    )


@pytest.mark.unit
class TestParseRegfile:
    def test_minimal(self):
        assert parse_regfile(PREAMBLE + "[Root]\r\n\r\n") == RegistryKey("Root")

    def test_missing_preamble(self):
        with pytest.raises(RegFileFormatError, match="preamble"):
            parse_regfile("Windows Registry Editor Version 5.00\r\n\r\n[Root]\r\n\r\n")

    def test_more_than_one_root(self):
        with pytest.raises(RegFileFormatError, match="exactly one root") as ei:
            parse_regfile(PREAMBLE + "[A]\r\n\r\n[B]\r\n\r\n")
        assert ei.value.context["roots"] == ["A", "B"]

    def test_no_keys(self):
        with pytest.raises(RegFileFormatError):
            parse_regfile(PREAMBLE)

    def test_unparsed_trailing_input(self):
        with pytest.raises(RegFileFormatError, match="unparsed"):
            parse_regfile(PREAMBLE + "[Root]\r\n\r\n[]\r\n\r\n")

    def test_repeated_key_header(self):
        with pytest.raises(RegFileFormatError, match="duplicated key path"):
            parse_regfile(PREAMBLE + "[Root]\r\n\r\n[Root\\A]\r\n\r\n[Root\\A]\r\n\r\n")

    def test_nesting_past_the_interpreter_stack(self):
        levels = sys.getrecursionlimit() + 50
        text = PREAMBLE + "".join("[" + "\\".join(["R"] + ["k"] * i) + "]\r\n\r\n" for i in range(levels))
        with pytest.raises(RegFileFormatError, match="interpreter stack"):
            parse_regfile(text, max_depth=levels * 2)

    def test_extensions_flag(self):
        text = PREAMBLE + "[Root]\r\n\"q\"=qword:0000000000000001\r\n\r\n"
        assert parse_regfile(text).values[0].type == REG_QWORD
        with pytest.raises(RegFileFormatError):
            parse_regfile(text, extensions=False)


@pytest.mark.unit
class TestRenderRegfile:
    def test_preamble_and_layout(self):
        text = render_regfile(RegistryKey("Root", values=[RegistryValue("n", REG_DWORD, bytes([0x78, 0x56, 0x34, 0x12]))]))
        assert text == "\ufeffWindows Registry Editor Version 5.00\r\n\r\n[Root]\r\n\"n\"=dword:12345678\r\n\r\n"

    def test_unnamed_root_is_rejected(self):
        with pytest.raises(RegFileFormatError):
            render_regfile(RegistryKey(""))

    def test_invalid_tree_is_rejected(self):
        with pytest.raises(TreeError):
            render_regfile(RegistryKey("Root", subkeys=[RegistryKey("a\\b")]))

    def test_round_trip(self):
        tree = plain_tree()
        assert parse_regfile(render_regfile(tree)) == tree

    def test_idempotent(self):
        once = render_regfile(plain_tree())
        assert render_regfile(parse_regfile(once)) == once

    def test_extension_round_trip(self):
        tree = extension_tree()
        text = render_regfile(tree, extensions=True)
        assert "qword:1122334455667788" in text
        assert 'multi_sz:"item0",' in text
        assert "expand_sz:" in text
        assert parse_regfile(text, extensions=True) == tree

    def test_plain_render_of_extension_types_uses_hex(self):
        text = render_regfile(extension_tree())
        assert "qword" not in text
        assert "hex(b):" in text
        assert parse_regfile(text, extensions=False) == extension_tree()


@pytest.mark.unit
class TestRegfileBytes:
    def test_utf16le_with_bom(self):
        raw = encode_regfile_text(render_regfile(RegistryKey("Root")))
        assert raw.startswith(b"\xff\xfeW\x00")
        assert decode_regfile_bytes(raw).startswith("\ufeffWindows")

    def test_odd_length(self):
        with pytest.raises(RegFileFormatError):
            decode_regfile_bytes(b"\xff\xfeW")

    def test_write_then_read(self, tmp_path):
        out = tmp_path / "sub" / "export.reg"
        n = write_regfile(plain_tree(), out)
        assert out.stat().st_size == n
        assert read_regfile(out) == plain_tree()
        assert [p.name for p in out.parent.iterdir()] == ["export.reg"]

    def test_read_error_names_file(self, tmp_path):
        bad = tmp_path / "bad.reg"
        bad.write_bytes(encode_regfile_text(PREAMBLE + "[Root]\r\n\"x\"=dword:1\r\n"))
        with pytest.raises(RegFileFormatError) as ei:
            read_regfile(bad)
        assert ei.value.context["file"] == str(bad)

    def test_failed_write_leaves_no_output(self, tmp_path):
        out = tmp_path / "x.reg"
        with pytest.raises(RegFileFormatError):
            write_regfile(RegistryKey(""), out)
        assert list(tmp_path.iterdir()) == []
