# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import pytest

from hiveswarm.core.exceptions import TreeError
from hiveswarm.registry.constants import REG_BINARY, REG_SZ
from hiveswarm.registry.model import RegistryKey, RegistryValue


def tree() -> RegistryKey:
    return RegistryKey(
        "Root",
        values=[RegistryValue("a", REG_BINARY, b"\x01")],
        subkeys=[
            RegistryKey("A", subkeys=[RegistryKey("A1"), RegistryKey("A2")]),
            RegistryKey("B", values=[RegistryValue("b", REG_SZ, b""), RegistryValue("c", REG_SZ, b"")]),
        ],
    )


@pytest.mark.unit
class TestRegistryModel:
    def test_walk_is_pre_order(self):
        assert [p for p, _k in tree().walk()] == ["Root", "Root\\A", "Root\\A\\A1", "Root\\A\\A2", "Root\\B"]

    def test_walk_with_parent_path(self):
        assert [p for p, _k in RegistryKey("K").walk("HKLM")] == ["HKLM\\K"]

    def test_count(self):
        assert tree().count() == (5, 3)

    def test_find(self):
        t = tree()
        assert t.find("") is t
        assert t.find("A\\A2").name == "A2"
        with pytest.raises(KeyError):
            t.find("A\\nope")

    def test_value_type_range(self):
        RegistryValue("x", 0xFFFFFFFF)
        with pytest.raises(TreeError):
            RegistryValue("x", 1 << 32)
        with pytest.raises(TreeError):
            RegistryValue("x", -1)

    def test_value_data_is_bytes(self):
        assert RegistryValue("x", REG_BINARY, bytearray(b"\x01")).data == b"\x01"

    def test_validate_ok(self):
        tree().validate()
        RegistryKey("").validate()

    @pytest.mark.parametrize(
        "bad",
        [
            RegistryKey("Root", subkeys=[RegistryKey("a\\b")]),
            RegistryKey("Root", subkeys=[RegistryKey("")]),
            RegistryKey("Root", subkeys=[RegistryKey("A"), RegistryKey("A")]),
            RegistryKey("Root", values=[RegistryValue("v", REG_BINARY), RegistryValue("v", REG_SZ)]),
            RegistryKey("Root", subkeys=[RegistryKey("Run"), RegistryKey("RUN")]),
            RegistryKey("Root", values=[RegistryValue("Path", REG_SZ), RegistryValue("path", REG_SZ)]),
        ],
    )
    def test_validate_rejects(self, bad):
        with pytest.raises(TreeError):
            bad.validate()
