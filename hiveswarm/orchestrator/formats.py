# SPDX-License-Identifier: LGPL-3.0-or-later
# hiveswarm/orchestrator/formats.py
from __future__ import annotations

from enum import Enum


class Format(str, Enum):
    HIVE = "hive"
    REG = "reg"
    REG_EXT = "reg+"
    POL = "pol"

    @classmethod
    def parse(cls, s: object) -> "Format":
        if isinstance(s, cls):
            return s
        return cls(str(s).strip().lower())
