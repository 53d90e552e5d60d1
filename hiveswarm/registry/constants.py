# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/registry/constants.py
"""
Registry value types and the literal tokens of the .reg / .pol formats.
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
# Value type tags (winnt.h)
# ---------------------------------------------------------------------------

REG_NONE = 0
REG_SZ = 1
REG_EXPAND_SZ = 2
REG_BINARY = 3
REG_DWORD = 4
REG_DWORD_BIG_ENDIAN = 5
REG_LINK = 6
REG_MULTI_SZ = 7
REG_RESOURCE_LIST = 8
REG_FULL_RESOURCE_DESCRIPTOR = 9
REG_RESOURCE_REQUIREMENTS_LIST = 10
REG_QWORD = 11

MAX_VALUE_TYPE = 0xFFFFFFFF

# Root key name used when a source format has no name for its top key
DEFAULT_ROOT_NAME = "(HiveRoot)"

# Nesting bound for the recursive parser/renderer (Windows caps key depth at 512)
DEFAULT_MAX_DEPTH = 512

# Stack frames kept free below sys.getrecursionlimit() when capping --max-depth
RECURSION_HEADROOM = 200

# ---------------------------------------------------------------------------
# .reg text format
# ---------------------------------------------------------------------------

NEWLINE = "\r\n"
BOM = "\ufeff"
PREAMBLE = BOM + "Windows Registry Editor Version 5.00" + NEWLINE + NEWLINE

KEY_OPENING = "["
KEY_CLOSING = "]"
KEY_CLOSING_AT_EOL = KEY_CLOSING + NEWLINE
PATH_SEPARATOR = "\\"

DEFAULT_VALUE_NAME = "@"
STRING_DELIMITER = '"'
STRING_ESCAPE = "\\"
VALUE_NAME_SEPARATOR = "="

DWORD_PREFIX = "dword"
QWORD_PREFIX = "qword"
HEX_PREFIX = "hex"
MULTI_SZ_PREFIX = "multi_sz"
EXPAND_SZ_PREFIX = "expand_sz"

HEX_TYPE_OPENING = "("
HEX_TYPE_CLOSING = ")"
TYPE_DATA_SEPARATOR = ":"
HEX_BYTE_SEPARATOR = ","
MULTI_SZ_SEPARATOR = ","

HEX_WRAP_LIMIT = 80
MULTI_SZ_WRAP_LIMIT = 80
HEX_CONTINUATION_INDENT = 2
LEADING_SPACE = " "
ESCAPED_NEWLINE = "\\" + NEWLINE

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# ---------------------------------------------------------------------------
# .pol (PReg) binary format
# ---------------------------------------------------------------------------

POL_SIGNATURE = b"PReg"
POL_VERSION = 1
POL_ENTRY_OPENING = "[".encode("utf-16-le")
POL_ENTRY_SEPARATOR = ";".encode("utf-16-le")
POL_ENTRY_CLOSING = "]".encode("utf-16-le")
