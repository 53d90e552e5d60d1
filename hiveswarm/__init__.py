# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/__init__.py
"""
hiveswarm - Windows registry format converter

Converts registry trees between binary hives, .reg export files (with an
optional extension set for qword, multi_sz and expand_sz values) and Group
Policy .pol files.

Usage as a library:

    from hiveswarm import read_regfile, write_polfile

    tree = read_regfile("machine.reg")
    write_polfile(tree, "Registry.pol")
"""

__version__ = "0.1.0"

from .core.exceptions import Fatal, HiveswarmError, PolFileFormatError, RegFileFormatError, TreeError
from .registry import (
    RegistryKey,
    RegistryValue,
    hive_to_tree,
    parse_polfile,
    parse_regfile,
    read_polfile,
    read_regfile,
    render_polfile,
    render_regfile,
    tree_to_hive,
    write_polfile,
    write_regfile,
)

__all__ = [
    # Version
    "__version__",

    # Tree model
    "RegistryKey",
    "RegistryValue",

    # Codecs
    "parse_regfile",
    "render_regfile",
    "read_regfile",
    "write_regfile",
    "parse_polfile",
    "render_polfile",
    "read_polfile",
    "write_polfile",
    "hive_to_tree",
    "tree_to_hive",

    # Errors
    "HiveswarmError",
    "Fatal",
    "RegFileFormatError",
    "PolFileFormatError",
    "TreeError",
]
