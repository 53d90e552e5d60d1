# SPDX-License-Identifier: LGPL-3.0-or-later
# hiveswarm/registry/__init__.py
from .constants import DEFAULT_MAX_DEPTH, DEFAULT_ROOT_NAME
from .hive import hive_to_tree, tree_to_hive
from .model import RegistryKey, RegistryValue
from .polfile import parse_polfile, read_polfile, render_polfile, write_polfile
from .regfile import (
    decode_regfile_bytes,
    encode_regfile_text,
    parse_regfile,
    read_regfile,
    render_regfile,
    write_regfile,
)

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_ROOT_NAME",
    "RegistryKey",
    "RegistryValue",
    # .reg export files
    "parse_regfile",
    "render_regfile",
    "decode_regfile_bytes",
    "encode_regfile_text",
    "read_regfile",
    "write_regfile",
    # .pol policy files
    "parse_polfile",
    "render_polfile",
    "read_polfile",
    "write_polfile",
    # binary hives
    "hive_to_tree",
    "tree_to_hive",
]
