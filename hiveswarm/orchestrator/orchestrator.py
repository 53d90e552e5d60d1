# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/orchestrator/orchestrator.py

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.tree import Tree

from ..core.logger import Log
from ..core.utils import U
from ..registry.constants import (
    REG_BINARY,
    REG_DWORD,
    REG_DWORD_BIG_ENDIAN,
    REG_EXPAND_SZ,
    REG_FULL_RESOURCE_DESCRIPTOR,
    REG_LINK,
    REG_MULTI_SZ,
    REG_NONE,
    REG_QWORD,
    REG_RESOURCE_LIST,
    REG_RESOURCE_REQUIREMENTS_LIST,
    REG_SZ,
)
from ..registry.hive import hive_to_tree, tree_to_hive
from ..registry.model import RegistryKey
from ..registry.polfile import read_polfile, write_polfile
from ..registry.regfile import read_regfile, write_regfile
from .formats import Format

TYPE_NAMES = {
    REG_NONE: "REG_NONE",
    REG_SZ: "REG_SZ",
    REG_EXPAND_SZ: "REG_EXPAND_SZ",
    REG_BINARY: "REG_BINARY",
    REG_DWORD: "REG_DWORD",
    REG_DWORD_BIG_ENDIAN: "REG_DWORD_BIG_ENDIAN",
    REG_LINK: "REG_LINK",
    REG_MULTI_SZ: "REG_MULTI_SZ",
    REG_RESOURCE_LIST: "REG_RESOURCE_LIST",
    REG_FULL_RESOURCE_DESCRIPTOR: "REG_FULL_RESOURCE_DESCRIPTOR",
    REG_RESOURCE_REQUIREMENTS_LIST: "REG_RESOURCE_REQUIREMENTS_LIST",
    REG_QWORD: "REG_QWORD",
}


def type_name(t: int) -> str:
    return TYPE_NAMES.get(t, f"0x{t:x}")


def build_rich_tree(key: RegistryKey) -> Tree:
    """Keys as branches, values as '@' or name with type and size."""
    top = Tree(f"[bold]{key.name or '(unnamed)'}[/bold]")
    stack = [(key, top)]
    while stack:
        src, node = stack.pop()
        for value in src.values:
            label = value.name if value.name else "@"
            node.add(f"[cyan]{label}[/cyan] {type_name(value.type)} ({len(value.data)} bytes)", highlight=False)
        for child in src.subkeys:
            stack.append((child, node.add(f"[bold]{child.name}[/bold]", highlight=False)))
    return top


class Orchestrator:
    """
    One conversion: read the input into a key tree, check it, write it out.
    """

    def __init__(self, logger: logging.Logger, args: argparse.Namespace):
        self.logger = logger
        self.args = args
        self.src = Format.parse(args.from_format)
        self.dst = Format.parse(args.to_format)
        self.input = Path(args.input)
        self.output = Path(args.output)

        Log.trace(
            self.logger,
            "🧠 Orchestrator init: %s %s -> %s %s",
            self.src.value,
            self.input,
            self.dst.value,
            self.output,
        )

    def read(self) -> RegistryKey:
        a = self.args
        if self.src is Format.HIVE:
            return hive_to_tree(self.input, a.root_name, max_depth=a.max_depth, logger=self.logger)
        if self.src is Format.POL:
            return read_polfile(self.input, root_name=a.root_name, logger=self.logger)
        # Reading accepts the extension renderings for both reg flavours.
        return read_regfile(self.input, extensions=True, max_depth=a.max_depth, logger=self.logger)

    def write(self, tree: RegistryKey) -> int:
        a = self.args
        if self.dst is Format.HIVE:
            return tree_to_hive(tree, self.output, a.template_hive, logger=self.logger)
        if self.dst is Format.POL:
            return write_polfile(tree, self.output, logger=self.logger)
        return write_regfile(
            tree,
            self.output,
            extensions=(self.dst is Format.REG_EXT),
            max_depth=a.max_depth,
            logger=self.logger,
        )

    def run(self) -> int:
        U.banner(self.logger, f"hiveswarm: {self.src.value} -> {self.dst.value}")
        Log.step(self.logger, f"Reading {self.src.value}: {self.input}")
        tree = self.read()
        tree.validate()

        keys, values = tree.count()
        Log.bind(self.logger, keys=keys, values=values).info("📦 Loaded tree %r", tree.name)

        if getattr(self.args, "print_tree", False):
            Console().print(build_rich_tree(tree))

        Log.step(self.logger, f"Writing {self.dst.value}: {self.output}")
        written = self.write(tree)
        Log.ok(self.logger, f"Wrote {self.output} ({U.human_bytes(written)})")
        return 0
