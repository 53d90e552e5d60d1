# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/config/config_loader.py
"""
YAML/JSON config files for the CLI.

Files are merged in command-line order (later overrides earlier, nested
mappings merged key by key) and the result is applied as argparse defaults,
so anything given on the command line still wins.
"""
from __future__ import annotations

import argparse
import glob
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml

from ..core.exceptions import EXIT_USAGE
from ..core.logger import Log
from ..core.utils import U

CONFIG_SUFFIXES = (".yaml", ".yml", ".json")

# Config spellings that differ from the argparse dest.
KEY_ALIASES = {
    "from": "from_format",
    "to": "to_format",
    "template": "template_hive",
}

# Never taken from a config file.
RESERVED_KEYS = frozenset({"config", "dump_config", "dump_args", "help", "version"})


class Config:
    @staticmethod
    def expand_configs(logger: logging.Logger, cfgs: Sequence[str]) -> List[Path]:
        """
        Resolve --config arguments: ~ and $VARS are expanded, a directory
        contributes its *.yaml/*.yml/*.json files (sorted), a glob pattern its
        sorted matches.
        """
        out: List[Path] = []
        for raw in cfgs:
            s = os.path.expandvars(os.path.expanduser(str(raw)))
            p = Path(s)
            if p.is_dir():
                found = sorted(x for x in p.iterdir() if x.is_file() and x.suffix.lower() in CONFIG_SUFFIXES)
                logger.debug("Config dir %s: %d file(s)", p, len(found))
                out.extend(found)
            elif glob.has_magic(s):
                matches = sorted(Path(m) for m in glob.glob(s))
                if not matches:
                    U.die(logger, f"Config pattern matched nothing: {s}", EXIT_USAGE)
                out.extend(matches)
            elif p.is_file():
                out.append(p)
            else:
                U.die(logger, f"Config file not found: {s}", EXIT_USAGE)
        return out

    @staticmethod
    def load_one(logger: logging.Logger, path: Path) -> Dict[str, Any]:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            U.die(logger, f"Cannot read config {path}: {e}", EXIT_USAGE)

        try:
            if Path(path).suffix.lower() == ".json":
                data = json.loads(text) if text.strip() else {}
            else:
                data = yaml.safe_load(text)
        except (yaml.YAMLError, ValueError) as e:
            U.die(logger, f"Invalid config {path}: {e}", EXIT_USAGE)

        if data is None:
            return {}
        if not isinstance(data, dict):
            U.die(logger, f"Config {path} must contain a mapping at top level, got {type(data).__name__}", EXIT_USAGE)

        logger.debug("Loaded config %s (%d key(s))", path, len(data))
        return Config.normalize(data)

    @staticmethod
    def normalize(conf: Dict[str, Any]) -> Dict[str, Any]:
        """Top-level keys: '-' becomes '_' and aliases map onto argparse dests."""
        out: Dict[str, Any] = {}
        for k, v in conf.items():
            key = str(k).strip().replace("-", "_")
            out[KEY_ALIASES.get(key, key)] = v
        return out

    @staticmethod
    def merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        out = dict(base)
        for k, v in override.items():
            if isinstance(v, dict) and isinstance(out.get(k), dict):
                out[k] = Config.merge(out[k], v)
            else:
                out[k] = v
        return out

    @staticmethod
    def load_many(logger: logging.Logger, paths: Sequence[Path]) -> Dict[str, Any]:
        conf: Dict[str, Any] = {}
        for p in paths:
            conf = Config.merge(conf, Config.load_one(logger, p))
        return conf

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        """Known keys become parser defaults; unknown keys are reported and ignored."""
        dests = {a.dest for a in parser._actions if a.dest != argparse.SUPPRESS}
        defaults: Dict[str, Any] = {}
        for k, v in conf.items():
            if k in RESERVED_KEYS:
                Log.warn(logger, f"Config key {k!r} is command-line only; ignored")
                continue
            if k not in dests:
                Log.warn(logger, f"Unknown config key {k!r} ignored")
                continue
            defaults[k] = v
        if defaults:
            logger.debug("Config defaults: %s", ", ".join(sorted(defaults)))
            parser.set_defaults(**defaults)
