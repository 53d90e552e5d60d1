# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/cli/args/groups.py
from __future__ import annotations

import argparse

from ...orchestrator.formats import Format
from ...registry.constants import DEFAULT_MAX_DEPTH, DEFAULT_ROOT_NAME


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from ... import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file (repeatable; later overrides earlier).",
    )
    p.add_argument("--dump-config", action="store_true", help="Print merged normalized config and exit.")
    p.add_argument("--dump-args", action="store_true", help="Print final parsed args and exit.")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -v, -vv (debug), -vvv (trace)")
    p.add_argument("-q", "--quiet", action="count", default=0, help="Less output: -q (warnings), -qq (errors)")
    p.add_argument("--log-file", dest="log_file", default=None, help="Write logs to file.")
    p.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit logs as JSON lines.")


def _add_conversion(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # What to convert (positionals may come from config)
    # ------------------------------------------------------------------
    choices = [f.value for f in Format]
    p.add_argument("--from", dest="from_format", default=None, choices=choices, help="Input format.")
    p.add_argument("--to", dest="to_format", default=None, choices=choices, help="Output format.")
    p.add_argument("input", nargs="?", default=None, help="Input file.")
    p.add_argument("output", nargs="?", default=None, help="Output file (replaced atomically).")


def _add_format_options(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Format knobs
    # ------------------------------------------------------------------
    p.add_argument(
        "--root-name",
        dest="root_name",
        default=DEFAULT_ROOT_NAME,
        help="Name given to the root key of hive and pol input (the .reg root path).",
    )
    p.add_argument(
        "--template-hive",
        dest="template_hive",
        default=None,
        help="Empty hive copied and filled when writing --to hive.",
    )
    p.add_argument(
        "--max-depth",
        dest="max_depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="Maximum key nesting accepted when reading or writing.",
    )
    p.add_argument(
        "--print-tree",
        dest="print_tree",
        action="store_true",
        help="Print the converted key tree to stdout.",
    )
