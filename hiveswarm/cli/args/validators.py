# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/cli/args/validators.py
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, Dict, Optional

from ...core.exceptions import EXIT_USAGE
from ...core.utils import U
from ...orchestrator.formats import Format
from ...registry.constants import RECURSION_HEADROOM


def _require(v: Any) -> bool:
    """True if v is meaningfully present (treats empty/whitespace-only strings as missing)."""
    if v is None:
        return False
    if isinstance(v, str):
        return v.strip() != ""
    return True


def _validate_format(logger: logging.Logger, value: Any, flag: str) -> Format:
    if not _require(value):
        U.die(logger, f"Missing {flag} (or `{flag.lstrip('-')}:` in config). Choices: {', '.join(f.value for f in Format)}", EXIT_USAGE)
    try:
        return Format.parse(value)
    except ValueError:
        U.die(logger, f"Unknown {flag} format {value!r}. Choices: {', '.join(f.value for f in Format)}", EXIT_USAGE)


def _validate_paths(logger: logging.Logger, args: argparse.Namespace) -> None:
    if not _require(args.input):
        U.die(logger, "Missing input file (positional or `input:` in config).", EXIT_USAGE)
    if not _require(args.output):
        U.die(logger, "Missing output file (positional or `output:` in config).", EXIT_USAGE)
    if not os.path.isfile(str(args.input)):
        U.die(logger, f"Input file not found: {args.input}", EXIT_USAGE)
    if os.path.abspath(str(args.input)) == os.path.abspath(str(args.output)):
        U.die(logger, f"Input and output are the same file: {args.input}", EXIT_USAGE)


def _validate_template(logger: logging.Logger, template: Optional[str]) -> None:
    if not _require(template):
        U.die(logger, "--to hive requires --template-hive (an empty hive to fill).", EXIT_USAGE)
    if not os.path.isfile(str(template)):
        U.die(logger, f"--template-hive file not found: {template}", EXIT_USAGE)


def validate_args(args: argparse.Namespace, conf: Dict[str, Any], logger: logging.Logger) -> None:
    """
    Check the merged (config + CLI) arguments and normalize the format
    fields to Format members. No side effects on the filesystem.
    """
    args.from_format = _validate_format(logger, args.from_format, "--from")
    args.to_format = _validate_format(logger, args.to_format, "--to")
    _validate_paths(logger, args)

    try:
        args.max_depth = int(args.max_depth)
    except (TypeError, ValueError):
        U.die(logger, f"--max-depth must be an integer, got {args.max_depth!r}", EXIT_USAGE)
    if args.max_depth < 0:
        U.die(logger, f"--max-depth must not be negative, got {args.max_depth}", EXIT_USAGE)
    ceiling = sys.getrecursionlimit() - RECURSION_HEADROOM
    if args.max_depth > ceiling:
        U.die(logger, f"--max-depth {args.max_depth} is above the supported maximum of {ceiling}", EXIT_USAGE)

    if not _require(args.root_name):
        U.die(logger, "--root-name must not be empty", EXIT_USAGE)

    if args.to_format is Format.HIVE:
        _validate_template(logger, args.template_hive)
    elif _require(args.template_hive):
        logger.debug("--template-hive ignored for --to %s", args.to_format.value)
