# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/cli/args/__init__.py
"""
Argument parser modules for the hiveswarm CLI.
"""
from __future__ import annotations

from .builder import HelpFormatter, _build_epilog
from .groups import _add_conversion, _add_format_options, _add_global_config_logging
from .parser import _build_preparser, _load_merged_config, build_parser, parse_args_with_config
from .validators import validate_args

__all__ = [
    # Builder
    "HelpFormatter",
    "_build_epilog",
    # Groups
    "_add_conversion",
    "_add_format_options",
    "_add_global_config_logging",
    # Parser
    "_build_preparser",
    "_load_merged_config",
    "build_parser",
    "parse_args_with_config",
    # Validators
    "validate_args",
]
