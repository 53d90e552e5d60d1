# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/cli/args/builder.py
from __future__ import annotations

import argparse

from ...core.logger import c
from ..help_texts import FORMAT_SUMMARY, YAML_EXAMPLE


class HelpFormatter(argparse.RawDescriptionHelpFormatter, argparse.ArgumentDefaultsHelpFormatter):
    """Combines raw description formatting with default value display in help."""


def _build_epilog() -> str:
    return (
        c("Formats:\n", "cyan", ["bold"])
        + c(FORMAT_SUMMARY, "cyan")
        + "\n"
        + c("YAML example:\n", "cyan", ["bold"])
        + c(YAML_EXAMPLE, "cyan")
    )
