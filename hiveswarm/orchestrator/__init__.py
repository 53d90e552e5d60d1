# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/orchestrator/__init__.py
"""
Conversion pipeline: one input file, one output file, any pair of formats.
"""

from .formats import Format
from .orchestrator import Orchestrator, build_rich_tree

__all__ = [
    "Format",
    "Orchestrator",
    "build_rich_tree",
]
