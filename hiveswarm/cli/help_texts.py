# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/cli/help_texts.py
from __future__ import annotations

# NOTE:
# Pure help text for the argparse epilog. Keep it copy/paste runnable and
# free of imports.

YAML_EXAMPLE = r"""# hiveswarm configuration example (YAML)
#
# Run:
#   hiveswarm --config convert.yaml
#
# Merge multiple configs (later overrides earlier):
#   hiveswarm --config base.yaml --config overrides.yaml
#
# Every key is an argparse default; anything on the command line wins.
# Keys use the long option names with '-' or '_':
#
from: reg              # hive | reg | reg+ | pol
to: pol
input: ./exports/machine.reg
output: ./out/Registry.pol
root_name: "(HiveRoot)"   # name given to the root of hive/pol input
max_depth: 512
# template_hive: ./templates/empty.hiv   # required with `to: hive`
# print_tree: true
# verbose: 2
# log_file: ./hiveswarm.log
"""

FORMAT_SUMMARY = r"""  hive   binary regf hive (needs python-hivex; writing needs --template-hive)
  reg    .reg export file, reg.exe compatible (REG_SZ, REG_DWORD, hex)
  reg+   .reg export file plus qword:, multi_sz: and expand_sz: renderings
  pol    Group Policy registry file (PReg, version 1)

  Reading `reg` accepts the reg+ renderings too; the choice matters on output.

Exit codes:
  0 success, 1 failure (I/O, hivex), 2 format error or bad usage, 130 interrupted
"""
