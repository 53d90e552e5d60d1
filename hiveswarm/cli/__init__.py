# SPDX-License-Identifier: LGPL-3.0-or-later
# hiveswarm/cli/__init__.py
