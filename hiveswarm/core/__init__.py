# SPDX-License-Identifier: LGPL-3.0-or-later
# hiveswarm/core/__init__.py
