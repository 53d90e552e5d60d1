# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/core/utils.py
from __future__ import annotations

import json
import logging
from typing import Any, NoReturn, Optional

from .exceptions import Fatal


class U:
    @staticmethod
    def die(logger: logging.Logger, msg: str, code: int = 1) -> NoReturn:
        logger.error(msg)
        raise Fatal(code, msg)

    @staticmethod
    def json_dump(obj: Any) -> str:
        try:
            return json.dumps(obj, indent=2, sort_keys=True, default=str)
        except (TypeError, ValueError):
            return repr(obj)

    @staticmethod
    def human_bytes(n: Optional[int]) -> str:
        if n is None:
            return "unknown"
        x = float(n)
        for unit in ["B", "KiB", "MiB", "GiB", "TiB", "PiB"]:
            if x < 1024 or unit == "PiB":
                return f"{x:.2f} {unit}" if unit != "B" else f"{int(x)} {unit}"
            x /= 1024
        return f"{n} B"

    @staticmethod
    def banner(logger: logging.Logger, title: str) -> None:
        line = "─" * max(10, len(title) + 2)
        logger.info(line)
        logger.info(f" {title}")
        logger.info(line)
