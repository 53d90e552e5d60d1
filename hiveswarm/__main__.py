# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/__main__.py
from __future__ import annotations

import sys
import traceback
from typing import Optional, Sequence

from .cli.args.parser import parse_args_with_config
from .core.exceptions import (
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    Fatal,
    HiveswarmError,
    format_exception_for_cli,
    wrap_fatal,
)
from .core.logger import Log
from .orchestrator.orchestrator import Orchestrator


def _print_stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def _safe_log(logger, level: str, msg: str) -> None:
    """
    Log through `logger` when there is one, stderr otherwise.
    """
    if logger is None:
        _print_stderr(msg)
        return

    fn = getattr(logger, level, None)
    if callable(fn):
        fn(msg)
    else:
        _print_stderr(msg)


def run(argv: Optional[Sequence[str]] = None) -> int:
    logger: Optional[object] = None

    # Phase 1: parse (Fatal can happen here, already logged by U.die)
    try:
        args, _conf, logger = parse_args_with_config(argv)
    except Fatal as e:
        if logger is None:
            _print_stderr(f"💥 ERROR    {e}")
        return e.code
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        return EXIT_INTERRUPTED

    verbose = int(getattr(args, "verbose", 0) or 0)

    # Phase 2: convert
    try:
        return Orchestrator(logger, args).run()
    except HiveswarmError as e:
        Log.fail(logger, format_exception_for_cli(e, verbose=max(1, verbose)))
        return e.code
    except OSError as e:
        err = wrap_fatal(f"{type(e).__name__}: {e}", e, path=getattr(e, "filename", None))
        Log.fail(logger, format_exception_for_cli(err, verbose=verbose))
        return err.code
    except KeyboardInterrupt:
        Log.warn(logger, "Interrupted by user (Ctrl+C).")
        return EXIT_INTERRUPTED
    except Exception as e:
        # Unexpected exceptions should not fail silently.
        _safe_log(logger, "error", f"💥 UNHANDLED {type(e).__name__}: {e}")
        _safe_log(logger, "debug", traceback.format_exc())
        return EXIT_FAILURE


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
