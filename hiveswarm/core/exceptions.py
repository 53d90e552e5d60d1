# SPDX-License-Identifier: LGPL-3.0-or-later
# hiveswarm/core/exceptions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Exit codes honored by the CLI
EXIT_FAILURE = 1
EXIT_FORMAT_ERROR = 2
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def _safe_int(x: Any, default: int = 1) -> int:
    try:
        return int(x)
    except (TypeError, ValueError):
        return default


def _clamp_exit_code(code: int) -> int:
    if code < 0:
        return 1
    if code > 255:
        return 255
    return code


def _one_line(s: str, limit: int = 600) -> str:
    s = (s or "").strip().replace("\r", " ").replace("\n", " ")
    s = " ".join(s.split())
    return s if len(s) <= limit else (s[: limit - 3] + "...")


def _format_context_compact(ctx: Dict[str, Any]) -> str:
    # Stable order, single-line.
    return ", ".join(f"{k}={ctx.get(k)!r}" for k in sorted(ctx.keys()))


@dataclass(eq=False)
class HiveswarmError(Exception):
    """
    Base project error with:
      - stable fields for reporting/JSON
      - readable __str__ (what users see)
      - context naming the key/value/offset involved
    """
    code: int = EXIT_FAILURE
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.code = _clamp_exit_code(_safe_int(self.code, default=EXIT_FAILURE))
        self.msg = _one_line(self.msg) or self.__class__.__name__
        if self.context is None:
            self.context = {}
        super().__init__(self.msg)
        self.args = (self.msg,)

    def with_context(self, **ctx: Any) -> "HiveswarmError":
        if self.context is None:
            self.context = {}
        self.context.update(ctx)
        return self

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        """
        Human-friendly message for CLI output/logs.
        """
        parts = [self.msg or self.__class__.__name__]

        if include_context and self.context:
            parts.append(f"[{_one_line(_format_context_compact(self.context))}]")

        if include_cause and self.cause is not None:
            parts.append(f"(cause: {type(self.cause).__name__}: {_one_line(str(self.cause))})")

        return " ".join(parts)

    def __str__(self) -> str:
        return self.user_message(include_context=False, include_cause=False)

    def to_dict(self, *, include_cause: bool = False) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "code": self.code,
            "message": self.msg,
            "context": self.context or {},
        }
        if include_cause and self.cause is not None:
            d["cause"] = {"type": type(self.cause).__name__, "message": _one_line(str(self.cause))}
        return d


class Fatal(HiveswarmError):
    """
    User-facing fatal error (exit code is honored by the top-level main()).
    """
    pass


class RegFileFormatError(HiveswarmError):
    """
    Structural error in .reg text: missing preamble, bracket, '=', terminator,
    unmatched quote, bad numeric literal, leftover input, wrong root count.
    """
    pass


class PolFileFormatError(HiveswarmError):
    """
    Structural error in a .pol (PReg) buffer.
    """
    pass


class TreeError(HiveswarmError):
    """
    In-memory key tree breaks an invariant (separator in a name, duplicated
    path or value name) and cannot be serialized faithfully.
    """
    pass


def wrap_fatal(msg: str, exc: Optional[BaseException] = None, code: int = EXIT_FAILURE, **context: Any) -> Fatal:
    return Fatal(code=code, msg=msg, cause=exc, context=context or None)


def wrap_regfile(msg: str, exc: Optional[BaseException] = None, **context: Any) -> RegFileFormatError:
    return RegFileFormatError(code=EXIT_FORMAT_ERROR, msg=msg, cause=exc, context=context or None)


def wrap_polfile(msg: str, exc: Optional[BaseException] = None, **context: Any) -> PolFileFormatError:
    return PolFileFormatError(code=EXIT_FORMAT_ERROR, msg=msg, cause=exc, context=context or None)


def wrap_tree(msg: str, **context: Any) -> TreeError:
    return TreeError(code=EXIT_FORMAT_ERROR, msg=msg, context=context or None)


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """
    One-liner output for CLI.

    verbose=0: just message
    verbose=1: message + compact context (if any)
    verbose>=2: message + context + cause
    """
    if isinstance(e, HiveswarmError):
        return e.user_message(
            include_context=(verbose >= 1),
            include_cause=(verbose >= 2),
        )

    if verbose >= 2:
        return f"{type(e).__name__}: {_one_line(str(e))}"
    return _one_line(str(e)) or type(e).__name__
