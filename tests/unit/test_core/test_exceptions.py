# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the error taxonomy and CLI formatting."""
from __future__ import annotations

import pytest

from hiveswarm.core.exceptions import (
    EXIT_FORMAT_ERROR,
    Fatal,
    HiveswarmError,
    PolFileFormatError,
    RegFileFormatError,
    TreeError,
    format_exception_for_cli,
    wrap_fatal,
    wrap_polfile,
    wrap_regfile,
    wrap_tree,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    """Test exception class hierarchy and basic functionality."""

    def test_base_exception_creation(self):
        err = HiveswarmError(code=1, msg="Test error")

        assert err.code == 1
        assert err.msg == "Test error"
        assert err.cause is None
        assert err.context == {}

    def test_fatal_positional(self):
        err = Fatal(2, "Fatal error")

        assert isinstance(err, HiveswarmError)
        assert err.code == 2
        assert str(err) == "Fatal error"

    def test_format_errors_exit_with_2(self):
        assert isinstance(wrap_regfile("x"), RegFileFormatError)
        assert isinstance(wrap_polfile("x"), PolFileFormatError)
        assert isinstance(wrap_tree("x"), TreeError)
        for err in (wrap_regfile("x"), wrap_polfile("x"), wrap_tree("x")):
            assert err.code == EXIT_FORMAT_ERROR

    def test_exception_with_context(self):
        err = HiveswarmError(code=1, msg="Error").with_context(key="Root\\A", offset=12)

        assert err.context["key"] == "Root\\A"
        assert err.context["offset"] == 12

    def test_wrap_keeps_cause_and_context(self):
        cause = ValueError("Original error")
        err = wrap_fatal("Wrapper", cause, path="/x")

        assert err.cause is cause
        assert err.context == {"path": "/x"}
        assert err.code == 1

    def test_message_is_single_line(self):
        assert HiveswarmError(msg="a\r\nb\n  c").msg == "a b c"


@pytest.mark.unit
class TestExceptionExitCodes:
    def test_valid_exit_codes(self):
        for code in [0, 1, 2, 127, 255]:
            assert HiveswarmError(code=code, msg="Test").code == code

    def test_out_of_range_codes_are_clamped(self):
        assert HiveswarmError(code=256, msg="Test").code == 255
        assert HiveswarmError(code=-1, msg="Test").code == 1
        assert HiveswarmError(code="nope", msg="Test").code == 1


@pytest.mark.unit
class TestCliFormatting:
    def test_verbosity_levels(self):
        err = wrap_regfile("bad line", ValueError("boom"), key="Root", offset=3)

        assert format_exception_for_cli(err) == "bad line"
        assert format_exception_for_cli(err, verbose=1) == "bad line [key='Root', offset=3]"
        assert "cause: ValueError: boom" in format_exception_for_cli(err, verbose=2)

    def test_foreign_exception(self):
        assert format_exception_for_cli(OSError("disk full")) == "disk full"
        assert format_exception_for_cli(KeyError(), verbose=2) == "KeyError: "

    def test_to_dict(self):
        d = wrap_tree("dup", key="R").to_dict()
        assert d == {"type": "TreeError", "code": 2, "message": "dup", "context": {"key": "R"}}
