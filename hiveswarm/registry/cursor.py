# SPDX-License-Identifier: LGPL-3.0-or-later
# hiveswarm/registry/cursor.py
from __future__ import annotations


class ReadHead:
    """
    Scan cursor over an immutable .reg text buffer.

    Every parsing step shares one ReadHead, advancing `pos` as it consumes
    tokens. Nothing is copied; slices are only taken for tokens kept.
    """

    __slots__ = ("text", "pos")

    def __init__(self, text: str, pos: int = 0):
        self.text = text
        self.pos = pos

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def remaining(self) -> int:
        return max(0, len(self.text) - self.pos)

    def peek(self, n: int = 1) -> str:
        return self.text[self.pos:self.pos + n]

    def startswith(self, token: str) -> bool:
        return self.text.startswith(token, self.pos)

    def consume(self, token: str) -> bool:
        """Advance past `token` if the unparsed text starts with it."""
        if self.text.startswith(token, self.pos):
            self.pos += len(token)
            return True
        return False

    def advance(self, n: int) -> None:
        self.pos = min(len(self.text), self.pos + n)

    def find(self, token: str, start: int = 0) -> int:
        """Absolute index of `token` at or after pos+start, or -1."""
        return self.text.find(token, self.pos + start)

    def __repr__(self) -> str:
        return f"ReadHead(pos={self.pos}, remaining={self.remaining()}, next={self.peek(16)!r})"
