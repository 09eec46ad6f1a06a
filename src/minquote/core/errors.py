"""Exceptions raised by minquote."""

from __future__ import annotations


class MinquoteError(Exception):
    """Base class for minquote errors."""


class UnrepresentableByte(MinquoteError, ValueError):
    """The word holds a byte no shell argument can carry (NUL)."""

    def __init__(self, word: bytes, offset: int):
        self.word = word
        self.offset = offset
        super().__init__(f"NUL byte at offset {offset} cannot appear in a shell word")


class QuotingInvariantError(MinquoteError, AssertionError):
    """A rendering did not parse back to its input.

    This is a defect in the grammar tables, never a user error.
    """

    def __init__(self, word: bytes, rendered: bytes, parsed: bytes | None, reason: str):
        self.word = word
        self.rendered = rendered
        self.parsed = parsed
        self.reason = reason
        super().__init__(f"quoting {word!r} produced {rendered!r}: {reason}")


class ShellSyntaxError(MinquoteError, ValueError):
    """Text is not a single literal shell word."""

    def __init__(self, message: str, offset: int | None = None):
        self.message = message
        self.offset = offset
        if offset is not None:
            message = f"{message} at offset {offset}"
        super().__init__(message)
