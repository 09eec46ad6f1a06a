"""
Reference shell word parsing for minquote.

Performs quote removal on a single word so renderings can be checked against
an interpreter that shares none of the quoter's cost logic. Anything the
shell would expand, split or glob is rejected rather than interpreted.
"""

from __future__ import annotations

from collections.abc import Callable

import bashlex

from minquote.core.errors import ShellSyntaxError
from minquote.core.grammar import DOUBLE_ESCAPED_BYTES, is_bare_safe

SINGLE_QUOTE = ord("'")
DOUBLE_QUOTE = ord('"')
BACKSLASH = ord("\\")
NEWLINE = ord("\n")
EXPANSION_BYTES = frozenset(b"$`")


def unquote(text: bytes) -> bytes:
    """Return the literal value of one shell word.

    Raises ShellSyntaxError if the text is empty, unterminated, or contains
    anything the shell would treat as more than a literal.
    """
    if not text:
        raise ShellSyntaxError("empty text is not a word")

    out = bytearray()
    quoted = False
    i = 0
    n = len(text)
    while i < n:
        b = text[i]
        if b == 0:
            raise ShellSyntaxError("NUL byte", i)
        if b == SINGLE_QUOTE:
            end = text.find(b"'", i + 1)
            if end < 0:
                raise ShellSyntaxError("unterminated single quote", i)
            out += text[i + 1 : end]
            quoted = True
            i = end + 1
        elif b == DOUBLE_QUOTE:
            i = _unquote_double(text, i + 1, out)
            quoted = True
        elif b == BACKSLASH:
            if i + 1 >= n:
                raise ShellSyntaxError("trailing backslash", i)
            # \<newline> is a line continuation
            if text[i + 1] != NEWLINE:
                out.append(text[i + 1])
            i += 2
        elif is_bare_safe(b, i, text[i - 1] if i else None):
            out.append(b)
            i += 1
        else:
            raise ShellSyntaxError(f"unquoted {chr(b)!r} is not literal", i)

    if not out and not quoted:
        raise ShellSyntaxError("text holds no word")
    return bytes(out)


def _unquote_double(text: bytes, i: int, out: bytearray) -> int:
    """Consume a double-quoted run starting after the opening quote."""
    start = i - 1
    n = len(text)
    while i < n:
        b = text[i]
        if b == DOUBLE_QUOTE:
            return i + 1
        if b == 0:
            raise ShellSyntaxError("NUL byte", i)
        if b == BACKSLASH and i + 1 < n:
            nxt = text[i + 1]
            if nxt == NEWLINE:
                i += 2
                continue
            if nxt in DOUBLE_ESCAPED_BYTES:
                out.append(nxt)
                i += 2
                continue
        elif b in EXPANSION_BYTES:
            raise ShellSyntaxError(f"{chr(b)!r} inside double quotes expands", i)
        out.append(b)
        i += 1
    raise ShellSyntaxError("unterminated double quote", start)


def unquote_bashlex(text: bytes) -> bytes:
    """Return the literal value of one shell word, tokenized by bashlex.

    bashlex decides the word boundaries: the text must parse as exactly one
    word spanning all of it. Its own quote removal mishandles backslashes
    next to quotes, so the value comes from running unquote() over the span.
    Bytes are mapped through latin-1 so offsets match the input.
    """
    if not text:
        raise ShellSyntaxError("empty text is not a word")
    if b"\0" in text:
        raise ShellSyntaxError("NUL byte", text.index(b"\0"))

    source = ": " + text.decode("latin-1")
    try:
        nodes = bashlex.parse(source)
    except bashlex.errors.ParsingError as e:
        raise ShellSyntaxError(f"bashlex: {e}") from None

    if len(nodes) != 1 or nodes[0].kind != "command":
        raise ShellSyntaxError("text is not a simple word")
    parts = nodes[0].parts
    if len(parts) != 2 or parts[1].kind != "word":
        raise ShellSyntaxError("text is not exactly one word")
    start, end = parts[1].pos
    if (start, end) != (2, len(source)):
        raise ShellSyntaxError(f"word spans {start - 2}:{end - 2}, not the whole text")
    return unquote(source[start:end].encode("latin-1"))


CHECKERS: dict[str, Callable[[bytes], bytes]] = {
    "builtin": unquote,
    "bashlex": unquote_bashlex,
}


def get_checker(name: str) -> Callable[[bytes], bytes]:
    """Look up a reference parser by name."""
    try:
        return CHECKERS[name]
    except KeyError:
        raise ValueError(
            f"unknown checker '{name}', expected one of: {', '.join(CHECKERS)}"
        ) from None
