"""Bash quoting utilities for command reconstruction."""

from __future__ import annotations

from minquote.core.quoter import quote


def bash_quote(s: str) -> str:
    """Quote a string for safe use in bash.

    Returns the shortest text bash reads back as s, preferring single quotes
    when lengths tie. Returns '' for empty strings.
    """
    return quote(s)


def bash_join(tokens: list[str]) -> str:
    """Join tokens into a bash command string with proper quoting."""
    return " ".join(bash_quote(t) for t in tokens)
