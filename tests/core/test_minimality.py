"""Exhaustive checks that quote() output is never longer than it has to be."""

from __future__ import annotations

import itertools

import pytest

from minquote import quote
from minquote.core.errors import ShellSyntaxError
from minquote.core.parser import unquote

# Quote characters plus a few bytes with different treatment in each tier
ALPHABET = b"a '\"\\$#"
MAX_TEXT = 5


@pytest.fixture(scope="module")
def shortest():
    """Map every word reachable by a text of up to MAX_TEXT bytes to its shortest text length."""
    best: dict[bytes, int] = {}
    for length in range(1, MAX_TEXT + 1):
        for combo in itertools.product(ALPHABET, repeat=length):
            text = bytes(combo)
            try:
                word = unquote(text)
            except ShellSyntaxError:
                continue
            best.setdefault(word, length)
    return best


def test_no_shorter_text_exists(shortest):
    """Every word some short text denotes gets a quoting exactly that short."""
    for word, length in shortest.items():
        assert len(quote(word)) == length, (word, quote(word), length)


def test_short_words_are_covered(shortest):
    """Each word of up to two bytes whose quoting fits is found by the search."""
    for length in range(0, 3):
        for combo in itertools.product(ALPHABET, repeat=length):
            word = bytes(combo)
            quoted = quote(word)
            if len(quoted) <= MAX_TEXT:
                assert shortest[word] == len(quoted), (word, quoted)
