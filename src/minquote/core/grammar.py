"""
Shell word grammar tables for minquote.

Classifies bytes and prices them under each quoting tier. Nothing here knows
about a whole word; the quoter strings these costs together.
"""

from __future__ import annotations

from enum import Enum, IntEnum

# Cost returned for a byte a tier cannot hold at all
FORBIDDEN = None


class CharClass(Enum):
    """How a byte behaves outside of any quotes."""

    PLAIN_SAFE = "plain"
    META = "meta"
    SINGLE_QUOTE = "single-quote"
    POSITIONAL_UNSAFE = "positional"


class Tier(IntEnum):
    """Quoting strategies, in tie-break preference order (lowest wins)."""

    SINGLE = 0
    DOUBLE = 1
    BACKSLASH = 2
    UNQUOTED = 3

    @property
    def label(self) -> str:
        return self.name.lower()


TIERS = tuple(Tier)

# Bytes the shell acts on when they appear bare
META_BYTES = frozenset(b" \t\n$`\"\\*?[]{};&|<>()!")
SINGLE_QUOTE = ord("'")
# Tilde expansion and comments only trigger at the start of a word
LEADING_UNSAFE_BYTES = frozenset(b"~#")
# bash also expands ~ after = or : in assignment-shaped arguments
TILDE = ord("~")
TILDE_PREFIX_BYTES = frozenset(b"=:")

# Inside double quotes a backslash only escapes these (newline is removed)
DOUBLE_ESCAPED_BYTES = frozenset(b'$`"\\')
DOUBLE_BACKSLASH_SPECIAL = DOUBLE_ESCAPED_BYTES | {ord("\n")}

NEWLINE = ord("\n")
BACKSLASH = ord("\\")

OPEN_COST = {Tier.UNQUOTED: 0, Tier.BACKSLASH: 0, Tier.DOUBLE: 1, Tier.SINGLE: 1}
CLOSE_COST = OPEN_COST
QUOTE_CHAR = {Tier.DOUBLE: b'"', Tier.SINGLE: b"'"}


def classify(byte: int, position: int, prev: int | None = None) -> CharClass:
    """Classify a byte at the given index of the word.

    prev is the byte before it in the word, if any.
    """
    if byte == SINGLE_QUOTE:
        return CharClass.SINGLE_QUOTE
    if byte in META_BYTES:
        return CharClass.META
    if position == 0 and byte in LEADING_UNSAFE_BYTES:
        return CharClass.POSITIONAL_UNSAFE
    if byte == TILDE and prev in TILDE_PREFIX_BYTES:
        return CharClass.POSITIONAL_UNSAFE
    return CharClass.PLAIN_SAFE


def is_bare_safe(byte: int, position: int, prev: int | None = None) -> bool:
    """True if the byte means itself when written with no quoting."""
    return classify(byte, position, prev) is CharClass.PLAIN_SAFE


def cost_unquoted(byte: int, position: int, prev: int | None = None) -> int | None:
    return 1 if is_bare_safe(byte, position, prev) else FORBIDDEN


def cost_backslash(byte: int, position: int, prev: int | None = None) -> int | None:
    # \<newline> is a line continuation, not a newline
    if byte == NEWLINE:
        return FORBIDDEN
    return 1 if is_bare_safe(byte, position, prev) else 2


def cost_double(byte: int) -> int:
    return 2 if byte in DOUBLE_ESCAPED_BYTES else 1


def double_pair_cost(byte: int, next_byte: int) -> int | None:
    """Cost of a backslash written bare inside double quotes.

    A backslash before anything other than $ ` " \\ or newline is kept
    literally, so the pair needs no extra escape.
    """
    if byte != BACKSLASH or next_byte in DOUBLE_BACKSLASH_SPECIAL:
        return FORBIDDEN
    return 2


def cost_single(byte: int) -> int | None:
    return FORBIDDEN if byte == SINGLE_QUOTE else 1


def cost(tier: Tier, byte: int, position: int, prev: int | None = None) -> int | None:
    """Emitted width of one byte under a tier, or FORBIDDEN."""
    if tier is Tier.UNQUOTED:
        return cost_unquoted(byte, position, prev)
    if tier is Tier.BACKSLASH:
        return cost_backslash(byte, position, prev)
    if tier is Tier.DOUBLE:
        return cost_double(byte)
    return cost_single(byte)


def open_cost(tier: Tier) -> int:
    return OPEN_COST[tier]


def close_cost(tier: Tier) -> int:
    return CLOSE_COST[tier]
