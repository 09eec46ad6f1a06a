"""
Optimal shell quoting for minquote.

Finds the shortest text a POSIX shell reads back as exactly the given word.
The search is a single left-to-right pass over (position, tier) states; when
several texts share the minimal length a secondary key picks the one people
find easiest to read: single quotes over double quotes over backslashes, and
one quoted span over the whole word over a partial one.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import NamedTuple

from minquote.core.config import log_event
from minquote.core.errors import QuotingInvariantError, ShellSyntaxError, UnrepresentableByte
from minquote.core.grammar import (
    BACKSLASH,
    FORBIDDEN,
    QUOTE_CHAR,
    TIERS,
    Tier,
    close_cost,
    cost,
    double_pair_cost,
    is_bare_safe,
    open_cost,
)
from minquote.core.parser import unquote

# Back-pointer layers
_ARRIVED = "arrived"  # last byte consumed, segment still open
_OPENED = "opened"  # ready to consume the next byte in this tier


@dataclass(frozen=True)
class Segment:
    """A run of the input word written in one tier."""

    tier: Tier
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


class TieBreak(NamedTuple):
    """Secondary ranking among encodings of equal length."""

    single_segments: int
    double_segments: int
    asymmetry: int
    segments: int

    def key(self) -> tuple[int, int, int, int]:
        # More quoted segments rank first, so those counts sort descending
        return (-self.single_segments, -self.double_segments, self.asymmetry, self.segments)


@dataclass(frozen=True)
class Encoding:
    """The chosen quoting of one word."""

    word: bytes
    segments: tuple[Segment, ...]
    rendered: bytes
    tie_break: TieBreak

    @property
    def length(self) -> int:
        return len(self.rendered)

    def describe(self) -> list[str]:
        """One line per segment: tier, input span and rendered text."""
        lines = []
        for seg in self.segments:
            text = render(self.word, (seg,))
            lines.append(f"{seg.tier.label:<9} {seg.start}:{seg.end} {text.decode('latin-1')}")
        return lines


@dataclass
class _Cell:
    key: tuple[int, ...]
    prev: tuple[str, int, Tier] | None


def _add(key: tuple[int, ...], delta: tuple[int, ...]) -> tuple[int, ...]:
    return tuple(a + b for a, b in zip(key, delta))


def _open_delta(tier: Tier) -> tuple[int, int, int]:
    return (
        open_cost(tier),
        -1 if tier is Tier.SINGLE else 0,
        -1 if tier is Tier.DOUBLE else 0,
    )


def _start_weight(tier: Tier) -> tuple[int, ...]:
    # (cost, -single, -double, asymmetry, segments)
    return (*_open_delta(tier), 0, 1)


def _switch_weight(old: Tier, new: Tier) -> tuple[int, ...]:
    c, single, double = _open_delta(new)
    asymmetry = (old is not Tier.UNQUOTED) + (new is not Tier.UNQUOTED)
    return (close_cost(old) + c, single, double, asymmetry, 1)


def _extend_weight(width: int) -> tuple[int, ...]:
    return (width, 0, 0, 0, 0)


def _solve(word: bytes) -> list[Segment]:
    """Run the DP and return the raw optimal segmentation."""
    n = len(word)
    arrived: list[dict[Tier, _Cell]] = [{} for _ in range(n + 1)]
    opened: list[dict[Tier, _Cell]] = [{} for _ in range(n + 1)]

    for tier in TIERS:
        opened[0][tier] = _Cell(_start_weight(tier), None)

    for i in range(1, n + 1):
        byte = word[i - 1]
        for tier in TIERS:
            best = None
            prev = opened[i - 1].get(tier)
            if prev is not None:
                width = cost(tier, byte, i - 1, word[i - 2] if i >= 2 else None)
                if width is not FORBIDDEN:
                    best = _Cell(_add(prev.key, _extend_weight(width)), (_OPENED, i - 1, tier))
            if tier is Tier.DOUBLE and i >= 2:
                prev = opened[i - 2].get(tier)
                width = double_pair_cost(word[i - 2], byte)
                if prev is not None and width is not FORBIDDEN:
                    key = _add(prev.key, _extend_weight(width))
                    if best is None or key < best.key:
                        best = _Cell(key, (_OPENED, i - 2, tier))
            if best is not None:
                arrived[i][tier] = best

        if i == n:
            break
        # Switches only leave a non-empty segment, so one pass settles position i
        for tier in TIERS:
            best = None
            here = arrived[i].get(tier)
            if here is not None:
                best = _Cell(here.key, (_ARRIVED, i, tier))
            for old in TIERS:
                source = arrived[i].get(old)
                if old is tier or source is None:
                    continue
                key = _add(source.key, _switch_weight(old, tier))
                if best is None or key < best.key:
                    best = _Cell(key, (_ARRIVED, i, old))
            if best is not None:
                opened[i][tier] = best

    final_tier = None
    final_key = None
    for tier in TIERS:
        cell = arrived[n].get(tier)
        if cell is None:
            continue
        key = _add(cell.key, _extend_weight(close_cost(tier)))
        if final_key is None or key < final_key:
            final_tier, final_key = tier, key

    if final_tier is None:
        # Single and double quotes hold every non-NUL byte
        raise AssertionError(f"no quoting found for {word!r}")

    return _backtrack(arrived, opened, n, final_tier)


def _backtrack(
    arrived: list[dict[Tier, _Cell]],
    opened: list[dict[Tier, _Cell]],
    n: int,
    tier: Tier,
) -> list[Segment]:
    segments: list[Segment] = []
    end = n
    layer, i = _ARRIVED, n
    while True:
        cell = (arrived if layer == _ARRIVED else opened)[i][tier]
        if cell.prev is None:
            segments.append(Segment(tier, i, end))
            break
        prev_layer, prev_i, prev_tier = cell.prev
        if layer == _OPENED and prev_tier is not tier:
            segments.append(Segment(tier, i, end))
            end = i
        layer, i, tier = prev_layer, prev_i, prev_tier
    segments.reverse()
    return segments


def _canonical(word: bytes, segments: list[Segment]) -> tuple[Segment, ...]:
    """Merge adjacent bare runs and label them by whether they escape anything."""
    merged: list[Segment] = []
    for seg in segments:
        if not len(seg):
            continue
        bare = seg.tier in (Tier.UNQUOTED, Tier.BACKSLASH)
        if merged:
            last = merged[-1]
            last_bare = last.tier in (Tier.UNQUOTED, Tier.BACKSLASH)
            if last.tier is seg.tier or (bare and last_bare):
                merged[-1] = Segment(last.tier, last.start, seg.end)
                continue
        merged.append(seg)

    result = []
    for seg in merged:
        if seg.tier in (Tier.UNQUOTED, Tier.BACKSLASH):
            escapes = any(
                not is_bare_safe(word[j], j, word[j - 1] if j else None)
                for j in range(seg.start, seg.end)
            )
            seg = Segment(Tier.BACKSLASH if escapes else Tier.UNQUOTED, seg.start, seg.end)
        result.append(seg)
    return tuple(result)


def tie_break(segments: tuple[Segment, ...], n: int) -> TieBreak:
    """Compute the secondary ranking of a segmentation of an n-byte word."""
    asymmetry = 0
    for seg in segments:
        if seg.tier is Tier.UNQUOTED:
            continue
        asymmetry += (seg.start > 0) + (seg.end < n)
    return TieBreak(
        single_segments=sum(1 for s in segments if s.tier is Tier.SINGLE),
        double_segments=sum(1 for s in segments if s.tier is Tier.DOUBLE),
        asymmetry=asymmetry,
        segments=len(segments),
    )


def render(word: bytes, segments: tuple[Segment, ...] | list[Segment]) -> bytes:
    """Write out segments of word using each one's tier."""
    out = bytearray()
    for seg in segments:
        chunk = word[seg.start : seg.end]
        if seg.tier is Tier.UNQUOTED:
            out += chunk
        elif seg.tier is Tier.BACKSLASH:
            for j, b in enumerate(chunk, seg.start):
                if not is_bare_safe(b, j, word[j - 1] if j else None):
                    out.append(BACKSLASH)
                out.append(b)
        elif seg.tier is Tier.DOUBLE:
            out += QUOTE_CHAR[Tier.DOUBLE]
            for k, b in enumerate(chunk):
                if cost(Tier.DOUBLE, b, seg.start + k) == 2:
                    bare = k + 1 < len(chunk) and double_pair_cost(b, chunk[k + 1]) is not FORBIDDEN
                    if not bare:
                        out.append(BACKSLASH)
                out.append(b)
            out += QUOTE_CHAR[Tier.DOUBLE]
        else:
            out += QUOTE_CHAR[Tier.SINGLE] + chunk + QUOTE_CHAR[Tier.SINGLE]
    return bytes(out)


def plan(word: bytes) -> Encoding:
    """Choose the optimal encoding of word without verifying it.

    Raises UnrepresentableByte if the word contains NUL.
    """
    word = bytes(word)
    nul = word.find(b"\0")
    if nul >= 0:
        raise UnrepresentableByte(word, nul)

    if not word:
        segments = (Segment(Tier.SINGLE, 0, 0),)
        return Encoding(word, segments, b"''", TieBreak(1, 0, 0, 1))

    segments = _canonical(word, _solve(word))
    return Encoding(
        word=word,
        segments=segments,
        rendered=render(word, segments),
        tie_break=tie_break(segments, len(word)),
    )


def verify(encoding: Encoding, checker: Callable[[bytes], bytes] = unquote) -> None:
    """Parse the rendering back and raise QuotingInvariantError on any mismatch."""
    try:
        parsed = checker(encoding.rendered)
    except ShellSyntaxError as e:
        parsed, reason = None, f"does not parse: {e}"
    else:
        if parsed == encoding.word:
            return
        reason = "parses to different bytes"

    log_event(
        "self_check_failed",
        level="error",
        word=encoding.word.decode("latin-1"),
        rendered=encoding.rendered.decode("latin-1"),
        reason=reason,
    )
    raise QuotingInvariantError(encoding.word, encoding.rendered, parsed, reason)


def quote(
    word: bytes | str,
    *,
    self_check: bool = True,
    checker: Callable[[bytes], bytes] = unquote,
) -> bytes | str:
    """Return the shortest shell text for word.

    Accepts bytes or str and returns the same type; str goes through the
    filesystem encoding so undecodable bytes round-trip. Empty input gives ''.
    """
    if isinstance(word, str):
        return os.fsdecode(quote(os.fsencode(word), self_check=self_check, checker=checker))

    encoding = plan(word)
    if self_check:
        verify(encoding, checker)
    return encoding.rendered
