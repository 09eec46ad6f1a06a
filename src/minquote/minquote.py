"""Command-line front end for minquote.

Prints the shortest shell quoting of each word given on the command line, or
of each word read from stdin when none are given.

Exit codes:
- 0: Success.
- 1: A word cannot be quoted (it contains NUL).
- 2: Usage or config error.
- 3: Internal error: a quoting failed its self-check.
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import BinaryIO

from minquote import __version__
from minquote.core.config import Config, configure_logging, load_config, log_event
from minquote.core.errors import QuotingInvariantError, UnrepresentableByte
from minquote.core.parser import CHECKERS, get_checker
from minquote.core.quoter import Encoding, plan, verify

EXIT_OK = 0
EXIT_UNREPRESENTABLE = 1
EXIT_USAGE = 2
EXIT_INTERNAL = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minquote",
        description="Quote shell words using as few bytes as possible.",
    )
    parser.add_argument("words", nargs="*", metavar="WORD", help="words to quote (default: read stdin)")
    parser.add_argument("-0", "--null", action="store_true", help="stdin words are NUL-separated, not one per line")
    parser.add_argument("-j", "--join", action="store_true", help="print all words on one line, separated by spaces")
    parser.add_argument("--explain", action="store_true", help="describe each word's segments on stderr")
    parser.add_argument("--no-self-check", action="store_true", help="skip parsing the result back")
    parser.add_argument("--checker", choices=sorted(CHECKERS), help="reference parser for the self-check")
    parser.add_argument("--config", type=Path, help="extra config file, read last")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def read_words(stream: BinaryIO, null: bool) -> list[bytes]:
    """Split stdin into words, ignoring one trailing separator."""
    data = stream.read()
    if not data:
        return []
    sep = b"\0" if null else b"\n"
    words = data.split(sep)
    if words[-1] == b"":
        words.pop()
    return words


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    """Let command-line flags override config files."""
    changes: dict[str, object] = {}
    if args.join:
        changes["join"] = True
    if args.explain:
        changes["explain"] = True
    if args.no_self_check:
        changes["self_check"] = False
    if args.checker:
        changes["checker"] = args.checker
    return replace(config, **changes)


def quote_word(word: bytes, config: Config) -> Encoding:
    """Plan, check and log the quoting of one word."""
    encoding = plan(word)
    if config.self_check:
        verify(encoding, get_checker(config.checker))
    log_event(
        "quoted",
        length=len(word),
        quoted_length=encoding.length,
        tiers=[seg.tier.label for seg in encoding.segments],
    )
    return encoding


def explain(encoding: Encoding, out) -> None:
    tb = encoding.tie_break
    print(
        f"{encoding.word!r}: {encoding.length} bytes, "
        f"single={tb.single_segments} double={tb.double_segments} "
        f"asymmetry={tb.asymmetry} segments={tb.segments}",
        file=out,
    )
    for line in encoding.describe():
        print(f"  {line}", file=out)


def explain_config(config: Config, out) -> None:
    """Name the config files that were read, in load order."""
    if not config.sources:
        print("config: defaults", file=out)
    for scope, path in config.sources:
        print(f"config: {scope} {path}", file=out)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = apply_args(load_config(Path.cwd(), args.config), args)
    except ValueError as e:
        print(f"minquote: config error: {e}", file=sys.stderr)
        return EXIT_USAGE
    configure_logging(config)
    if config.explain:
        explain_config(config, sys.stderr)

    if args.words:
        words = [os.fsencode(w) for w in args.words]
    else:
        words = read_words(sys.stdin.buffer, args.null)

    rendered: list[bytes] = []
    for word in words:
        try:
            encoding = quote_word(word, config)
        except UnrepresentableByte as e:
            log_event("rejected", level="warning", offset=e.offset)
            print(f"minquote: {e}", file=sys.stderr)
            return EXIT_UNREPRESENTABLE
        except QuotingInvariantError as e:
            print(f"minquote: internal error: {e}", file=sys.stderr)
            return EXIT_INTERNAL
        if config.explain:
            explain(encoding, sys.stderr)
        rendered.append(encoding.rendered)

    out = sys.stdout.buffer
    if config.join:
        if rendered:
            out.write(b" ".join(rendered) + b"\n")
    else:
        for text in rendered:
            out.write(text + b"\n")
    out.flush()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
