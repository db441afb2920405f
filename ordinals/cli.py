"""Command-line entry point: print epochs, parse objects, describe sat ranges."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Iterable

from .obj import Object
from .sat import Rarity, Sat, starting_sats
from .sat_point import OutPoint


def list_ranges(
    outpoint: OutPoint, ranges: Iterable[tuple[int, int]]
) -> list[tuple[OutPoint, int, int, Rarity, str]]:
    """Describe each ``(start, end)`` sat range of an output.

    Each entry is the outpoint, the first sat, the range size, and the rarity
    and name of the first sat.
    """
    result = []
    for start, end in ranges:
        sat = Sat(start)
        result.append((outpoint, start, end - start, sat.rarity(), sat.name()))
    return result


def epochs_output() -> dict:
    """The first sat of every reward epoch, as printed by ``epochs``."""
    return {"starting_sats": [sat.n for sat in starting_sats()]}


def parse_output(text: str) -> dict:
    """The object parsed from ordinal notation, as printed by ``parse``."""
    return {"object": str(Object.parse(text))}


def _print_json(output) -> None:
    sys.stdout.write(json.dumps(output, indent=2, ensure_ascii=False))
    sys.stdout.write("\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ord")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("epochs", help="List the first satoshis of each reward epoch")
    parse = commands.add_parser("parse", help="Parse a satoshi from ordinal notation")
    parse.add_argument("object", help="Parse <OBJECT>.")
    return parser


def _report(err: BaseException) -> None:
    print(f"error: {err}", file=sys.stderr)
    cause = err.__cause__ or err.__context__
    while cause is not None:
        print(f"because: {cause}", file=sys.stderr)
        cause = cause.__cause__ or cause.__context__


def main(argv=None) -> int:
    """Run the command line; return the process exit status."""
    args = _build_parser().parse_args(argv)
    try:
        if args.command == "epochs":
            _print_json(epochs_output())
        else:
            _print_json(parse_output(args.object))
    except ValueError as err:
        _report(err)
        return 1
    return 0