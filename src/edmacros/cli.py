"""Command line front end for the macro table and expander."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import BinaryIO

from rich.console import Console

from .config import MacroSettings, build_expander, load_table
from .expander import LineExpander
from .keys import decode_trigger, format_trigger
from .table import MacroLoadError, MacroTable
from .tui import run_tui
from .ui.app import render_macro_table

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNBOUND = 1
EXIT_LOAD_FAILED = 2
EXIT_INPUT_FAILED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edmacros",
        description="Expand function-key macros for a line editor.",
    )
    parser.add_argument("-m", "--macros", metavar="FILE", help="macro file to load")
    parser.add_argument(
        "--no-repeat",
        action="store_true",
        help="disable ESC<count><char> repeat blocks",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="more logging")

    sub = parser.add_subparsers(dest="command", required=True)

    expand = sub.add_parser("expand", help="expand lines from FILE or stdin")
    expand.add_argument("input", nargs="?", metavar="FILE", help="input file (default: stdin)")

    sub.add_parser("list", help="show loaded macros")

    lookup = sub.add_parser("lookup", help="print the command bound to TRIGGER")
    lookup.add_argument("trigger", help=r"trigger in macro-file notation, e.g. '\eOP'")

    sub.add_parser("inspect", help="open the interactive inspector")
    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def expand_stream(expander: LineExpander, source: BinaryIO, sink: BinaryIO) -> int:
    """Copy SOURCE to SINK line by line, expanding macros. Returns lines expanded."""
    expanded = 0
    for line in source:
        result = expander.expand(line)
        if result is not line:
            expanded += 1
        sink.write(result)
    sink.flush()
    return expanded


def main(
    argv: Sequence[str] | None = None,
    *,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    settings = MacroSettings.resolve(
        args.macros,
        repeat_patterns=False if args.no_repeat else None,
    )
    try:
        table = load_table(settings)
    except MacroLoadError as exc:
        print(f"edmacros: {exc}", file=sys.stderr)
        return EXIT_LOAD_FAILED

    expander = build_expander(settings, table)

    if args.command == "expand":
        sink = stdout or sys.stdout.buffer
        if args.input:
            try:
                source = open(args.input, "rb")
            except OSError as exc:
                print(f"edmacros: cannot read {args.input}: {exc.strerror or exc}", file=sys.stderr)
                return EXIT_INPUT_FAILED
            with source:
                count = expand_stream(expander, source, sink)
        else:
            count = expand_stream(expander, stdin or sys.stdin.buffer, sink)
        logger.info("expanded %d line(s)", count)
        return EXIT_OK

    if args.command == "list":
        _print_table(table)
        return EXIT_OK

    if args.command == "lookup":
        trigger = decode_trigger(args.trigger)
        command = table.lookup(trigger)
        if command is None:
            print(f"unbound trigger: {format_trigger(trigger)}", file=sys.stderr)
            return EXIT_UNBOUND
        print(command.decode("utf-8", "replace"))
        return EXIT_OK

    run_tui(expander)
    return EXIT_OK


def _print_table(table: MacroTable) -> None:
    console = Console()
    if not table:
        console.print("no macros loaded")
        return
    console.print(render_macro_table(table.entries()))
