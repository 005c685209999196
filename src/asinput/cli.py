"""Command-line front end for asinput.

Usage:
    asinput sniff FILE...        Show each file's effective preprocess mode
    asinput cat FILE...          Write the delivered bytes to stdout ("-" = stdin)

Options:
    --no-preprocess      Request unpreprocessed reading (#APP still overrides)
    --comment-chars STR  Line comment characters (default "#")
    --warn-multibyte     Warn about non-ASCII bytes
    --buffer-size N      Bytes per delivered buffer
    -v, --verbose        Debug logging

Exit status is 1 if any error was reported, 2 for invalid options, 0 otherwise.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import BinaryIO

from asinput.config import BUFFER_SIZE, InputConfig, MultibyteHandling
from asinput.diagnostics import LoggingDiagnostics
from asinput.input_file import InputFile
from asinput.sniff import Directive
from asinput.utils.logger import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="asinput", description="Read assembler sources the way the front end sees them")
    parser.add_argument("--no-preprocess", action="store_true", help="Read files straight in unless they start with #APP")
    parser.add_argument("--comment-chars", default="#", help="Line comment characters")
    parser.add_argument("--warn-multibyte", action="store_true", help="Warn about multibyte characters")
    parser.add_argument("--buffer-size", type=int, default=BUFFER_SIZE, help="Bytes per buffer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (("sniff", "Show the effective preprocess mode"), ("cat", "Write delivered bytes to stdout")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("files", nargs="+", help='Source files ("-" for standard input)')
    return parser


def _source_name(arg: str) -> str:
    return "" if arg == "-" else arg


def _sniff(f: InputFile, files: Sequence[str], preprocess: bool, out: BinaryIO) -> None:
    for arg in files:
        ok = f.open(_source_name(arg), preprocess)
        result = f.sniff_result
        if ok and result is not None:
            mode = "preprocess" if result.preprocess else "no-preprocess"
            note = f" (#{result.directive.name})" if result.directive is not Directive.NONE else ""
            if not result.has_content:
                note = " (empty)"
            out.write(f"{f.file_name}: {mode}{note}\n".encode())
        f.close()


def _cat(f: InputFile, files: Sequence[str], preprocess: bool, out: BinaryIO) -> None:
    for arg in files:
        f.open(_source_name(arg), preprocess)
        for chunk in f.chunks():
            out.write(chunk)


def main(argv: Sequence[str] | None = None, *, stdin: BinaryIO | None = None, stdout: BinaryIO | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = InputConfig(
            line_comment_chars=args.comment_chars,
            multibyte_handling=MultibyteHandling.WARN if args.warn_multibyte else MultibyteHandling.ALLOW,
            buffer_size=args.buffer_size,
        )
    except ValueError as exc:
        print(f"asinput: {exc}", file=sys.stderr)
        return 2

    diagnostics = LoggingDiagnostics()
    out = stdout if stdout is not None else sys.stdout.buffer
    with InputFile(config=config, diagnostics=diagnostics, stdin=stdin) as f:
        if args.command == "sniff":
            _sniff(f, args.files, not args.no_preprocess, out)
        else:
            _cat(f, args.files, not args.no_preprocess, out)
    out.flush()
    return 1 if diagnostics.had_errors else 0


def main_entry() -> None:
    """Console-script entry point."""
    sys.exit(main())
