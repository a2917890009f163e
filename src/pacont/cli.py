"""
CLI entrypoint for pacont package.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from colorama import Fore, just_fix_windows_console

from . import __version__
from .clipboard import copy_to_clipboard
from .core import (
    DEFAULT_MAX_DEPTH,
    aggregate,
    load_extra_patterns,
    paint,
    render,
    TraversalOptions,
    ClipboardError,
    ConfigFileError,
    InvalidInputError,
)


def _non_negative(value: str) -> int:
    try:
        depth = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid depth '{value}'")
    if depth < 0:
        raise argparse.ArgumentTypeError(f"depth must be >= 0, got {depth}")
    return depth


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="pacont",
        description="Print the contents of files and directories as one annotated stream.",
    )
    p.add_argument("paths", nargs="*", help="Paths to directories or files to read")
    p.add_argument(
        "-m",
        "--max-depth",
        type=_non_negative,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum recursion depth for directories (default {DEFAULT_MAX_DEPTH})",
    )
    p.add_argument(
        "-i", "--include-errors", action="store_true", help="Report unreadable entries on stderr"
    )
    p.add_argument(
        "-o",
        "--output-information",
        action="store_true",
        help="Only print the number of characters, words and non-empty lines",
    )
    p.add_argument(
        "-c", "--copy", action="store_true", help="Copy the output to the clipboard instead of printing it"
    )
    p.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="gitignore-style pattern to skip inside directories (repeatable)",
    )
    p.add_argument(
        "--ignore-file",
        type=Path,
        help="Path to a file with extra ignore patterns (one per line)",
    )
    p.add_argument(
        "--gitignore",
        action="store_true",
        help="Also honour the .gitignore at the root of each directory",
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def _fail(message: str) -> None:
    print(paint(f"Error: {message}", Fore.RED), file=sys.stderr)
    sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    try:
        ns = _parse_args(argv)
        just_fix_windows_console()

        patterns = list(ns.exclude)
        if ns.ignore_file:
            try:
                patterns.extend(load_extra_patterns(ns.ignore_file))
            except ConfigFileError as e:
                _fail(str(e))

        options = TraversalOptions(
            max_depth=ns.max_depth,
            include_errors=ns.include_errors,
            summary_only=ns.output_information,
            exclude=tuple(patterns),
            respect_gitignore=ns.gitignore,
        )

        try:
            result = aggregate(ns.paths, options)
        except InvalidInputError as e:
            _fail(str(e))

        output = render(result, options)

        if not ns.copy:
            sys.stdout.write(output)
            sys.stdout.flush()
        elif output:
            try:
                copy_to_clipboard(output)
            except ClipboardError as e:
                _fail(str(e))
            print(paint("Output copied to clipboard.", Fore.GREEN), file=sys.stderr)
        else:
            print("Nothing to copy: No content generated or an error occurred.", file=sys.stderr)

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
