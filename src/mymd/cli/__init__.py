"""Command-line interface for the mymd compiler.

This module compiles one source markup document into the portable document
JSON consumed by the external conversion engine. Input is read from a file
or standard input; the JSON goes to standard output or ``--out``. When the
source has errors, every diagnostic is printed to standard error sorted by
position and nothing is written.

Environment Variable Support
----------------------------
Options support environment variable defaults using the pattern
MYMD_<OPTION_NAME> where option names are converted to uppercase with
hyphens replaced by underscores. CLI arguments always override
environment variables.

Exit Codes
----------
0
    Compiled successfully (or token dump printed)
1
    The source has diagnostics
2
    The input could not be read, the output could not be written, or an
    option value is invalid

Examples
--------
Compile a file::

    $ mymd paper.mmd -o paper.json

Pipe into the conversion engine::

    $ mymd < paper.mmd | pandoc -f json -o paper.pdf

Inspect the token stream::

    $ mymd paper.mmd --tokens

Use environment variables for defaults::

    $ export MYMD_INDENT=2
    $ export MYMD_RICH=true
    $ export MYMD_PARSE_FRONT_MATTER=false
    $ mymd paper.mmd

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from mymd import __version__
from mymd.cli.actions import (
    EnvironmentAwareAction,
    EnvironmentAwareBooleanAction,
    EnvironmentAwareBooleanFalseAction,
)
from mymd.cli.output import print_diagnostics, print_tokens
from mymd.compiler import compile as compile_source
from mymd.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_RAW_FORMAT,
    EXIT_DIAGNOSTICS,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    STDIN_MARKER,
)
from mymd.exceptions import ValidationError
from mymd.logging_utils import configure_logging
from mymd.options import CompilerOptions
from mymd.parsers.lexer import tokenize

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``mymd`` command."""
    parser = argparse.ArgumentParser(
        prog="mymd",
        description="Compile source markup into portable document JSON.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "input",
        nargs="?",
        default=STDIN_MARKER,
        help="Source file to compile; reads standard input when omitted or '-'",
    )
    parser.add_argument("-o", "--out", help="Write the JSON to this file instead of standard output")
    parser.add_argument("--version", action="version", version=f"mymd {__version__}")

    output_group = parser.add_argument_group("Output options")
    output_group.add_argument(
        "--indent",
        action=EnvironmentAwareAction,
        type=int,
        default=None,
        help="Indent the JSON output by this many spaces (compact when unset)",
    )
    output_group.add_argument(
        "--raw-format",
        action=EnvironmentAwareAction,
        default=DEFAULT_RAW_FORMAT,
        help=f"Format tag of raw blocks and raw inlines (default: {DEFAULT_RAW_FORMAT})",
    )
    output_group.add_argument(
        "--no-front-matter",
        dest="parse_front_matter",
        action=EnvironmentAwareBooleanFalseAction,
        help="Do not convert the front matter into document metadata",
    )
    output_group.add_argument(
        "--tokens",
        action="store_true",
        help="Print the token stream instead of compiling",
    )
    output_group.add_argument(
        "--rich",
        action=EnvironmentAwareBooleanAction,
        help="Render diagnostics and token dumps as rich tables",
    )

    logging_group = parser.add_argument_group("Logging options")
    logging_group.add_argument(
        "--log-level",
        action=EnvironmentAwareAction,
        type=str.upper,
        choices=_LOG_LEVELS,
        default=DEFAULT_LOG_LEVEL,
        help=f"Logging level (default: {DEFAULT_LOG_LEVEL})",
    )
    logging_group.add_argument("--log-file", action=EnvironmentAwareAction, help="Also write log records to this file")

    return parser


def _read_input(source: str) -> str:
    """Read the source as UTF-8 regardless of the console encoding."""
    if source == STDIN_MARKER:
        stream = getattr(sys.stdin, "buffer", None)
        if stream is None:
            return sys.stdin.read()
        return stream.read().decode("utf-8")
    return Path(source).read_text(encoding="utf-8")


def _write_output(document_json: str, out: str | None) -> None:
    """Write the JSON as UTF-8 regardless of the console encoding."""
    data = (document_json + "\n").encode("utf-8")
    if out is not None:
        Path(out).write_bytes(data)
        return

    stream = getattr(sys.stdout, "buffer", None)
    if stream is None:
        sys.stdout.write(data.decode("utf-8"))
        return
    sys.stdout.flush()
    stream.write(data)
    stream.flush()


def main(args: list[str] | None = None) -> int:
    """Execute the ``mymd`` command.

    Parameters
    ----------
    args : list of str, optional
        Command-line arguments; ``sys.argv[1:]`` when omitted

    Returns
    -------
    int
        Process exit code

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(parsed_args.log_level, log_file=parsed_args.log_file, use_rich=parsed_args.rich)

    try:
        options = CompilerOptions(
            raw_format=parsed_args.raw_format,
            json_indent=parsed_args.indent,
            parse_front_matter=parsed_args.parse_front_matter,
        )
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        source = _read_input(parsed_args.input)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: could not read {parsed_args.input}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if parsed_args.tokens:
        tokens, _ = tokenize(source)
        try:
            print_tokens(tokens, use_rich=parsed_args.rich)
        except UnicodeError as e:
            print(f"Error: could not write the token dump: {e}", file=sys.stderr)
            return EXIT_INPUT_ERROR
        return EXIT_SUCCESS

    result = compile_source(source, options)

    if result.has_errors:
        logger.info("Compilation failed with %d diagnostics", len(result.diagnostics))
        print_diagnostics(result.diagnostics, use_rich=parsed_args.rich)
        return EXIT_DIAGNOSTICS

    try:
        _write_output(result.document_json or "", parsed_args.out)
    except (OSError, UnicodeError) as e:
        print(f"Error: could not write {parsed_args.out or 'standard output'}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    logger.info("Compiled %d blocks", len(result.document.blocks) if result.document else 0)
    return EXIT_SUCCESS


__all__ = ["create_parser", "main"]
