"""Utility functions for cli output."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/mymd/cli/output.py
from __future__ import annotations

import sys
from typing import Iterable, TextIO

from rich.console import Console
from rich.table import Table

from mymd.parsers.diagnostics import Diagnostic, sort_diagnostics
from mymd.parsers.tokens import Token


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """Format a diagnostic as ``line:column [start-end] message``."""
    return (
        f"{diagnostic.line}:{diagnostic.column} "
        f"[{diagnostic.start_index}-{diagnostic.end_index}] {diagnostic.message}"
    )


def print_diagnostics(diagnostics: Iterable[Diagnostic], use_rich: bool = False, stream: TextIO | None = None) -> None:
    """Print diagnostics sorted by source position.

    Parameters
    ----------
    diagnostics : iterable of Diagnostic
        Diagnostics to print
    use_rich : bool, default False
        Render a ``rich`` table instead of plain lines
    stream : TextIO, optional
        Target stream; standard error when omitted

    """
    ordered = sort_diagnostics(diagnostics)
    target = stream or sys.stderr

    if not use_rich:
        for diagnostic in ordered:
            print(format_diagnostic(diagnostic), file=target)
        return

    table = Table(title=f"Diagnostics ({len(ordered)})")
    table.add_column("Line", style="cyan", justify="right")
    table.add_column("Column", style="cyan", justify="right")
    table.add_column("Span", style="yellow")
    table.add_column("Message", style="red")

    for diagnostic in ordered:
        table.add_row(
            str(diagnostic.line),
            str(diagnostic.column),
            f"{diagnostic.start_index}-{diagnostic.end_index}",
            diagnostic.message,
        )

    Console(file=target).print(table)


def print_tokens(tokens: Iterable[Token], use_rich: bool = False, stream: TextIO | None = None) -> None:
    """Dump a token stream, one token per line or as a ``rich`` table."""
    target = stream or sys.stdout

    if not use_rich:
        for token in tokens:
            print(str(token), file=target)
        return

    table = Table(title="Tokens")
    table.add_column("Position", style="cyan")
    table.add_column("Span", style="yellow")
    table.add_column("Kind", style="magenta")
    table.add_column("Text", style="green")

    for token in tokens:
        table.add_row(f"{token.line}:{token.column}", f"{token.start}-{token.end}", token.kind.name, repr(token.text))

    Console(file=target).print(table)
