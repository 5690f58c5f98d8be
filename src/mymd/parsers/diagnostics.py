#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/parsers/diagnostics.py
"""Diagnostics collected while tokenizing and parsing.

A single :class:`DiagnosticsCollector` is shared by the tokenizer and the
parser of one compile call. Problems are recorded, never raised, so one bad
construct does not hide the errors that follow it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from mymd.parsers.tokens import Token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """A located error message.

    Parameters
    ----------
    line : int
        0-based line of the problem
    column : int
        0-based column of the problem
    start_index : int
        Offset of the first offending character
    end_index : int
        Offset one past the last offending character
    message : str
        Human-readable description

    """

    line: int
    column: int
    start_index: int
    end_index: int
    message: str

    def __str__(self) -> str:
        """Format as ``Line <line>:<column> <message>``."""
        return f"Line {self.line}:{self.column} {self.message}"


@dataclass
class DiagnosticsCollector:
    """Accumulates diagnostics in report order.

    Attributes
    ----------
    token_stream : sequence of Token or None
        Tokens produced so far; used to place errors that have no offending token
    cursor : int or None
        Current tokenizer offset; the second fallback position

    """

    token_stream: Optional[Sequence[Token]] = None
    cursor: Optional[int] = None
    _diagnostics: list[Diagnostic] = field(default_factory=list)

    def report(
        self,
        line: int,
        column: int,
        message: str,
        token: Token | None = None,
        span: tuple[int, int] | None = None,
    ) -> Diagnostic:
        """Record a diagnostic.

        The span is taken from ``token`` when it is a real token, else from
        ``span``. Without either, a one-character span is placed after the last
        real token of ``token_stream``, then at ``cursor``, and finally at
        ``[0, 1)``.

        Parameters
        ----------
        line : int
            0-based line
        column : int
            0-based column
        message : str
            Description of the problem
        token : Token, optional
            Offending token
        span : tuple of int, optional
            Explicit ``(start, end)`` offsets

        Returns
        -------
        Diagnostic
            The recorded diagnostic

        """
        start, end = self._resolve_span(token, span)
        diagnostic = Diagnostic(line=line, column=column, start_index=start, end_index=end, message=message)
        self._diagnostics.append(diagnostic)
        logger.debug("Diagnostic at %d:%d [%d, %d): %s", line, column, start, end, message)
        return diagnostic

    def _resolve_span(self, token: Token | None, span: tuple[int, int] | None) -> tuple[int, int]:
        if token is not None and not token.is_eof and token.start >= 0:
            return token.start, token.end
        if span is not None and span[0] >= 0:
            return span[0], max(span[1], span[0] + 1)
        if self.token_stream:
            for candidate in reversed(self.token_stream):
                if not candidate.is_eof and candidate.start >= 0:
                    return candidate.end, candidate.end + 1
        if self.cursor is not None and self.cursor >= 0:
            return self.cursor, self.cursor + 1
        return 0, 1

    def has_errors(self) -> bool:
        """Whether at least one diagnostic was reported."""
        return bool(self._diagnostics)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Reported diagnostics, in report order."""
        return list(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)


def sort_diagnostics(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    """Return diagnostics ordered by source position."""
    return sorted(diagnostics, key=lambda d: (d.start_index, d.end_index, d.line, d.column))


def error_ranges(text: str, diagnostics: Iterable[Diagnostic]) -> list[tuple[int, int]]:
    """Compute non-overlapping character ranges for painting error markers.

    Spans are clamped into the text, empty spans are widened to one character
    (moved back by one when they sit at the very end), and a span overlapping
    an earlier one is skipped.

    Parameters
    ----------
    text : str
        The source the diagnostics refer to
    diagnostics : iterable of Diagnostic
        Diagnostics in any order

    Returns
    -------
    list of tuple of int
        ``(start, end)`` ranges sorted by start

    """
    ranges: list[tuple[int, int]] = []
    last_end = 0
    length = len(text)

    for diagnostic in sort_diagnostics(diagnostics):
        start = max(0, diagnostic.start_index)
        end = max(start + 1, diagnostic.end_index)

        if end > length:
            end = length
            if start >= end and end > 0:
                start = end - 1

        if start >= end or start < last_end:
            continue

        ranges.append((start, end))
        last_end = end

    return ranges
