#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/parsers/tokens.py
"""Token types produced by the source markup tokenizer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    """Token kinds for the source markup tokenizer."""

    # Fenced regions (highest priority)
    FRONT_MATTER = auto()
    CODE_BLOCK = auto()
    RAW_BLOCK = auto()
    DISPLAY_MATH = auto()

    # Line-oriented markers, only produced at the start of a line
    HEADING = auto()
    QUOTE = auto()
    HORIZONTAL_RULE = auto()
    BULLET = auto()
    ORDERED_MARKER = auto()
    PLUS_MARKER = auto()

    # Inline constructs
    DOUBLE_STAR = auto()
    STAR = auto()
    INLINE_CODE = auto()
    INLINE_MATH = auto()
    BANG = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LPAREN = auto()
    RPAREN = auto()
    CITATION = auto()
    REF = auto()
    ESCAPE = auto()
    RAW_INLINE = auto()
    TEXT = auto()
    SPACE = auto()

    # Line structure
    SOFT_BREAK = auto()
    HARD_BREAK = auto()
    PARAGRAPH_END = auto()
    EOF = auto()

    @property
    def display_name(self) -> str:
        """Human-readable name used in diagnostics."""
        return self.name.lower().replace("_", " ")


# Kinds that open a block when they are the first token of a line
BLOCK_START_KINDS = frozenset(
    {
        TokenKind.HEADING,
        TokenKind.QUOTE,
        TokenKind.HORIZONTAL_RULE,
        TokenKind.BULLET,
        TokenKind.ORDERED_MARKER,
        TokenKind.PLUS_MARKER,
        TokenKind.CODE_BLOCK,
        TokenKind.RAW_BLOCK,
    }
)

LINE_END_KINDS = frozenset({TokenKind.SOFT_BREAK, TokenKind.PARAGRAPH_END})


@dataclass(frozen=True)
class Token:
    """A single token with its source span.

    Parameters
    ----------
    kind : TokenKind
        Type of the token
    text : str
        Exact source text covered by the token
    start : int
        Offset of the first character in the source
    end : int
        Offset one past the last character (exclusive)
    line : int
        0-based line of the first character
    column : int
        0-based column of the first character

    """

    kind: TokenKind
    text: str
    start: int
    end: int
    line: int
    column: int

    @property
    def is_eof(self) -> bool:
        """Whether this is the end-of-input marker."""
        return self.kind is TokenKind.EOF

    def __str__(self) -> str:
        """Compact form used by the token dump of the command line."""
        return f"{self.line}:{self.column} [{self.start}-{self.end}) {self.kind.name} {self.text!r}"
