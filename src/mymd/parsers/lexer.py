#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/parsers/lexer.py
"""Tokenizer for the source markup.

The tokenizer walks the source once, left to right, and produces a flat list
of :class:`~mymd.parsers.tokens.Token` ending with a single EOF token. Fenced
regions (front matter, code blocks, raw LaTeX environments, display math) are
matched first and emitted as one token each. Line-oriented markers are only
recognized as the first non-blank text of a line; indentation is not emitted
but is kept as the marker's column so the parser can nest list bodies.

Malformed input never stops the tokenizer: each problem is reported to the
diagnostics collector and at least one character is skipped before scanning
resumes.
"""

from __future__ import annotations

import logging
import re

from mymd.constants import CODE_FENCE, DISPLAY_MATH_DELIMITER
from mymd.parsers.diagnostics import DiagnosticsCollector
from mymd.parsers.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

_LINE_END = r"(?=\r?\n|\Z)"
_MARKER_END = r"(?:[ \t]+|" + _LINE_END + r")"

# Fenced regions
_FRONT_MATTER_PATTERN = re.compile(r"---[ \t]*\r?\n(?:.*?\r?\n)?---[ \t]*" + _LINE_END, re.DOTALL)
_CODE_BLOCK_PATTERN = re.compile(r"```(.*?)```", re.DOTALL)
_BEGIN_ENV_PATTERN = re.compile(r"\\begin\{([^{}\n]+)\}")
_DISPLAY_MATH_PATTERN = re.compile(r"\$\$(.*?)\$\$", re.DOTALL)

# Line-start markers
_INDENT_PATTERN = re.compile(r"[ \t]*")
_BLANK_LINES_PATTERN = re.compile(r"(?:[ \t\r]*\n)+|[ \t\r]*\Z")
_HORIZONTAL_RULE_PATTERN = re.compile(r"(?:-{3,}|\*{3,}|_{3,})[ \t]*" + _LINE_END)
_HEADING_PATTERN = re.compile(r"(#{1,6})" + _MARKER_END)
_QUOTE_PATTERN = re.compile(r"(>)[ \t]?")
_BULLET_PATTERN = re.compile(r"(-)" + _MARKER_END)
_PLUS_PATTERN = re.compile(r"(\+)" + _MARKER_END)
_ORDINAL = r"(?:\d{1,9}|[A-Za-z]|[ivxlcdm]{2,8}|[IVXLCDM]{2,8})"
_ORDERED_PATTERN = re.compile(r"(\(" + _ORDINAL + r"\)|" + _ORDINAL + r"[.)])" + _MARKER_END)

# Inline constructs
_PARAGRAPH_END_PATTERN = re.compile(r"\n(?:[ \t\r]*\n)+|\n[ \t\r]*\Z")
_SPACE_PATTERN = re.compile(r"[ \t\r]+")
_HARD_BREAK_PATTERN = re.compile(r"\\\r?\n")
_RAW_INLINE_PATTERN = re.compile(r"\\[A-Za-z]+\*?(?:\{[^{}\n]*\}|\[[^\]\n]*\])*")
_ESCAPE_PATTERN = re.compile(r"\\[!-/:-@\[-`{-~]")
_INLINE_CODE_PATTERN = re.compile(r"(`+)(.+?)(?<!`)\1(?!`)")
_BACKTICK_RUN_PATTERN = re.compile(r"`+")
_INLINE_MATH_PATTERN = re.compile(r"\$([^$\n]+)\$")
_CITATION_PATTERN = re.compile(r"\[@([^\]\s]+)\]")
_REF_PATTERN = re.compile(r"\[([A-Za-z0-9_.:\-]+)\]")
_TEXT_PATTERN = re.compile(r"[^ \t\r\n\\*`$\[\]()!\x00-\x1f\x7f]+")

_SINGLE_CHAR_TOKENS = {
    "]": TokenKind.RBRACKET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "!": TokenKind.BANG,
}

# Tried in order at the start of every line, after the indentation
_LINE_MARKERS = (
    (_HORIZONTAL_RULE_PATTERN, TokenKind.HORIZONTAL_RULE),
    (_HEADING_PATTERN, TokenKind.HEADING),
    (_QUOTE_PATTERN, TokenKind.QUOTE),
    (_ORDERED_PATTERN, TokenKind.ORDERED_MARKER),
    (_BULLET_PATTERN, TokenKind.BULLET),
    (_PLUS_PATTERN, TokenKind.PLUS_MARKER),
)


class Tokenizer:
    """Convert source markup into a token stream.

    Parameters
    ----------
    source : str
        Complete source text
    sink : DiagnosticsCollector, optional
        Collector receiving lexical errors; a new one is created when omitted

    Notes
    -----
    Offsets, lines and columns are 0-based and count code points of the
    Python string, not encoded bytes.

    """

    def __init__(self, source: str, sink: DiagnosticsCollector | None = None):
        """Initialize the tokenizer with the source text."""
        self.source = source
        self.sink = sink if sink is not None else DiagnosticsCollector()
        self.tokens: list[Token] = []
        self.pos = 0
        self.line = 0
        self.line_start = 0
        self.at_line_start = True
        self.sink.token_stream = self.tokens

    def tokenize(self) -> list[Token]:
        """Tokenize the whole source.

        Returns
        -------
        list[Token]
            Tokens in source order, terminated by exactly one EOF token

        """
        length = len(self.source)

        while self.pos < length:
            self.sink.cursor = self.pos
            if self.at_line_start:
                self.at_line_start = False
                if self._scan_line_start():
                    continue
                if self.pos >= length:
                    break
            self._scan_inline()

        self.sink.cursor = self.pos
        self.tokens.append(Token(TokenKind.EOF, "", self.pos, self.pos, self.line, self.pos - self.line_start))
        logger.debug("Tokenized %d characters into %d tokens", length, len(self.tokens))
        return self.tokens

    # ------------------------------------------------------------------
    # Position bookkeeping
    # ------------------------------------------------------------------

    def _advance_to(self, end: int) -> None:
        """Move the cursor to ``end``, tracking line starts on the way."""
        consumed = self.source[self.pos : end]
        newlines = consumed.count("\n")
        if newlines:
            self.line += newlines
            self.line_start = self.pos + consumed.rfind("\n") + 1
        self.pos = end

    def _emit(self, kind: TokenKind, start: int, end: int) -> Token:
        token = Token(kind, self.source[start:end], start, end, self.line, start - self.line_start)
        self.tokens.append(token)
        self._advance_to(end)
        return token

    def _error(self, message: str, start: int, end: int) -> None:
        self.sink.report(self.line, start - self.line_start, f"Lexical Error: {message}", span=(start, end))
        self._advance_to(max(end, self.pos + 1))

    # ------------------------------------------------------------------
    # Line start
    # ------------------------------------------------------------------

    def _scan_line_start(self) -> bool:
        """Scan block-level constructs at the beginning of a line.

        Returns
        -------
        bool
            True when the line was fully handled here (a fenced region, a
            blank line or an error), False when inline scanning must continue

        """
        source = self.source

        if self.pos == 0:
            match = _FRONT_MATTER_PATTERN.match(source)
            if match:
                self._emit(TokenKind.FRONT_MATTER, 0, match.end())
                return True

        blank = _BLANK_LINES_PATTERN.match(source, self.pos)
        if blank:
            if self.tokens:
                self._emit(TokenKind.PARAGRAPH_END, self.pos, blank.end())
            else:
                self._advance_to(blank.end())
            self.at_line_start = True
            return True

        self._advance_to(_INDENT_PATTERN.match(source, self.pos).end())
        start = self.pos

        if source.startswith(CODE_FENCE, start):
            match = _CODE_BLOCK_PATTERN.match(source, start)
            if match:
                self._emit(TokenKind.CODE_BLOCK, start, match.end())
            else:
                self._error("Unterminated code block: missing closing ```", start, start + len(CODE_FENCE))
            return True

        begin = _BEGIN_ENV_PATTERN.match(source, start)
        if begin:
            closing = f"\\end{{{begin.group(1)}}}"
            close_at = source.find(closing, begin.end())
            if close_at < 0:
                self._error(f"Unterminated environment: missing {closing}", start, begin.end())
            else:
                self._emit(TokenKind.RAW_BLOCK, start, close_at + len(closing))
            return True

        for pattern, kind in _LINE_MARKERS:
            match = pattern.match(source, start)
            if match:
                marker_end = match.end(1) if match.re.groups else match.end()
                self._emit(kind, start, marker_end)
                self._advance_to(match.end())
                return True

        return False

    # ------------------------------------------------------------------
    # Inline
    # ------------------------------------------------------------------

    def _scan_inline(self) -> None:
        """Scan exactly one inline token (or one error) at the cursor."""
        source = self.source
        start = self.pos
        char = source[start]

        if char == "\n":
            match = _PARAGRAPH_END_PATTERN.match(source, start)
            if match:
                self._emit(TokenKind.PARAGRAPH_END, start, match.end())
            else:
                self._emit(TokenKind.SOFT_BREAK, start, start + 1)
            self.at_line_start = True
            return

        if char in " \t\r":
            match = _SPACE_PATTERN.match(source, start)
            end = match.end()
            if end >= len(source) or source[end] == "\n":
                # Trailing whitespace is not significant
                self._advance_to(end)
            else:
                self._emit(TokenKind.SPACE, start, end)
            return

        if char == "\\":
            self._scan_backslash(start)
            return

        if char == "*":
            if source.startswith("**", start):
                self._emit(TokenKind.DOUBLE_STAR, start, start + 2)
            else:
                self._emit(TokenKind.STAR, start, start + 1)
            return

        if char == "`":
            match = _INLINE_CODE_PATTERN.match(source, start)
            if match:
                self._emit(TokenKind.INLINE_CODE, start, match.end())
            else:
                run = _BACKTICK_RUN_PATTERN.match(source, start)
                self._error("Unterminated inline code: missing closing backtick", start, run.end())
            return

        if char == "$":
            self._scan_dollar(start)
            return

        if char == "[":
            for pattern, kind in ((_CITATION_PATTERN, TokenKind.CITATION), (_REF_PATTERN, TokenKind.REF)):
                match = pattern.match(source, start)
                if match:
                    self._emit(kind, start, match.end())
                    return
            self._emit(TokenKind.LBRACKET, start, start + 1)
            return

        if char in _SINGLE_CHAR_TOKENS:
            self._emit(_SINGLE_CHAR_TOKENS[char], start, start + 1)
            return

        match = _TEXT_PATTERN.match(source, start)
        if match:
            self._emit(TokenKind.TEXT, start, match.end())
            return

        self._error(f"Unrecognized character {char!r}", start, start + 1)

    def _scan_backslash(self, start: int) -> None:
        source = self.source

        match = _HARD_BREAK_PATTERN.match(source, start)
        if match:
            self._emit(TokenKind.HARD_BREAK, start, match.end())
            self.at_line_start = True
            return

        for pattern, kind in ((_RAW_INLINE_PATTERN, TokenKind.RAW_INLINE), (_ESCAPE_PATTERN, TokenKind.ESCAPE)):
            match = pattern.match(source, start)
            if match:
                self._emit(kind, start, match.end())
                return

        # A lone backslash is literal text
        self._emit(TokenKind.TEXT, start, start + 1)

    def _scan_dollar(self, start: int) -> None:
        source = self.source

        if source.startswith(DISPLAY_MATH_DELIMITER, start):
            match = _DISPLAY_MATH_PATTERN.match(source, start)
            if match:
                self._emit(TokenKind.DISPLAY_MATH, start, match.end())
            else:
                self._error("Unterminated display math: missing closing $$", start, start + 2)
            return

        match = _INLINE_MATH_PATTERN.match(source, start)
        if match:
            self._emit(TokenKind.INLINE_MATH, start, match.end())
        else:
            self._error("Unterminated inline math: missing closing $", start, start + 1)


def tokenize(source: str, sink: DiagnosticsCollector | None = None) -> tuple[list[Token], DiagnosticsCollector]:
    """Tokenize source markup.

    Parameters
    ----------
    source : str
        Complete source text
    sink : DiagnosticsCollector, optional
        Collector receiving lexical errors

    Returns
    -------
    tuple[list[Token], DiagnosticsCollector]
        The token stream (ending with EOF) and the collector used

    """
    tokenizer = Tokenizer(source, sink)
    return tokenizer.tokenize(), tokenizer.sink
