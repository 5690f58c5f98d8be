#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/parsers/grammar.py
"""Recursive-descent parser for the source markup.

The parser consumes the token stream of :mod:`mymd.parsers.lexer` and builds
a tree of :class:`ParseNode`. Each node is a tagged variant: its
:class:`NodeKind` selects the interpretation of its token, children and
value. The tree mirrors the grammar::

    document   = front_matter? block*
    block      = heading | code_block | raw_block | math_block | rule
               | block_quote | bullet_list | ordered_list | paragraph
    list_item  = marker inline* (NEWLINE indented block+)?
    inline     = text | space | escape | strong | emph | code | math
               | link | image | citation | ref | raw_inline | break

Syntax errors are reported to the shared diagnostics collector. After an
error the parser skips to the start of the next line and carries on, so a
single call reports every independent problem; the returned tree is then
partial and must not be converted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Sequence

from mymd.parsers.diagnostics import DiagnosticsCollector
from mymd.parsers.tokens import BLOCK_START_KINDS, LINE_END_KINDS, Token, TokenKind

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    """Variant tags of parse tree nodes."""

    DOCUMENT = auto()
    FRONT_MATTER = auto()

    # Blocks
    HEADING = auto()
    PARAGRAPH = auto()
    CODE_BLOCK = auto()
    RAW_BLOCK = auto()
    MATH_BLOCK = auto()
    HORIZONTAL_RULE = auto()
    BLOCK_QUOTE = auto()
    BULLET_LIST = auto()
    ORDERED_LIST = auto()
    LIST_ITEM = auto()

    # Inlines
    TEXT = auto()
    LITERAL = auto()
    SPACE = auto()
    SOFT_BREAK = auto()
    HARD_BREAK = auto()
    ESCAPE = auto()
    STRONG = auto()
    EMPH = auto()
    CODE = auto()
    MATH = auto()
    DISPLAY_MATH = auto()
    LINK = auto()
    IMAGE = auto()
    CITATION = auto()
    REF = auto()
    RAW_INLINE = auto()


@dataclass
class ParseNode:
    """Node of the parse tree.

    Parameters
    ----------
    kind : NodeKind
        Variant tag
    token : Token, optional
        Primary token: the marker of a heading or list item, the fenced token
        of a code/raw/math block, or the token of a leaf inline
    children : list of ParseNode
        Inline content, list items of a list, or top-level blocks of the document
    body : list of ParseNode
        Nested blocks of a list item
    value : str, optional
        Link or image destination, label of a math block, or literal text

    """

    kind: NodeKind
    token: Token | None = None
    children: list[ParseNode] = field(default_factory=list)
    body: list[ParseNode] = field(default_factory=list)
    value: str | None = None

    @property
    def text(self) -> str:
        """Source text of the primary token, or an empty string."""
        return self.token.text if self.token is not None else ""


class _SyntaxError(Exception):
    """Unwinds to the enclosing block loop once a syntax error is reported."""


@dataclass(frozen=True)
class _InlineContext:
    """How far an inline run may extend.

    ``multiline`` allows the run to continue over soft line breaks onto lines
    indented at least ``min_column``; ``enclosing`` holds the closing tokens of
    every construct currently open.
    """

    multiline: bool
    min_column: int = 0
    enclosing: frozenset[TokenKind] = frozenset()

    def closing(self, kind: TokenKind) -> _InlineContext:
        return replace(self, enclosing=self.enclosing | {kind})


_LEAF_INLINES = {
    TokenKind.TEXT: NodeKind.TEXT,
    TokenKind.SPACE: NodeKind.SPACE,
    TokenKind.ESCAPE: NodeKind.ESCAPE,
    TokenKind.RAW_INLINE: NodeKind.RAW_INLINE,
    TokenKind.INLINE_CODE: NodeKind.CODE,
    TokenKind.INLINE_MATH: NodeKind.MATH,
    TokenKind.DISPLAY_MATH: NodeKind.DISPLAY_MATH,
    TokenKind.CITATION: NodeKind.CITATION,
}

_LITERAL_INLINES = frozenset({TokenKind.RBRACKET, TokenKind.LPAREN, TokenKind.RPAREN})

_SINGLE_TOKEN_BLOCKS = {
    TokenKind.CODE_BLOCK: NodeKind.CODE_BLOCK,
    TokenKind.RAW_BLOCK: NodeKind.RAW_BLOCK,
    TokenKind.HORIZONTAL_RULE: NodeKind.HORIZONTAL_RULE,
}

_ORDERED_MARKERS = frozenset({TokenKind.ORDERED_MARKER, TokenKind.PLUS_MARKER})
_BULLET_MARKERS = frozenset({TokenKind.BULLET})


class Parser:
    """Build a parse tree from a token stream.

    Parameters
    ----------
    tokens : sequence of Token
        Token stream ending with an EOF token
    sink : DiagnosticsCollector, optional
        Collector receiving syntax errors; a new one is created when omitted

    """

    def __init__(self, tokens: Sequence[Token], sink: DiagnosticsCollector | None = None):
        """Initialize the parser with a token stream."""
        self.tokens = list(tokens)
        if not self.tokens or not self.tokens[-1].is_eof:
            end = self.tokens[-1].end if self.tokens else 0
            line = self.tokens[-1].line if self.tokens else 0
            self.tokens.append(Token(TokenKind.EOF, "", end, end, line, 0))
        self.sink = sink if sink is not None else DiagnosticsCollector()
        if self.sink.token_stream is None:
            self.sink.token_stream = self.tokens
        self.pos = 0

    def parse(self) -> ParseNode:
        """Parse the whole token stream.

        Returns
        -------
        ParseNode
            DOCUMENT node; partial when syntax errors were reported

        """
        children: list[ParseNode] = []

        if self._current_token().kind is TokenKind.FRONT_MATTER:
            children.append(ParseNode(NodeKind.FRONT_MATTER, token=self._advance()))

        children.extend(self._parse_blocks(0))

        logger.debug("Parsed %d top-level nodes from %d tokens", len(children), len(self.tokens))
        return ParseNode(NodeKind.DOCUMENT, children=children)

    # ------------------------------------------------------------------
    # Token navigation
    # ------------------------------------------------------------------

    def _current_token(self) -> Token:
        return self.tokens[self.pos]

    def _peek_token(self, offset: int = 1) -> Token:
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def _line_head(self) -> Token:
        """First token of the next line, looking past pending line ends."""
        offset = 0
        while self._peek_token(offset).kind in LINE_END_KINDS:
            offset += 1
        return self._peek_token(offset)

    def _skip_line_ends(self) -> None:
        while self._current_token().kind in LINE_END_KINDS:
            self._advance()

    def _at_line_end(self) -> bool:
        token = self._current_token()
        return token.is_eof or token.kind in LINE_END_KINDS

    def _continues_line(self, head: Token, context: _InlineContext) -> bool:
        """Whether an inline run may continue onto the line starting at ``head``."""
        return (
            context.multiline
            and not head.is_eof
            and head.kind not in LINE_END_KINDS
            and head.kind not in BLOCK_START_KINDS
            and head.column >= context.min_column
        )

    # ------------------------------------------------------------------
    # Error handling
    # ------------------------------------------------------------------

    def _error(self, token: Token, message: str) -> _SyntaxError:
        """Report a syntax error at ``token``; the caller raises the returned exception."""
        offending = None if token.is_eof else token
        self.sink.report(token.line, token.column, f"Syntax Error: {message}", token=offending)
        return _SyntaxError(message)

    def _synchronize(self) -> None:
        """Skip to the end of the current line."""
        while not self._at_line_end():
            self._advance()

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _parse_blocks(self, min_column: int) -> list[ParseNode]:
        """Parse blocks while lines are indented at least ``min_column``."""
        nodes: list[ParseNode] = []

        while True:
            head = self._line_head()
            if head.is_eof or head.column < min_column:
                break

            self._skip_line_ends()
            try:
                nodes.append(self._parse_block(min_column))
            except _SyntaxError:
                self._synchronize()

        return nodes

    def _parse_block(self, min_column: int) -> ParseNode:
        token = self._current_token()
        kind = token.kind

        if kind is TokenKind.HEADING:
            return self._parse_heading()

        if kind in _SINGLE_TOKEN_BLOCKS:
            self._advance()
            self._expect_line_end(token)
            return ParseNode(_SINGLE_TOKEN_BLOCKS[kind], token=token)

        if kind is TokenKind.QUOTE:
            return self._parse_block_quote(min_column)

        if kind in _BULLET_MARKERS:
            return self._parse_list(NodeKind.BULLET_LIST, _BULLET_MARKERS)

        if kind in _ORDERED_MARKERS:
            return self._parse_list(NodeKind.ORDERED_LIST, _ORDERED_MARKERS)

        if kind is TokenKind.DISPLAY_MATH and self._is_math_block():
            return self._parse_math_block()

        if kind is TokenKind.FRONT_MATTER:
            raise self._error(token, "Front matter is only allowed at the start of the document")

        return self._parse_paragraph(min_column)

    def _expect_line_end(self, block_token: Token) -> None:
        token = self._current_token()
        if not self._at_line_end():
            raise self._error(token, f"Unexpected {token.kind.display_name} after {block_token.kind.display_name}")

    def _parse_heading(self) -> ParseNode:
        marker = self._advance()
        content = self._parse_inlines(_InlineContext(multiline=False))
        if not content:
            raise self._error(marker, "Heading requires text after the marker")
        return ParseNode(NodeKind.HEADING, token=marker, children=content)

    def _parse_paragraph(self, min_column: int) -> ParseNode:
        content = self._parse_inlines(_InlineContext(multiline=True, min_column=min_column))
        return ParseNode(NodeKind.PARAGRAPH, children=content)

    def _is_math_block(self) -> bool:
        """Whether the display math at the cursor stands alone on its line."""
        offset = 1
        if self._peek_token(offset).kind is TokenKind.SPACE:
            offset += 1
        if self._peek_token(offset).kind is TokenKind.REF:
            offset += 1
        following = self._peek_token(offset)
        return following.is_eof or following.kind in LINE_END_KINDS

    def _parse_math_block(self) -> ParseNode:
        math = self._advance()
        label = None
        if self._current_token().kind is TokenKind.SPACE:
            self._advance()
        if self._current_token().kind is TokenKind.REF:
            label = self._advance().text[1:-1]
        return ParseNode(NodeKind.MATH_BLOCK, token=math, value=label)

    def _parse_block_quote(self, min_column: int) -> ParseNode:
        """Parse consecutive ``>`` lines into one quote."""
        marker = self._current_token()
        content: list[ParseNode] = []
        context = _InlineContext(multiline=False, min_column=min_column)

        while True:
            self._advance()
            content.extend(self._parse_inlines(context))

            current = self._current_token()
            following = self._peek_token()
            if (
                current.kind is TokenKind.SOFT_BREAK
                and following.kind is TokenKind.QUOTE
                and following.column >= min_column
            ):
                content.append(ParseNode(NodeKind.SOFT_BREAK, token=self._advance()))
                continue
            if current.kind is TokenKind.QUOTE and current.column >= min_column:
                # previous line ended with a hard break
                continue
            break

        return ParseNode(NodeKind.BLOCK_QUOTE, token=marker, children=content)

    def _parse_list(self, kind: NodeKind, markers: frozenset[TokenKind]) -> ParseNode:
        """Parse list items whose markers share the first marker's column."""
        column = self._current_token().column
        items: list[ParseNode] = []

        while True:
            items.append(self._parse_list_item())
            head = self._line_head()
            if head.kind in markers and head.column == column:
                self._skip_line_ends()
                continue
            break

        return ParseNode(kind, children=items)

    def _parse_list_item(self) -> ParseNode:
        marker = self._advance()
        content = self._parse_inlines(_InlineContext(multiline=False, min_column=marker.column + 1))

        body: list[ParseNode] = []
        head = self._line_head()
        if not head.is_eof and head.column > marker.column:
            body = self._parse_blocks(marker.column + 1)

        return ParseNode(NodeKind.LIST_ITEM, token=marker, children=content, body=body)

    # ------------------------------------------------------------------
    # Inlines
    # ------------------------------------------------------------------

    def _parse_inlines(self, context: _InlineContext) -> list[ParseNode]:
        """Parse inline nodes up to the end of the run.

        The run ends at a paragraph break, at EOF, at a closing token of an
        enclosing construct (left unconsumed), or at a line break when the run
        may not continue onto the next line.
        """
        nodes: list[ParseNode] = []

        while True:
            token = self._current_token()
            kind = token.kind

            if token.is_eof or kind is TokenKind.PARAGRAPH_END or kind in context.enclosing:
                break

            if kind is TokenKind.SOFT_BREAK:
                if not self._continues_line(self._peek_token(), context):
                    break
                nodes.append(ParseNode(NodeKind.SOFT_BREAK, token=self._advance()))
                continue

            if kind is TokenKind.HARD_BREAK:
                nodes.append(ParseNode(NodeKind.HARD_BREAK, token=self._advance()))
                if not self._continues_line(self._current_token(), context):
                    break
                continue

            nodes.append(self._parse_inline(context))

        return nodes

    def _find_closer(self, kind: TokenKind, context: _InlineContext, start: int | None = None) -> int:
        """Index of the token closing a construct, or -1 when it is unclosed.

        The search follows the same line rules as :meth:`_parse_inlines` and
        gives up at a closing token of an enclosing construct.
        """
        index = (self.pos if start is None else start) + 1
        last = len(self.tokens) - 1

        while index < last:
            token = self.tokens[index]
            if token.kind is kind:
                return index
            if token.kind is TokenKind.PARAGRAPH_END or token.kind in context.enclosing:
                return -1
            if token.kind is TokenKind.SOFT_BREAK or token.kind is TokenKind.HARD_BREAK:
                if not self._continues_line(self.tokens[index + 1], context):
                    return -1
            index += 1

        return -1

    def _is_link_text(self, index: int, context: _InlineContext) -> bool:
        """Whether the ``[`` at ``index`` opens ``[text](destination)``."""
        closer = self._find_closer(TokenKind.RBRACKET, context, start=index)
        return closer >= 0 and self.tokens[closer + 1].kind is TokenKind.LPAREN

    def _parse_inline(self, context: _InlineContext) -> ParseNode:
        token = self._current_token()
        kind = token.kind

        if kind in _LEAF_INLINES:
            return ParseNode(_LEAF_INLINES[kind], token=self._advance())

        if kind is TokenKind.DOUBLE_STAR:
            return self._parse_strong(context)

        if kind is TokenKind.STAR:
            return self._parse_emph(context)

        # Links do not nest
        in_link = TokenKind.RBRACKET in context.enclosing

        if kind is TokenKind.REF:
            if not in_link and self._peek_token().kind is TokenKind.LPAREN:
                return self._parse_link(NodeKind.LINK, token, context)
            return ParseNode(NodeKind.REF, token=self._advance(), value=token.text[1:-1])

        if kind is TokenKind.LBRACKET:
            if not in_link and self._is_link_text(self.pos, context):
                return self._parse_link(NodeKind.LINK, token, context)
            return ParseNode(NodeKind.LITERAL, token=self._advance())

        if kind is TokenKind.BANG:
            following = self._peek_token()
            is_image = not in_link and (
                (following.kind is TokenKind.LBRACKET and self._is_link_text(self.pos + 1, context))
                or (following.kind is TokenKind.REF and self._peek_token(2).kind is TokenKind.LPAREN)
            )
            if is_image:
                self._advance()
                return self._parse_link(NodeKind.IMAGE, token, context)
            return ParseNode(NodeKind.LITERAL, token=self._advance())

        if kind in _LITERAL_INLINES:
            return ParseNode(NodeKind.LITERAL, token=self._advance())

        raise self._error(token, f"Unexpected {kind.display_name}")

    def _parse_strong(self, context: _InlineContext) -> ParseNode:
        opener = self._current_token()
        if self._find_closer(TokenKind.DOUBLE_STAR, context) < 0:
            raise self._error(opener, "Unclosed strong emphasis: missing closing **")

        self._advance()
        content = self._parse_inlines(context.closing(TokenKind.DOUBLE_STAR))
        closer = self._current_token()
        if closer.kind is not TokenKind.DOUBLE_STAR:
            raise self._error(closer, "Expected ** to close strong emphasis")
        self._advance()
        return ParseNode(NodeKind.STRONG, token=opener, children=content)

    def _parse_emph(self, context: _InlineContext) -> ParseNode:
        opener = self._current_token()
        if self._find_closer(TokenKind.STAR, context) < 0:
            # A lone asterisk is ordinary text
            return ParseNode(NodeKind.LITERAL, token=self._advance())

        self._advance()
        content = self._parse_inlines(context.closing(TokenKind.STAR))
        closer = self._current_token()
        if closer.kind is not TokenKind.STAR:
            raise self._error(closer, "Expected * to close emphasis")
        self._advance()
        return ParseNode(NodeKind.EMPH, token=opener, children=content)

    def _parse_link(self, kind: NodeKind, opener: Token, context: _InlineContext) -> ParseNode:
        """Parse ``[text](destination)``; the cursor is on the ``[`` or the ref token."""
        token = self._current_token()

        if token.kind is TokenKind.REF:
            self._advance()
            content = [ParseNode(NodeKind.LITERAL, token=token, value=token.text[1:-1])]
        else:
            self._advance()
            content = self._parse_inlines(context.closing(TokenKind.RBRACKET))
            closer = self._current_token()
            if closer.kind is not TokenKind.RBRACKET:
                raise self._error(closer, "Expected ] to close link text")
            self._advance()

        destination = self._parse_destination()
        return ParseNode(kind, token=opener, children=content, value=destination)

    def _parse_destination(self) -> str:
        """Parse ``(destination)`` and return the destination text."""
        self._advance()
        parts: list[str] = []
        depth = 0

        while True:
            token = self._current_token()
            if token.kind is TokenKind.RPAREN and depth == 0:
                self._advance()
                break
            if token.is_eof or token.kind in LINE_END_KINDS or token.kind is TokenKind.HARD_BREAK:
                raise self._error(token, "Expected ) to close link destination")
            if token.kind is TokenKind.LPAREN:
                depth += 1
            elif token.kind is TokenKind.RPAREN:
                depth -= 1
            parts.append(token.text)
            self._advance()

        return "".join(parts).strip()


def parse(tokens: Sequence[Token], sink: DiagnosticsCollector | None = None) -> tuple[ParseNode, DiagnosticsCollector]:
    """Parse a token stream.

    Parameters
    ----------
    tokens : sequence of Token
        Token stream ending with EOF
    sink : DiagnosticsCollector, optional
        Collector receiving syntax errors

    Returns
    -------
    tuple[ParseNode, DiagnosticsCollector]
        The DOCUMENT node (partial when errors were reported) and the collector

    """
    parser = Parser(tokens, sink)
    return parser.parse(), parser.sink
