#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/parsers/visitor.py
"""Conversion of a parse tree into the document AST.

:class:`PandocAstBuilder` walks a :class:`~mymd.parsers.grammar.ParseNode`
tree and returns a :class:`~mymd.ast.nodes.Document`. Each node kind has one
builder function, looked up in a dispatch table. The walk keeps no state
between calls: metadata and blocks are accumulated in locals of
:meth:`PandocAstBuilder.visit` and returned with the document.

The builder must only be given a tree for which the parser reported no
diagnostics. It either builds the whole document or raises.
"""

from __future__ import annotations

import logging
from typing import Callable

from mymd.ast.nodes import (
    Block,
    BlockQuote,
    BulletList,
    Cite,
    Code,
    CodeBlock,
    Document,
    Emph,
    Header,
    HorizontalRule,
    Image,
    Inline,
    LineBreak,
    Link,
    Math,
    MetaNode,
    OrderedList,
    Para,
    RawBlock,
    RawInline,
    Space,
    Str,
    Strong,
)
from mymd.constants import CODE_FENCE, DISPLAY_MATH_DELIMITER
from mymd.exceptions import ParsingError
from mymd.options import CompilerOptions
from mymd.parsers.grammar import NodeKind, ParseNode
from mymd.parsers.list_marker import check_consistency
from mymd.parsers.metadata import front_matter_to_meta

logger = logging.getLogger(__name__)

_REF_PREFIX = "\\ref{"
_LABEL_TEMPLATE = "\\label{{{}}}"


def merge_adjacent_str(inlines: list[Inline]) -> list[Inline]:
    """Join runs of consecutive ``Str`` nodes into a single ``Str``."""
    merged: list[Inline] = []
    for node in inlines:
        if isinstance(node, Str) and merged and isinstance(merged[-1], Str):
            merged[-1] = Str(merged[-1].text + node.text)
        else:
            merged.append(node)
    return merged


def split_code_fence(token_text: str) -> tuple[str, str]:
    """Split a fenced code block into ``(language, code)``.

    The text up to the first line break is the language tag; the rest is
    the code. Without a line break the whole inner text is code.
    """
    inner = token_text[len(CODE_FENCE) : -len(CODE_FENCE)]
    newline = inner.find("\n")
    if newline < 0:
        return "", inner
    return inner[:newline].strip(), inner[newline + 1 :]


def _strip_backticks(token_text: str) -> str:
    run = len(token_text) - len(token_text.lstrip("`"))
    return token_text[run:-run]


class PandocAstBuilder:
    """Build the document AST from a parse tree.

    Parameters
    ----------
    options : CompilerOptions, optional
        Compiler options; defaults are used when omitted

    Examples
    --------
        >>> from mymd.parsers.lexer import tokenize
        >>> from mymd.parsers.grammar import parse
        >>> tree, _ = parse(tokenize("# Title")[0])
        >>> PandocAstBuilder().visit(tree).blocks
        [Header(level=1, content=[Str(text='Title')])]

    """

    def __init__(self, options: CompilerOptions | None = None):
        """Initialize the builder with compiler options."""
        self.options = options or CompilerOptions()

        self._block_builders: dict[NodeKind, Callable[[ParseNode], Block]] = {
            NodeKind.HEADING: self._build_heading,
            NodeKind.PARAGRAPH: self._build_paragraph,
            NodeKind.CODE_BLOCK: self._build_code_block,
            NodeKind.RAW_BLOCK: self._build_raw_block,
            NodeKind.MATH_BLOCK: self._build_math_block,
            NodeKind.HORIZONTAL_RULE: lambda node: HorizontalRule(),
            NodeKind.BLOCK_QUOTE: self._build_block_quote,
            NodeKind.BULLET_LIST: self._build_bullet_list,
            NodeKind.ORDERED_LIST: self._build_ordered_list,
        }

        self._inline_builders: dict[NodeKind, Callable[[ParseNode], Inline]] = {
            NodeKind.TEXT: lambda node: Str(node.text),
            NodeKind.LITERAL: lambda node: Str(node.value if node.value is not None else node.text),
            NodeKind.SPACE: lambda node: Space(),
            NodeKind.SOFT_BREAK: lambda node: Space(),
            NodeKind.HARD_BREAK: lambda node: LineBreak(),
            NodeKind.ESCAPE: lambda node: Str(node.text[1:]),
            NodeKind.STRONG: lambda node: Strong(self._build_inlines(node.children)),
            NodeKind.EMPH: lambda node: Emph(self._build_inlines(node.children)),
            NodeKind.CODE: lambda node: Code(_strip_backticks(node.text)),
            NodeKind.MATH: lambda node: Math("InlineMath", node.text[1:-1]),
            NodeKind.DISPLAY_MATH: self._build_display_math,
            NodeKind.LINK: lambda node: Link(self._build_inlines(node.children), node.value or ""),
            NodeKind.IMAGE: lambda node: Image(self._build_inlines(node.children), node.value or ""),
            NodeKind.CITATION: lambda node: Cite(node.text[2:-1]),
            NodeKind.REF: lambda node: RawInline(self.options.raw_format, f"{_REF_PREFIX}{node.value}}}"),
            NodeKind.RAW_INLINE: lambda node: RawInline(self.options.raw_format, node.text),
        }

    def visit(self, tree: ParseNode) -> Document:
        """Build a document from a DOCUMENT parse node.

        Parameters
        ----------
        tree : ParseNode
            Root of an error-free parse tree

        Returns
        -------
        Document
            The complete document

        Raises
        ------
        ParsingError
            If the tree contains a node that cannot be converted
        ListMarkerError
            If an ordered list mixes incompatible markers

        """
        if tree.kind is not NodeKind.DOCUMENT:
            raise ParsingError(f"Expected a document node, got {tree.kind.name}", parsing_stage="visit")

        meta: dict[str, MetaNode] = {}
        blocks: list[Block] = []

        for child in tree.children:
            if child.kind is NodeKind.FRONT_MATTER:
                if self.options.parse_front_matter:
                    meta.update(front_matter_to_meta(child.text, self.options.raw_format))
                continue
            blocks.append(self._build_block(child))

        logger.debug("Built document with %d blocks and %d metadata keys", len(blocks), len(meta))
        return Document(blocks=blocks, meta=meta)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _build_block(self, node: ParseNode) -> Block:
        builder = self._block_builders.get(node.kind)
        if builder is None:
            raise ParsingError(f"Unexpected {node.kind.name} node at block level", parsing_stage="visit")
        return builder(node)

    def _build_inline(self, node: ParseNode) -> Inline:
        builder = self._inline_builders.get(node.kind)
        if builder is None:
            raise ParsingError(f"Unexpected {node.kind.name} node in inline content", parsing_stage="visit")
        return builder(node)

    def _build_inlines(self, nodes: list[ParseNode]) -> list[Inline]:
        return merge_adjacent_str([self._build_inline(node) for node in nodes])

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _build_heading(self, node: ParseNode) -> Header:
        content = self._build_inlines(node.children)

        # A trailing reference becomes the heading's label
        last = content[-1] if content else None
        if (
            isinstance(last, RawInline)
            and last.format == self.options.raw_format
            and last.text.startswith(_REF_PREFIX)
            and last.text.endswith("}")
        ):
            label = last.text[len(_REF_PREFIX) : -1]
            content[-1] = RawInline(last.format, _LABEL_TEMPLATE.format(label))

        return Header(level=len(node.text), content=content)

    def _build_paragraph(self, node: ParseNode) -> Para:
        return Para(self._build_inlines(node.children))

    def _build_code_block(self, node: ParseNode) -> CodeBlock:
        language, code = split_code_fence(node.text)
        return CodeBlock(text=code, language=language)

    def _build_raw_block(self, node: ParseNode) -> RawBlock:
        return RawBlock(self.options.raw_format, node.text)

    def _build_math_block(self, node: ParseNode) -> Para:
        math = self._build_display_math(node)
        if node.value:
            math = Math("DisplayMath", f"{math.text} {_LABEL_TEMPLATE.format(node.value)}")
        return Para([math])

    def _build_display_math(self, node: ParseNode) -> Math:
        delimiter = len(DISPLAY_MATH_DELIMITER)
        return Math("DisplayMath", node.text[delimiter:-delimiter].strip())

    def _build_block_quote(self, node: ParseNode) -> BlockQuote:
        content = self._build_inlines(node.children)
        return BlockQuote([Para(content)] if content else [])

    def _build_list_item(self, node: ParseNode) -> list[Block]:
        blocks: list[Block] = []
        head = self._build_inlines(node.children)
        if head:
            blocks.append(Para(head))
        blocks.extend(self._build_block(child) for child in node.body)
        return blocks

    def _build_bullet_list(self, node: ParseNode) -> BulletList:
        return BulletList([self._build_list_item(item) for item in node.children])

    def _build_ordered_list(self, node: ParseNode) -> OrderedList:
        attrs = check_consistency(item.text for item in node.children)
        return OrderedList(attrs=attrs, items=[self._build_list_item(item) for item in node.children])
