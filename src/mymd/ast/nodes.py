#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/ast/nodes.py
"""AST node classes for the portable document tree.

This module defines the node hierarchy produced by the compiler. Every node is
a *tagged node*: its class carries the tag name used on the wire (``tag``) and
its fields are exactly the content that tag allows, nothing more. The external
conversion engine rejects any other shape, so node classes are kept minimal and
are not meant to carry editor-side extras.

Node Hierarchy
--------------
Block nodes:
    - Header, Para, CodeBlock, BulletList, OrderedList
    - BlockQuote, HorizontalRule, RawBlock

Inline nodes:
    - Str, Space, LineBreak, Strong, Emph, Code
    - Math, Link, Image, Cite, RawInline

Metadata nodes:
    - MetaBool, MetaString, MetaList, MetaMap, MetaInlines

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from mymd.constants import (
    DEFAULT_CITATION_HASH,
    DEFAULT_CITATION_MODE,
    DEFAULT_CITATION_NOTE_NUM,
    MAX_HEADING_LEVEL,
    PANDOC_API_VERSION,
    CitationMode,
    MathKind,
)


class ListNumberStyle(str, Enum):
    """Numbering alphabet of an ordered list."""

    DEFAULT_STYLE = "DefaultStyle"
    DECIMAL = "Decimal"
    LOWER_ROMAN = "LowerRoman"
    UPPER_ROMAN = "UpperRoman"
    LOWER_ALPHA = "LowerAlpha"
    UPPER_ALPHA = "UpperAlpha"


class ListNumberDelim(str, Enum):
    """Punctuation around an ordered list number."""

    DEFAULT_DELIM = "DefaultDelim"
    PERIOD = "Period"
    ONE_PAREN = "OneParen"
    TWO_PARENS = "TwoParens"


class Node:
    """Base class for all tagged nodes.

    Attributes
    ----------
    tag : str
        Tag name written to the ``"t"`` key on the wire

    """

    tag: ClassVar[str] = ""


class Block(Node):
    """Base class for block-level nodes."""


class Inline(Node):
    """Base class for inline nodes."""


class MetaNode(Node):
    """Base class for metadata value nodes."""


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Str(Inline):
    """Literal text without whitespace boundaries."""

    tag: ClassVar[str] = "Str"

    text: str


@dataclass
class Space(Inline):
    """Inter-word space; also produced for soft line breaks."""

    tag: ClassVar[str] = "Space"


@dataclass
class LineBreak(Inline):
    """Forced (hard) line break."""

    tag: ClassVar[str] = "LineBreak"


@dataclass
class Strong(Inline):
    """Strongly emphasized (bold) inline content."""

    tag: ClassVar[str] = "Strong"

    content: list[Inline] = field(default_factory=list)


@dataclass
class Emph(Inline):
    """Emphasized (italic) inline content."""

    tag: ClassVar[str] = "Emph"

    content: list[Inline] = field(default_factory=list)


@dataclass
class Code(Inline):
    """Inline code span."""

    tag: ClassVar[str] = "Code"

    text: str


@dataclass
class Math(Inline):
    """TeX math, inline or display.

    Parameters
    ----------
    kind : {"InlineMath", "DisplayMath"}
        Math kind written as the first content element
    text : str
        TeX source without the dollar delimiters

    """

    tag: ClassVar[str] = "Math"

    kind: MathKind
    text: str

    def __post_init__(self) -> None:
        """Validate the math kind."""
        if self.kind not in ("InlineMath", "DisplayMath"):
            raise ValueError(f"Unsupported math kind: {self.kind}")


@dataclass
class Link(Inline):
    """Hyperlink with inline link text."""

    tag: ClassVar[str] = "Link"

    content: list[Inline]
    url: str


@dataclass
class Image(Inline):
    """Image with inline alternative text."""

    tag: ClassVar[str] = "Image"

    alt_text: list[Inline]
    url: str


@dataclass
class Citation:
    """Structured citation record carried by a ``Cite`` node.

    Only the identifier comes from the source; the remaining fields are fixed
    defaults filled in so the engine can resolve the citation itself.

    """

    citation_id: str
    prefix: list[Inline] = field(default_factory=list)
    suffix: list[Inline] = field(default_factory=list)
    mode: CitationMode = DEFAULT_CITATION_MODE
    note_num: int = DEFAULT_CITATION_NOTE_NUM
    hash: int = DEFAULT_CITATION_HASH


@dataclass
class Cite(Inline):
    """Citation of a bibliography entry, written ``[@id]`` in the source.

    The node carries a structured :class:`Citation` plus a literal fallback
    rendering ``[@id]`` for consumers that cannot resolve citations.

    """

    tag: ClassVar[str] = "Cite"

    citation_id: str

    @property
    def citation(self) -> Citation:
        """Structured citation record for this node."""
        return Citation(citation_id=self.citation_id)

    @property
    def fallback(self) -> list[Inline]:
        """Literal inline rendering used when the citation is not resolved."""
        return [Str(f"[@{self.citation_id}]")]


@dataclass
class RawInline(Inline):
    """Inline content passed through verbatim in the given format."""

    tag: ClassVar[str] = "RawInline"

    format: str
    text: str


# ============================================================================
# Block Nodes
# ============================================================================


@dataclass
class Header(Block):
    """Heading with a level from 1 to 6."""

    tag: ClassVar[str] = "Header"

    level: int
    content: list[Inline] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if not 1 <= self.level <= MAX_HEADING_LEVEL:
            raise ValueError(f"Heading level must be 1-{MAX_HEADING_LEVEL}, got {self.level}")


@dataclass
class Para(Block):
    """Paragraph of inline content."""

    tag: ClassVar[str] = "Para"

    content: list[Inline] = field(default_factory=list)


@dataclass
class CodeBlock(Block):
    """Fenced code block.

    Parameters
    ----------
    text : str
        Code content, not parsed
    language : str, default ""
        Language tag from the opening fence; empty when absent

    """

    tag: ClassVar[str] = "CodeBlock"

    text: str
    language: str = ""


@dataclass
class BulletList(Block):
    """Unordered list; each item is a sequence of blocks."""

    tag: ClassVar[str] = "BulletList"

    items: list[list[Block]] = field(default_factory=list)


@dataclass
class ListAttributes:
    """Start number, numbering style and delimiter of an ordered list."""

    start: int = 1
    style: ListNumberStyle = ListNumberStyle.DECIMAL
    delim: ListNumberDelim = ListNumberDelim.PERIOD


@dataclass
class OrderedList(Block):
    """Numbered list; each item is a sequence of blocks."""

    tag: ClassVar[str] = "OrderedList"

    attrs: ListAttributes = field(default_factory=ListAttributes)
    items: list[list[Block]] = field(default_factory=list)


@dataclass
class BlockQuote(Block):
    """Quoted block content."""

    tag: ClassVar[str] = "BlockQuote"

    content: list[Block] = field(default_factory=list)


@dataclass
class HorizontalRule(Block):
    """Thematic break."""

    tag: ClassVar[str] = "HorizontalRule"


@dataclass
class RawBlock(Block):
    """Block content passed through verbatim in the given format."""

    tag: ClassVar[str] = "RawBlock"

    format: str
    text: str


# ============================================================================
# Metadata Nodes
# ============================================================================


@dataclass
class MetaBool(MetaNode):
    """Boolean metadata value."""

    tag: ClassVar[str] = "MetaBool"

    value: bool


@dataclass
class MetaString(MetaNode):
    """Scalar metadata value in its string form."""

    tag: ClassVar[str] = "MetaString"

    text: str


@dataclass
class MetaList(MetaNode):
    """Sequence of metadata values."""

    tag: ClassVar[str] = "MetaList"

    items: list[MetaNode] = field(default_factory=list)


@dataclass
class MetaMap(MetaNode):
    """Nested mapping of metadata values."""

    tag: ClassVar[str] = "MetaMap"

    entries: dict[str, MetaNode] = field(default_factory=dict)


@dataclass
class MetaInlines(MetaNode):
    """Metadata value made of inline nodes."""

    tag: ClassVar[str] = "MetaInlines"

    content: list[Inline] = field(default_factory=list)


# ============================================================================
# Document
# ============================================================================


@dataclass
class Document:
    """Root of a compiled document.

    Parameters
    ----------
    blocks : list of Block, default = empty list
        Top-level blocks in source order
    meta : dict of str to MetaNode, default = empty dict
        Document metadata converted from the front matter
    api_version : tuple of int
        Version triple of the document AST schema

    """

    blocks: list[Block] = field(default_factory=list)
    meta: dict[str, MetaNode] = field(default_factory=dict)
    api_version: tuple[int, int, int] = PANDOC_API_VERSION
