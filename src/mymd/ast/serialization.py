#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/ast/serialization.py
"""JSON serialization and deserialization for document trees.

This module converts documents to and from the portable document AST JSON
format consumed by the external conversion engine. Every node is written as
``{"t": <tag>, "c": <content>}``; the content key is omitted for tags without
content (Space, LineBreak, HorizontalRule).

Examples
--------
Serialize a document:

    >>> from mymd.ast import Document, Para, Str
    >>> from mymd.ast.serialization import ast_to_json
    >>> doc = Document(blocks=[Para(content=[Str("Hi")])])
    >>> ast_to_json(doc)
    '{"pandoc-api-version":[1,23,1],"meta":{},"blocks":[{"t":"Para","c":[{"t":"Str","c":"Hi"}]}]}'

Deserialize it again:

    >>> from mymd.ast.serialization import json_to_ast
    >>> json_to_ast(ast_to_json(doc)) == doc
    True

"""

from __future__ import annotations

import json
from typing import Any, Callable, cast

from mymd.ast.nodes import (
    Block,
    BlockQuote,
    BulletList,
    Cite,
    Citation,
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
    ListAttributes,
    ListNumberDelim,
    ListNumberStyle,
    Math,
    MetaBool,
    MetaInlines,
    MetaList,
    MetaMap,
    MetaNode,
    MetaString,
    Node,
    OrderedList,
    Para,
    RawBlock,
    RawInline,
    Space,
    Str,
    Strong,
)
from mymd.constants import (
    API_VERSION_KEY,
    BLOCKS_KEY,
    CONTENT_KEY,
    IMAGE_TARGET_TITLE,
    META_KEY,
    TAG_KEY,
)
from mymd.exceptions import RenderingError


def _empty_attr(classes: list[str] | None = None) -> list[Any]:
    """Return an attribute triple ``[identifier, classes, key-value pairs]``."""
    return ["", list(classes or []), []]


def _tagged(tag: str, content: Any = None) -> dict[str, Any]:
    if content is None:
        return {TAG_KEY: tag}
    return {TAG_KEY: tag, CONTENT_KEY: content}


def _inlines(nodes: list[Inline]) -> list[dict[str, Any]]:
    return [ast_to_dict(node) for node in nodes]


def _blocks(nodes: list[Block]) -> list[dict[str, Any]]:
    return [ast_to_dict(node) for node in nodes]


def _serialize_citation(citation: Citation) -> dict[str, Any]:
    """Serialize the structured record inside a Cite node."""
    return {
        "citationId": citation.citation_id,
        "citationPrefix": _inlines(citation.prefix),
        "citationSuffix": _inlines(citation.suffix),
        "citationMode": _tagged(citation.mode),
        "citationNoteNum": citation.note_num,
        "citationHash": citation.hash,
    }


def _serialize_list_attributes(attrs: ListAttributes) -> list[Any]:
    return [attrs.start, _tagged(attrs.style.value), _tagged(attrs.delim.value)]


def _serialize_empty(node: Node) -> dict[str, Any]:
    return _tagged(node.tag)


def _serialize_inline_container(node: Node) -> dict[str, Any]:
    return _tagged(node.tag, _inlines(node.content))  # type: ignore[attr-defined]


def _serialize_raw(node: RawBlock | RawInline) -> dict[str, Any]:
    return _tagged(node.tag, [node.format, node.text])


# Dispatch table: node class -> serializer
_SERIALIZATION_DISPATCH: dict[type, Callable[[Any], dict[str, Any]]] = {
    # Inline nodes
    Str: lambda node: _tagged(Str.tag, node.text),
    Space: _serialize_empty,
    LineBreak: _serialize_empty,
    Strong: _serialize_inline_container,
    Emph: _serialize_inline_container,
    Code: lambda node: _tagged(Code.tag, [_empty_attr(), node.text]),
    Math: lambda node: _tagged(Math.tag, [_tagged(node.kind), node.text]),
    Link: lambda node: _tagged(Link.tag, [_empty_attr(), _inlines(node.content), [node.url, ""]]),
    Image: lambda node: _tagged(Image.tag, [_empty_attr(), _inlines(node.alt_text), [node.url, IMAGE_TARGET_TITLE]]),
    Cite: lambda node: _tagged(Cite.tag, [[_serialize_citation(node.citation)], _inlines(node.fallback)]),
    RawInline: _serialize_raw,
    # Block nodes
    Header: lambda node: _tagged(Header.tag, [node.level, _empty_attr(), _inlines(node.content)]),
    Para: _serialize_inline_container,
    CodeBlock: lambda node: _tagged(
        CodeBlock.tag, [_empty_attr([node.language] if node.language else None), node.text]
    ),
    BulletList: lambda node: _tagged(BulletList.tag, [_blocks(item) for item in node.items]),
    OrderedList: lambda node: _tagged(
        OrderedList.tag, [_serialize_list_attributes(node.attrs), [_blocks(item) for item in node.items]]
    ),
    BlockQuote: lambda node: _tagged(BlockQuote.tag, _blocks(node.content)),
    HorizontalRule: _serialize_empty,
    RawBlock: _serialize_raw,
    # Metadata nodes
    MetaBool: lambda node: _tagged(MetaBool.tag, bool(node.value)),
    MetaString: lambda node: _tagged(MetaString.tag, node.text),
    MetaList: lambda node: _tagged(MetaList.tag, [ast_to_dict(item) for item in node.items]),
    MetaMap: lambda node: _tagged(MetaMap.tag, {key: ast_to_dict(value) for key, value in node.entries.items()}),
    MetaInlines: _serialize_inline_container,
}


def ast_to_dict(node: Node | Document) -> dict[str, Any]:
    """Convert a node or a whole document to its wire-format dictionary.

    Parameters
    ----------
    node : Node or Document
        The node to convert

    Returns
    -------
    dict
        JSON-compatible dictionary

    Raises
    ------
    RenderingError
        If the node type has no wire-format representation

    Examples
    --------
    >>> ast_to_dict(Str("Hello"))
    {'t': 'Str', 'c': 'Hello'}
    >>> ast_to_dict(Space())
    {'t': 'Space'}

    """
    if isinstance(node, Document):
        return {
            API_VERSION_KEY: list(node.api_version),
            META_KEY: {key: ast_to_dict(value) for key, value in node.meta.items()},
            BLOCKS_KEY: _blocks(node.blocks),
        }

    serializer = _SERIALIZATION_DISPATCH.get(type(node))
    if serializer:
        return serializer(node)

    raise RenderingError(f"Unknown node type for serialization: {type(node).__name__}", rendering_stage="json")


def ast_to_json(document: Document, indent: int | None = None, ensure_ascii: bool = False) -> str:
    """Serialize a document to a JSON string.

    Parameters
    ----------
    document : Document
        Document to serialize
    indent : int or None, default None
        JSON indentation; None produces compact output without spaces
    ensure_ascii : bool, default False
        Escape non-ASCII characters

    Returns
    -------
    str
        JSON document

    """
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(ast_to_dict(document), indent=indent, ensure_ascii=ensure_ascii, separators=separators)


# ============================================================================
# Deserialization
# ============================================================================


def _content(data: dict[str, Any]) -> Any:
    return data.get(CONTENT_KEY)


def _to_inlines(items: list[dict[str, Any]]) -> list[Inline]:
    return [cast(Inline, dict_to_ast(item)) for item in items]


def _to_blocks(items: list[dict[str, Any]]) -> list[Block]:
    return [cast(Block, dict_to_ast(item)) for item in items]


def _deserialize_code_block(data: dict[str, Any]) -> CodeBlock:
    attr, text = _content(data)
    classes = attr[1]
    return CodeBlock(text=text, language=classes[0] if classes else "")


def _deserialize_ordered_list(data: dict[str, Any]) -> OrderedList:
    (start, style, delim), items = _content(data)
    attrs = ListAttributes(
        start=start, style=ListNumberStyle(style[TAG_KEY]), delim=ListNumberDelim(delim[TAG_KEY])
    )
    return OrderedList(attrs=attrs, items=[_to_blocks(item) for item in items])


def _deserialize_cite(data: dict[str, Any]) -> Cite:
    citations, _fallback = _content(data)
    if not citations:
        raise RenderingError("Cite node without a citation record", rendering_stage="json")
    return Cite(citation_id=citations[0]["citationId"])


_DESERIALIZATION_DISPATCH: dict[str, Callable[[dict[str, Any]], Node]] = {
    # Inline nodes
    Str.tag: lambda data: Str(_content(data)),
    Space.tag: lambda data: Space(),
    LineBreak.tag: lambda data: LineBreak(),
    Strong.tag: lambda data: Strong(content=_to_inlines(_content(data))),
    Emph.tag: lambda data: Emph(content=_to_inlines(_content(data))),
    Code.tag: lambda data: Code(_content(data)[1]),
    Math.tag: lambda data: Math(kind=_content(data)[0][TAG_KEY], text=_content(data)[1]),
    Link.tag: lambda data: Link(content=_to_inlines(_content(data)[1]), url=_content(data)[2][0]),
    Image.tag: lambda data: Image(alt_text=_to_inlines(_content(data)[1]), url=_content(data)[2][0]),
    Cite.tag: _deserialize_cite,
    RawInline.tag: lambda data: RawInline(format=_content(data)[0], text=_content(data)[1]),
    # Block nodes
    Header.tag: lambda data: Header(level=_content(data)[0], content=_to_inlines(_content(data)[2])),
    Para.tag: lambda data: Para(content=_to_inlines(_content(data))),
    CodeBlock.tag: _deserialize_code_block,
    BulletList.tag: lambda data: BulletList(items=[_to_blocks(item) for item in _content(data)]),
    OrderedList.tag: _deserialize_ordered_list,
    BlockQuote.tag: lambda data: BlockQuote(content=_to_blocks(_content(data))),
    HorizontalRule.tag: lambda data: HorizontalRule(),
    RawBlock.tag: lambda data: RawBlock(format=_content(data)[0], text=_content(data)[1]),
    # Metadata nodes
    MetaBool.tag: lambda data: MetaBool(bool(_content(data))),
    MetaString.tag: lambda data: MetaString(_content(data)),
    MetaList.tag: lambda data: MetaList(items=[cast(MetaNode, dict_to_ast(item)) for item in _content(data)]),
    MetaMap.tag: lambda data: MetaMap(
        entries={key: cast(MetaNode, dict_to_ast(value)) for key, value in _content(data).items()}
    ),
    MetaInlines.tag: lambda data: MetaInlines(content=_to_inlines(_content(data))),
}


def dict_to_ast(data: dict[str, Any]) -> Node | Document:
    """Convert a wire-format dictionary back to a node or document.

    Parameters
    ----------
    data : dict
        Dictionary produced by :func:`ast_to_dict` (or an equivalent engine)

    Returns
    -------
    Node or Document
        Reconstructed node; a Document when ``data`` is a top-level object

    Raises
    ------
    RenderingError
        If the dictionary is not a known tagged node

    """
    if API_VERSION_KEY in data:
        version = tuple(data[API_VERSION_KEY])
        if len(version) != 3:
            raise RenderingError(f"Expected a version triple, got {list(version)}", rendering_stage="json")
        return Document(
            blocks=_to_blocks(data.get(BLOCKS_KEY, [])),
            meta={key: cast(MetaNode, dict_to_ast(value)) for key, value in data.get(META_KEY, {}).items()},
            api_version=cast(tuple[int, int, int], version),
        )

    tag = data.get(TAG_KEY)
    deserializer = _DESERIALIZATION_DISPATCH.get(tag) if isinstance(tag, str) else None
    if deserializer is None:
        raise RenderingError(f"Unknown node tag: {tag!r}", rendering_stage="json")
    return deserializer(data)


def json_to_ast(json_str: str) -> Document:
    """Parse a JSON document string into a Document.

    Parameters
    ----------
    json_str : str
        JSON text with the three top-level keys

    Returns
    -------
    Document
        Reconstructed document

    Raises
    ------
    RenderingError
        If the JSON does not describe a document

    """
    node = dict_to_ast(json.loads(json_str))
    if not isinstance(node, Document):
        raise RenderingError(f"Expected a document, got {type(node).__name__}", rendering_stage="json")
    return node
