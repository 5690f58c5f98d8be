#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/ast/__init__.py
"""Document tree produced by the mymd compiler.

The module consists of two components:

- nodes: tagged node classes mirroring the portable document AST schema
- serialization: conversion between node trees and the JSON wire format

Examples
--------
    >>> from mymd.ast import Document, Header, Str
    >>> from mymd.ast.serialization import ast_to_json
    >>> doc = Document(blocks=[Header(level=1, content=[Str("Title")])])
    >>> ast_to_json(doc)
    '{"pandoc-api-version":[1,23,1],"meta":{},"blocks":[{"t":"Header","c":[1,["",[],[]],[{"t":"Str","c":"Title"}]]}]}'

"""

from __future__ import annotations

from mymd.ast.nodes import (
    Block,
    BlockQuote,
    BulletList,
    Citation,
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
from mymd.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast

__all__ = [
    # Base classes
    "Node",
    "Block",
    "Inline",
    "MetaNode",
    "Document",
    # Block nodes
    "Header",
    "Para",
    "CodeBlock",
    "BulletList",
    "OrderedList",
    "ListAttributes",
    "ListNumberStyle",
    "ListNumberDelim",
    "BlockQuote",
    "HorizontalRule",
    "RawBlock",
    # Inline nodes
    "Str",
    "Space",
    "LineBreak",
    "Strong",
    "Emph",
    "Code",
    "Math",
    "Link",
    "Image",
    "Cite",
    "Citation",
    "RawInline",
    # Metadata nodes
    "MetaBool",
    "MetaString",
    "MetaList",
    "MetaMap",
    "MetaInlines",
    # Serialization
    "ast_to_dict",
    "ast_to_json",
    "dict_to_ast",
    "json_to_ast",
]
