#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/parsers/__init__.py
"""Front end of the mymd compiler.

The package consists of the following components:

- tokens / lexer: turn source text into a token stream
- grammar: recursive-descent parser producing a tagged parse tree
- diagnostics: located error records shared by lexer and parser
- list_marker: ordered-list marker classification and consistency
- metadata: YAML front matter to document metadata
- visitor: parse tree to document AST

"""

from mymd.parsers.diagnostics import Diagnostic, DiagnosticsCollector, error_ranges
from mymd.parsers.grammar import NodeKind, ParseNode, Parser, parse
from mymd.parsers.lexer import Tokenizer, tokenize
from mymd.parsers.tokens import Token, TokenKind
from mymd.parsers.visitor import PandocAstBuilder

__all__ = [
    "Token",
    "TokenKind",
    "Tokenizer",
    "tokenize",
    "NodeKind",
    "ParseNode",
    "Parser",
    "parse",
    "Diagnostic",
    "DiagnosticsCollector",
    "error_ranges",
    "PandocAstBuilder",
]
