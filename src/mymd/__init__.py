"""mymd - A compiler from lightweight academic markup to portable document JSON.

mymd reads a Markdown-like source dialect with LaTeX conveniences (display
math with labels, raw LaTeX environments and commands, ``[id]``
cross-references, ``[@id]`` citations, YAML front matter) and produces the
JSON document tree understood by pandoc, which then renders PDF, DOCX, HTML
and other formats.

The pipeline is tokenizer -> parser -> AST builder -> serializer. Lexical and
syntax errors are collected as located diagnostics rather than raised, so a
single call reports every problem in the source.

Requirements
------------
- Python 3.10+

Examples
--------
Compile a string:

    >>> from mymd import compile
    >>> result = compile("# Results [sec:results]")
    >>> print(result.document_json)
    {"pandoc-api-version":[1,23,1],"meta":{},"blocks":[{"t":"Header","c":[1,["",[],[]],[{"t":"Str","c":"Results"},{"t":"Space"},{"t":"RawInline","c":["latex","\\\\label{sec:results}"]}]]}]}

Report errors:

    >>> result = compile("**never closed")
    >>> [str(d) for d in result.diagnostics]
    ['Line 0:0 Syntax Error: Unclosed strong emphasis: missing closing **']

See Also
--------
mymd.ast : AST node definitions and the JSON wire format
mymd.parsers : tokenizer, parser and AST builder

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "mymd requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from mymd.ast import Document, ast_to_json, json_to_ast
from mymd.compiler import CompilationResult, compile
from mymd.exceptions import ListMarkerError, MetadataError, MyMdError, ParsingError, RenderingError, ValidationError
from mymd.options import CompilerOptions
from mymd.parsers.diagnostics import Diagnostic, error_ranges

__all__ = [
    "__version__",
    # Compilation
    "compile",
    "CompilationResult",
    "CompilerOptions",
    "Diagnostic",
    "error_ranges",
    # Document tree
    "Document",
    "ast_to_json",
    "json_to_ast",
    # Exceptions
    "MyMdError",
    "ValidationError",
    "ParsingError",
    "ListMarkerError",
    "MetadataError",
    "RenderingError",
]
