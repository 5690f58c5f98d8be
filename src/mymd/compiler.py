#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/compiler.py
"""Compiler facade: source markup in, document JSON or diagnostics out.

The pipeline is strictly linear::

    tokenize -> parse -> [diagnostics? stop] -> build AST -> serialize

Lexical and syntax problems of the whole source are reported together.
Tree construction is all-or-nothing: a failure while building the AST or
serializing it becomes one unlocated diagnostic prefixed ``Compiler Error:``.
Every call uses fresh tokenizer, parser and collector instances, so
concurrent calls share nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from mymd.ast.nodes import Document
from mymd.ast.serialization import ast_to_json
from mymd.constants import COMPILER_ERROR_PREFIX
from mymd.options import CompilerOptions
from mymd.parsers.diagnostics import Diagnostic, DiagnosticsCollector
from mymd.parsers.grammar import Parser
from mymd.parsers.lexer import Tokenizer
from mymd.parsers.visitor import PandocAstBuilder

logger = logging.getLogger(__name__)


@dataclass
class CompilationResult:
    """Outcome of one compile call.

    Exactly one of two shapes is produced: a document with its JSON and no
    diagnostics, or diagnostics with neither document nor JSON.

    Parameters
    ----------
    document : Document or None
        Compiled document
    document_json : str or None
        Serialized document
    diagnostics : list of Diagnostic
        Problems found, in report order

    """

    document: Document | None = None
    document_json: str | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Whether compilation failed."""
        return bool(self.diagnostics)


def _failure_message(error: Exception) -> str:
    message = str(error)
    return f"{COMPILER_ERROR_PREFIX}{message or type(error).__name__}"


def compile(source: str, options: CompilerOptions | None = None) -> CompilationResult:  # noqa: A001
    """Compile source markup into a portable document tree.

    Parameters
    ----------
    source : str
        Complete source text
    options : CompilerOptions, optional
        Compiler options; defaults are used when omitted

    Returns
    -------
    CompilationResult
        Document and JSON on success, diagnostics otherwise

    Examples
    --------
        >>> result = compile("Hello *world*")
        >>> result.has_errors
        False
        >>> result.document.blocks[0].content[2]
        Emph(content=[Str(text='world')])

    """
    options = options or CompilerOptions()
    sink = DiagnosticsCollector()

    tokens = Tokenizer(source, sink).tokenize()
    tree = Parser(tokens, sink).parse()

    if sink.has_errors():
        logger.debug("Compilation stopped with %d diagnostics", len(sink))
        return CompilationResult(diagnostics=sink.diagnostics)

    try:
        document = PandocAstBuilder(options).visit(tree)
        document_json = ast_to_json(document, indent=options.json_indent, ensure_ascii=options.ensure_ascii)
    except Exception as e:
        logger.debug("Tree construction failed", exc_info=True)
        failure = Diagnostic(line=0, column=0, start_index=0, end_index=0, message=_failure_message(e))
        return CompilationResult(diagnostics=[failure])

    return CompilationResult(document=document, document_json=document_json)
