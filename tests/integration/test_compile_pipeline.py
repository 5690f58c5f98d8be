#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Integration tests for the compiler facade."""

import json
import threading

import pytest

from mymd import CompilationResult, CompilerOptions, compile, error_ranges
from mymd.ast import (
    BulletList,
    Cite,
    CodeBlock,
    Header,
    ListAttributes,
    ListNumberDelim,
    ListNumberStyle,
    Math,
    MetaBool,
    MetaList,
    MetaString,
    OrderedList,
    Para,
    RawInline,
    Space,
    Str,
    json_to_ast,
)


def assert_exclusive(result: CompilationResult) -> None:
    """A result carries either a document or diagnostics, never both."""
    assert (result.document is None) == bool(result.diagnostics)
    assert (result.document_json is None) == bool(result.diagnostics)


@pytest.mark.integration
class TestCompileSuccess:
    """Sources that compile cleanly."""

    def test_wire_format_top_level(self) -> None:
        """Test the three top-level keys and the API version."""
        result = compile("Hello world")
        data = json.loads(result.document_json)

        assert set(data) == {"pandoc-api-version", "meta", "blocks"}
        assert data["pandoc-api-version"] == [1, 23, 1]

    def test_paragraph(self) -> None:
        """Test the inline sequence of a simple paragraph."""
        result = compile("Hello world")

        assert result.document.blocks == [Para([Str("Hello"), Space(), Str("world")])]

    def test_heading(self) -> None:
        """Test heading level and content."""
        result = compile("# My Title")

        assert result.document.blocks == [Header(level=1, content=[Str("My"), Space(), Str("Title")])]

    def test_decimal_list(self) -> None:
        """Test resolved attributes of a numbered list."""
        result = compile("1. one\n2. two\n3. three")

        assert result.document.blocks[0].attrs == ListAttributes(1, ListNumberStyle.DECIMAL, ListNumberDelim.PERIOD)

    @pytest.mark.parametrize("source", ["a. x\nb. y", "i. x\nii. y", "a. x\nii. y"])
    def test_alpha_and_roman_lists(self, source: str) -> None:
        """Test alphabetic, roman and tolerated mixed lists."""
        result = compile(source)

        assert not result.has_errors
        assert isinstance(result.document.blocks[0], OrderedList)

    def test_escapes(self) -> None:
        """Test that escaped markers never open formatting."""
        result = compile("\\*not italic\\*")

        assert result.document.blocks == [Para([Str("*not"), Space(), Str("italic*")])]

    def test_front_matter(self) -> None:
        """Test front matter conversion into metadata."""
        result = compile("---\ntitle: Test\n---\n# H")

        assert result.document.meta == {"title": MetaString("Test")}
        assert json.loads(result.document_json)["meta"] == {"title": {"t": "MetaString", "c": "Test"}}

    def test_invalid_front_matter_still_compiles(self) -> None:
        """Test that malformed YAML leaves the metadata empty."""
        result = compile("---\ntitle: [oops\n---\nBody")

        assert not result.has_errors
        assert result.document.meta == {}
        assert result.document.blocks == [Para([Str("Body")])]

    def test_self_referential_front_matter_still_compiles(self) -> None:
        """Test that a recursive YAML alias leaves the metadata empty."""
        result = compile("---\na: &x [*x]\n---\nBody")

        assert not result.has_errors
        assert result.document.meta == {}
        assert result.document.blocks == [Para([Str("Body")])]

    def test_sample_document(self, sample_source: str) -> None:
        """Test a document using most of the markup."""
        result = compile(sample_source)

        assert not result.has_errors, result.diagnostics
        document = result.document
        assert document.meta == {
            "title": MetaString("Sample Paper"),
            "draft": MetaBool(False),
            "authors": MetaList([MetaString("Ada"), MetaString("Grace")]),
        }

        heading, paragraph, ordered, math, code = document.blocks
        assert heading == Header(
            level=1, content=[Str("Introduction"), Space(), RawInline("latex", "\\label{sec:intro}")]
        )
        assert Cite("knuth84") in paragraph.content
        assert RawInline("latex", "\\ref{sec:method}") in paragraph.content
        assert Math("InlineMath", "x^2") in paragraph.content
        assert ordered.items[1] == [Para([Str("Second")]), BulletList([[Para([Str("nested"), Space(), Str("bullet")])]])]
        assert math == Para([Math("DisplayMath", "E = mc^2 \\label{eq:energy}")])
        assert code == CodeBlock(text='print("hi")\n', language="python")

    def test_json_round_trip(self, sample_source: str) -> None:
        """Test that the JSON output rebuilds the same document."""
        result = compile(sample_source)

        assert json_to_ast(result.document_json) == result.document

    def test_options(self) -> None:
        """Test indentation and raw format options."""
        result = compile("see [a]", CompilerOptions(json_indent=2, raw_format="tex"))

        assert result.document_json.startswith("{\n  ")
        assert result.document.blocks[0].content[-1] == RawInline("tex", "\\ref{a}")

    def test_empty_source(self) -> None:
        """Test that an empty source is an empty document."""
        result = compile("")

        assert result.document.blocks == []
        assert result.diagnostics == []


@pytest.mark.integration
class TestCompileFailure:
    """Sources that produce diagnostics."""

    def test_syntax_errors_are_collected(self) -> None:
        """Test several independent errors in one call."""
        result = compile("**a\n\n# \n\n**b")

        assert result.has_errors
        assert len(result.diagnostics) == 3
        assert result.document is None
        assert result.document_json is None

    def test_lexical_and_syntax_errors_together(self) -> None:
        """Test that lexical errors are reported with syntax errors."""
        result = compile("$x\n\n**y")
        messages = [d.message for d in result.diagnostics]

        assert messages[0].startswith("Lexical Error:")
        assert messages[1].startswith("Syntax Error:")

    def test_list_marker_mismatch(self) -> None:
        """Test the single unlocated error of a semantic failure."""
        result = compile("1. one\na) two")

        assert result.document is None
        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.message.startswith("Compiler Error: Syntax Error: List marker mismatch")
        assert (diagnostic.line, diagnostic.column, diagnostic.start_index, diagnostic.end_index) == (0, 0, 0, 0)

    def test_alpha_then_decimal_is_rejected(self) -> None:
        """Test that the tolerance does not cover decimal markers."""
        result = compile("a. x\n2. y")

        assert result.has_errors
        assert result.diagnostics[0].message.startswith("Compiler Error:")

    def test_error_ranges_for_editor(self) -> None:
        """Test painting ranges derived from compile diagnostics."""
        source = "**a\n\n$b"
        result = compile(source)

        assert error_ranges(source, result.diagnostics) == [(0, 2), (5, 6)]


@pytest.mark.integration
class TestCompileInvariants:
    """Properties that hold for every input."""

    @pytest.mark.parametrize(
        "source",
        ["", "plain", "# ", "**x", "1. a\nb) c", "$$", "[a](b", "> q\n- x\n\n```\ncode\n```", "\x00"],
    )
    def test_document_xor_diagnostics(self, source: str) -> None:
        """Test that a result never has both a document and diagnostics."""
        assert_exclusive(compile(source))

    def test_concurrent_calls(self) -> None:
        """Test that compile calls on several threads do not interfere."""
        results: dict[int, CompilationResult] = {}

        def worker(index: int) -> None:
            results[index] = compile(f"# Title {index}\n\n1. a\n2. b")

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        for index, result in results.items():
            assert result.document.blocks[0].content[-1] == Str(str(index))
