#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the recursive-descent parser."""

import pytest

from mymd.parsers.diagnostics import DiagnosticsCollector
from mymd.parsers.grammar import NodeKind, ParseNode, Parser, parse
from mymd.parsers.lexer import tokenize
from mymd.parsers.tokens import Token, TokenKind


def parse_source(source: str) -> tuple[ParseNode, DiagnosticsCollector]:
    tokens, sink = tokenize(source)
    return parse(tokens, sink)


def child_kinds(node: ParseNode) -> list[NodeKind]:
    return [child.kind for child in node.children]


@pytest.mark.unit
class TestDocumentStructure:
    """Top-level block structure."""

    def test_single_paragraph(self) -> None:
        """Test that plain text becomes one paragraph."""
        tree, sink = parse_source("Hello world")

        assert tree.kind is NodeKind.DOCUMENT
        assert child_kinds(tree) == [NodeKind.PARAGRAPH]
        assert child_kinds(tree.children[0]) == [NodeKind.TEXT, NodeKind.SPACE, NodeKind.TEXT]
        assert not sink.has_errors()

    def test_front_matter_is_first_child(self) -> None:
        """Test that front matter is kept as its own node."""
        tree, _ = parse_source("---\ntitle: x\n---\n# H")

        assert child_kinds(tree) == [NodeKind.FRONT_MATTER, NodeKind.HEADING]

    def test_paragraph_spans_soft_breaks(self) -> None:
        """Test that a single line end continues the paragraph."""
        tree, _ = parse_source("a\nb")

        assert child_kinds(tree) == [NodeKind.PARAGRAPH]
        assert child_kinds(tree.children[0]) == [NodeKind.TEXT, NodeKind.SOFT_BREAK, NodeKind.TEXT]

    def test_blank_line_separates_paragraphs(self) -> None:
        """Test that a blank line starts a new paragraph."""
        tree, _ = parse_source("a\n\nb")

        assert child_kinds(tree) == [NodeKind.PARAGRAPH, NodeKind.PARAGRAPH]

    def test_block_marker_interrupts_paragraph(self) -> None:
        """Test that a heading line ends the preceding paragraph."""
        tree, _ = parse_source("a\n# H")

        assert child_kinds(tree) == [NodeKind.PARAGRAPH, NodeKind.HEADING]

    def test_empty_token_stream(self) -> None:
        """Test that a missing EOF token is supplied."""
        tree = Parser([]).parse()

        assert tree.kind is NodeKind.DOCUMENT
        assert tree.children == []


@pytest.mark.unit
class TestBlocks:
    """Block constructs."""

    def test_heading(self) -> None:
        """Test that the heading keeps its marker token."""
        tree, _ = parse_source("## Title")
        heading = tree.children[0]

        assert heading.kind is NodeKind.HEADING
        assert heading.text == "##"
        assert child_kinds(heading) == [NodeKind.TEXT]

    def test_heading_without_text(self) -> None:
        """Test that an empty heading is a syntax error."""
        _, sink = parse_source("#\n")

        assert len(sink) == 1
        diagnostic = sink.diagnostics[0]
        assert diagnostic.message == "Syntax Error: Heading requires text after the marker"
        assert (diagnostic.line, diagnostic.column) == (0, 0)
        assert (diagnostic.start_index, diagnostic.end_index) == (0, 1)

    def test_horizontal_rule(self) -> None:
        """Test a thematic break."""
        tree, _ = parse_source("---")

        assert child_kinds(tree) == [NodeKind.HORIZONTAL_RULE]

    def test_code_block_followed_by_text(self) -> None:
        """Test that a fenced block must end its line."""
        _, sink = parse_source("```a```b")

        assert sink.diagnostics[0].message == "Syntax Error: Unexpected text after code block"

    def test_math_block_with_label(self) -> None:
        """Test display math on its own line with a reference label."""
        tree, _ = parse_source("$$x$$ [eq:1]")
        block = tree.children[0]

        assert block.kind is NodeKind.MATH_BLOCK
        assert block.value == "eq:1"

    def test_math_block_without_label(self) -> None:
        """Test display math without a label."""
        tree, _ = parse_source("$$x$$")

        assert tree.children[0].kind is NodeKind.MATH_BLOCK
        assert tree.children[0].value is None

    def test_display_math_in_running_text(self) -> None:
        """Test that display math inside a sentence stays inline."""
        tree, _ = parse_source("Text $$x$$ more")

        assert tree.children[0].kind is NodeKind.PARAGRAPH
        assert NodeKind.DISPLAY_MATH in child_kinds(tree.children[0])

    def test_block_quote(self) -> None:
        """Test that consecutive quote lines form one quote."""
        tree, _ = parse_source("> a\n> b")
        quote = tree.children[0]

        assert quote.kind is NodeKind.BLOCK_QUOTE
        assert child_kinds(quote) == [NodeKind.TEXT, NodeKind.SOFT_BREAK, NodeKind.TEXT]


@pytest.mark.unit
class TestLists:
    """Bullet and ordered lists."""

    def test_bullet_list(self) -> None:
        """Test a two-item bullet list."""
        tree, _ = parse_source("- a\n- b")
        bullet_list = tree.children[0]

        assert bullet_list.kind is NodeKind.BULLET_LIST
        assert child_kinds(bullet_list) == [NodeKind.LIST_ITEM, NodeKind.LIST_ITEM]

    def test_ordered_list_with_continuation(self) -> None:
        """Test that plus markers join an ordered list."""
        tree, _ = parse_source("1. a\n+ b")
        ordered = tree.children[0]

        assert ordered.kind is NodeKind.ORDERED_LIST
        assert [item.text for item in ordered.children] == ["1.", "+"]

    def test_bullet_and_ordered_are_separate_lists(self) -> None:
        """Test that a change of marker family starts a new list."""
        tree, _ = parse_source("- a\n1. b")

        assert child_kinds(tree) == [NodeKind.BULLET_LIST, NodeKind.ORDERED_LIST]

    def test_blank_lines_between_items(self) -> None:
        """Test that blank lines between items keep the list together."""
        tree, _ = parse_source("- a\n\n- b")

        assert child_kinds(tree) == [NodeKind.BULLET_LIST]
        assert len(tree.children[0].children) == 2

    def test_nested_list_in_item_body(self) -> None:
        """Test that an indented list becomes the item's body."""
        tree, _ = parse_source("1. a\n   - b\n2. c")
        ordered = tree.children[0]

        assert len(ordered.children) == 2
        first = ordered.children[0]
        assert [node.kind for node in first.body] == [NodeKind.BULLET_LIST]
        assert ordered.children[1].body == []

    def test_indented_paragraph_in_item_body(self) -> None:
        """Test that an indented paragraph after a blank line stays in the item."""
        tree, _ = parse_source("- a\n\n  more text")
        item = tree.children[0].children[0]

        assert child_kinds(tree) == [NodeKind.BULLET_LIST]
        assert [node.kind for node in item.body] == [NodeKind.PARAGRAPH]

    def test_unindented_line_ends_list(self) -> None:
        """Test that a line at column 0 is not part of the item."""
        tree, _ = parse_source("- a\nb")

        assert child_kinds(tree) == [NodeKind.BULLET_LIST, NodeKind.PARAGRAPH]

    def test_quote_in_item_stops_at_outer_quote_line(self) -> None:
        """Test that a hard break does not pull a column-0 quote into an item's quote."""
        tree, sink = parse_source("- item\n  > a\\\n> b")

        assert not sink.has_errors()
        assert child_kinds(tree) == [NodeKind.BULLET_LIST, NodeKind.BLOCK_QUOTE]
        inner = tree.children[0].children[0].body[0]
        assert inner.kind is NodeKind.BLOCK_QUOTE
        assert child_kinds(inner) == [NodeKind.TEXT, NodeKind.HARD_BREAK]
        assert child_kinds(tree.children[1]) == [NodeKind.TEXT]


@pytest.mark.unit
class TestInlines:
    """Inline constructs."""

    def test_emphasis(self) -> None:
        """Test single-asterisk emphasis."""
        tree, _ = parse_source("*a*")
        emph = tree.children[0].children[0]

        assert emph.kind is NodeKind.EMPH
        assert child_kinds(emph) == [NodeKind.TEXT]

    def test_unclosed_emphasis_is_literal(self) -> None:
        """Test that a lone asterisk is plain text."""
        tree, sink = parse_source("*a")

        assert child_kinds(tree.children[0]) == [NodeKind.LITERAL, NodeKind.TEXT]
        assert not sink.has_errors()

    def test_strong_spans_soft_break(self) -> None:
        """Test strong emphasis continuing onto the next line."""
        tree, _ = parse_source("**a\nb**")
        strong = tree.children[0].children[0]

        assert strong.kind is NodeKind.STRONG
        assert child_kinds(strong) == [NodeKind.TEXT, NodeKind.SOFT_BREAK, NodeKind.TEXT]

    def test_unclosed_strong(self) -> None:
        """Test that an unclosed double asterisk is a syntax error."""
        _, sink = parse_source("**a")

        assert sink.diagnostics[0].message == "Syntax Error: Unclosed strong emphasis: missing closing **"

    def test_errors_in_separate_paragraphs_are_all_reported(self) -> None:
        """Test that the parser recovers and reports later errors."""
        _, sink = parse_source("**a\n\nb**")

        assert len(sink) == 2
        assert all("Unclosed strong emphasis" in d.message for d in sink.diagnostics)

    def test_recovery_keeps_later_blocks(self) -> None:
        """Test that blocks after an error are still parsed."""
        tree, sink = parse_source("**a\n\n# Fine")

        assert len(sink) == 1
        assert NodeKind.HEADING in child_kinds(tree)

    def test_link(self) -> None:
        """Test an inline link."""
        tree, _ = parse_source("[some text](http://x.org)")
        link = tree.children[0].children[0]

        assert link.kind is NodeKind.LINK
        assert link.value == "http://x.org"
        assert child_kinds(link) == [NodeKind.TEXT, NodeKind.SPACE, NodeKind.TEXT]

    def test_link_destination_with_parentheses(self) -> None:
        """Test that balanced parentheses stay in the destination."""
        tree, _ = parse_source("[a](f(x))")
        link = tree.children[0].children[0]

        assert link.kind is NodeKind.LINK
        assert link.value == "f(x)"
        assert link.children[0].kind is NodeKind.LITERAL
        assert link.children[0].value == "a"

    def test_image(self) -> None:
        """Test an inline image."""
        tree, _ = parse_source("![alt text](img.png)")
        image = tree.children[0].children[0]

        assert image.kind is NodeKind.IMAGE
        assert image.value == "img.png"
        assert image.token.kind is TokenKind.BANG

    def test_image_with_reference_text(self) -> None:
        """Test an image whose alt text is a bare identifier."""
        tree, _ = parse_source("![fig](a.png)")
        image = tree.children[0].children[0]

        assert image.kind is NodeKind.IMAGE
        assert image.children[0].value == "fig"

    def test_bang_without_link_is_literal(self) -> None:
        """Test that an exclamation mark in text is literal."""
        tree, _ = parse_source("Hi!")

        assert child_kinds(tree.children[0]) == [NodeKind.TEXT, NodeKind.LITERAL]

    def test_unclosed_link_destination(self) -> None:
        """Test the error placed after the last real token at end of input."""
        _, sink = parse_source("[a](b")

        diagnostic = sink.diagnostics[0]
        assert diagnostic.message == "Syntax Error: Expected ) to close link destination"
        assert (diagnostic.start_index, diagnostic.end_index) == (5, 6)

    def test_reference(self) -> None:
        """Test a cross-reference outside a link."""
        tree, _ = parse_source("see [fig:1]")
        ref = tree.children[0].children[-1]

        assert ref.kind is NodeKind.REF
        assert ref.value == "fig:1"

    def test_citation(self) -> None:
        """Test a citation."""
        tree, _ = parse_source("[@knuth84]")

        assert child_kinds(tree.children[0]) == [NodeKind.CITATION]


@pytest.mark.unit
class TestErrorReporting:
    """Diagnostics produced by the parser."""

    def test_front_matter_after_content(self) -> None:
        """Test that a front-matter token after content is rejected."""
        tokens = [
            Token(TokenKind.TEXT, "a", 0, 1, 0, 0),
            Token(TokenKind.PARAGRAPH_END, "\n\n", 1, 3, 0, 1),
            Token(TokenKind.FRONT_MATTER, "---\n---", 3, 10, 2, 0),
            Token(TokenKind.EOF, "", 10, 10, 3, 3),
        ]
        tree, sink = parse(tokens)

        assert len(sink) == 1
        diagnostic = sink.diagnostics[0]
        assert diagnostic.message == "Syntax Error: Front matter is only allowed at the start of the document"
        assert (diagnostic.start_index, diagnostic.end_index) == (3, 10)
        assert child_kinds(tree) == [NodeKind.PARAGRAPH]

    def test_parse_returns_its_collector(self) -> None:
        """Test that parse creates a collector when none is given."""
        tokens, _ = tokenize("text")
        _, sink = parse(tokens)

        assert isinstance(sink, DiagnosticsCollector)
        assert not sink.has_errors()
