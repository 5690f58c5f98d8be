#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for front matter to metadata conversion."""

import logging

import pytest

from mymd.ast.nodes import MetaBool, MetaInlines, MetaList, MetaMap, MetaString, RawInline
from mymd.exceptions import MetadataError
from mymd.parsers.metadata import (
    convert_metadata,
    convert_value,
    front_matter_to_meta,
    parse_front_matter,
    strip_delimiters,
)


@pytest.mark.unit
class TestParseFrontMatter:
    """Loading the YAML block."""

    def test_strip_delimiters(self) -> None:
        """Test removal of the delimiter lines."""
        assert strip_delimiters("---\ntitle: x\n---") == "title: x\n"

    def test_parse_mapping(self) -> None:
        """Test loading a simple mapping."""
        assert parse_front_matter("---\ntitle: Test\ncount: 3\n---") == {"title": "Test", "count": 3}

    def test_empty_block(self) -> None:
        """Test that an empty block loads as an empty mapping."""
        assert parse_front_matter("---\n---") == {}

    def test_invalid_yaml(self) -> None:
        """Test that malformed YAML raises MetadataError."""
        with pytest.raises(MetadataError) as exc_info:
            parse_front_matter("---\ntitle: [unclosed\n---")

        assert exc_info.value.parsing_stage == "front_matter"
        assert exc_info.value.original_error is not None

    def test_non_mapping(self) -> None:
        """Test that a YAML list is rejected."""
        with pytest.raises(MetadataError, match="must be a mapping"):
            parse_front_matter("---\n- a\n- b\n---")


@pytest.mark.unit
class TestConvertValue:
    """Conversion of individual YAML values."""

    def test_boolean(self) -> None:
        """Test booleans become MetaBool."""
        assert convert_value("draft", True) == MetaBool(True)

    def test_scalars_use_string_form(self) -> None:
        """Test numbers and null become MetaString."""
        assert convert_value("count", 3) == MetaString("3")
        assert convert_value("ratio", 1.5) == MetaString("1.5")
        assert convert_value("missing", None) == MetaString("null")

    def test_list(self) -> None:
        """Test sequences convert element-wise."""
        assert convert_value("authors", ["Ada", True]) == MetaList([MetaString("Ada"), MetaBool(True)])

    def test_nested_mapping(self) -> None:
        """Test mappings convert entry-wise with string keys."""
        result = convert_value("venue", {"name": "Conf", 2024: {"online": False}})

        assert result == MetaMap(
            {
                "name": MetaString("Conf"),
                "2024": MetaMap({"online": MetaBool(False)}),
            }
        )

    def test_header_includes_scalar(self) -> None:
        """Test header-includes scalars become raw inlines."""
        result = convert_value("header-includes", "\\usepackage{amsmath}")

        assert result == MetaInlines([RawInline("latex", "\\usepackage{amsmath}")])

    def test_header_includes_list(self) -> None:
        """Test that list elements under header-includes are raw too."""
        result = convert_value("header-includes", ["\\usepackage{a}", "\\usepackage{b}"], raw_format="tex")

        assert result == MetaList(
            [
                MetaInlines([RawInline("tex", "\\usepackage{a}")]),
                MetaInlines([RawInline("tex", "\\usepackage{b}")]),
            ]
        )


@pytest.mark.unit
class TestFrontMatterToMeta:
    """End-to-end conversion of a front-matter block."""

    def test_conversion(self) -> None:
        """Test a block with several value types."""
        meta = front_matter_to_meta("---\ntitle: Paper\ndate: 2024-01-05\ndraft: false\n---")

        assert meta == {
            "title": MetaString("Paper"),
            "date": MetaString("2024-01-05"),
            "draft": MetaBool(False),
        }

    def test_invalid_front_matter_is_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that malformed YAML yields empty metadata and a warning."""
        with caplog.at_level(logging.WARNING, logger="mymd.parsers.metadata"):
            meta = front_matter_to_meta("---\ntitle: [unclosed\n---")

        assert meta == {}
        assert "Ignoring front matter" in caplog.text

    def test_self_referential_value_is_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a YAML alias containing itself yields empty metadata."""
        with caplog.at_level(logging.WARNING, logger="mymd.parsers.metadata"):
            meta = front_matter_to_meta("---\na: &x [*x]\n---")

        assert meta == {}
        assert "self-referential" in caplog.text

    def test_convert_metadata(self) -> None:
        """Test converting an already loaded mapping."""
        assert convert_metadata({"a": "b"}) == {"a": MetaString("b")}
