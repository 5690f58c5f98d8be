#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for compiler options."""

import dataclasses

import pytest

from mymd.exceptions import ValidationError
from mymd.options import CompilerOptions


@pytest.mark.unit
class TestCompilerOptions:
    """Defaults, cloning and validation."""

    def test_defaults(self) -> None:
        """Test default option values."""
        options = CompilerOptions()

        assert options.raw_format == "latex"
        assert options.json_indent is None
        assert options.ensure_ascii is False
        assert options.parse_front_matter is True

    def test_frozen(self) -> None:
        """Test that options cannot be mutated."""
        options = CompilerOptions()

        with pytest.raises(dataclasses.FrozenInstanceError):
            options.raw_format = "html"  # type: ignore[misc]

    def test_create_updated(self) -> None:
        """Test cloning with changed fields."""
        options = CompilerOptions()
        updated = options.create_updated(json_indent=2)

        assert updated.json_indent == 2
        assert options.json_indent is None
        assert updated.raw_format == options.raw_format

    @pytest.mark.parametrize("raw_format", ["", "   "])
    def test_empty_raw_format(self, raw_format: str) -> None:
        """Test that the raw format must not be blank."""
        with pytest.raises(ValidationError) as exc_info:
            CompilerOptions(raw_format=raw_format)

        assert exc_info.value.parameter_name == "raw_format"

    def test_negative_indent(self) -> None:
        """Test that indentation must be non-negative."""
        with pytest.raises(ValidationError, match="json_indent must be non-negative"):
            CompilerOptions(json_indent=-1)

    def test_create_updated_validates(self) -> None:
        """Test that cloning runs validation again."""
        with pytest.raises(ValidationError):
            CompilerOptions().create_updated(raw_format="")

    def test_field_help_metadata(self) -> None:
        """Test that every option documents itself."""
        for option_field in dataclasses.fields(CompilerOptions):
            assert option_field.metadata.get("help")
