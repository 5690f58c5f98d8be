#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/options.py
"""Configuration options for the mymd compiler.

Options are immutable dataclasses. Use ``create_updated`` to derive a modified
copy instead of mutating an instance.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from mymd.constants import (
    DEFAULT_ENSURE_ASCII,
    DEFAULT_JSON_INDENT,
    DEFAULT_PARSE_FRONT_MATTER,
    DEFAULT_RAW_FORMAT,
)
from mymd.exceptions import ValidationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class CompilerOptions(CloneFrozenMixin):
    """Options controlling one ``compile`` call.

    Parameters
    ----------
    raw_format : str, default "latex"
        Format tag attached to raw blocks, raw inlines and ``header-includes``
        pass-through values.
    json_indent : int or None, default None
        Indentation used for the serialized document. None produces compact JSON.
    ensure_ascii : bool, default False
        Escape non-ASCII characters in the serialized document.
    parse_front_matter : bool, default True
        Convert the front-matter block into document metadata. When False the
        block is still recognized (and so never rendered as content) but ``meta``
        stays empty.

    """

    raw_format: str = field(
        default=DEFAULT_RAW_FORMAT,
        metadata={"help": "Format tag for raw blocks and raw inlines", "importance": "advanced"},
    )
    json_indent: int | None = field(
        default=DEFAULT_JSON_INDENT,
        metadata={"help": "Indentation of the JSON output (compact when unset)", "type": int, "importance": "core"},
    )
    ensure_ascii: bool = field(
        default=DEFAULT_ENSURE_ASCII,
        metadata={"help": "Escape non-ASCII characters in the JSON output", "importance": "advanced"},
    )
    parse_front_matter: bool = field(
        default=DEFAULT_PARSE_FRONT_MATTER,
        metadata={
            "help": "Convert front matter into document metadata",
            "cli_name": "no-front-matter",
            "importance": "core",
        },
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValidationError
            If any field value is outside its valid range.

        """
        if not self.raw_format or not self.raw_format.strip():
            raise ValidationError(
                "raw_format must be a non-empty string", parameter_name="raw_format", parameter_value=self.raw_format
            )
        if self.json_indent is not None and self.json_indent < 0:
            raise ValidationError(
                f"json_indent must be non-negative, got {self.json_indent}",
                parameter_name="json_indent",
                parameter_value=self.json_indent,
            )
