#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the mymd compiler.

This module defines the exception classes raised while building a document
tree. Lexical and syntax problems are never raised: they are collected as
``Diagnostic`` records. Exceptions are reserved for failures that abort tree
construction as a whole; the compiler facade turns any of them into a single
unlocated diagnostic.

Exception Hierarchy
-------------------
- MyMdError (base exception)

  - ValidationError (invalid compiler options)

  - ParsingError (tree construction failures)
    - ListMarkerError (ordered-list marker mismatch)
    - MetadataError (front matter could not be loaded)

  - RenderingError (wire-format serialization failures)

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mymd.parsers.list_marker import ListMarker


class MyMdError(Exception):
    """Base exception class for all mymd-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(MyMdError):
    """Exception raised for invalid compiler options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ParsingError(MyMdError):
    """Exception raised when the document tree cannot be built.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class ListMarkerError(ParsingError):
    """Exception raised when an ordered list mixes marker styles or delimiters.

    The first non-continuation marker of a list fixes its style and delimiter;
    any later marker that disagrees (outside the alpha/roman tolerance) raises
    this error and aborts tree construction.

    Parameters
    ----------
    expected : ListMarker or None
        Marker that established the list's style and delimiter
    found : ListMarker or None
        Offending marker
    message : str, optional
        Custom message; generated from the markers when omitted

    """

    def __init__(
        self,
        expected: ListMarker | None = None,
        found: ListMarker | None = None,
        message: str | None = None,
    ):
        """Initialize the list marker error."""
        if message is None:
            message = (
                "Syntax Error: List marker mismatch. "
                f"Expected {_describe(expected)}, found {_describe(found)}"
            )
        super().__init__(message, parsing_stage="ordered_list")
        self.expected = expected
        self.found = found


class MetadataError(ParsingError):
    """Exception raised when a front-matter block cannot be loaded as YAML."""

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the metadata error."""
        super().__init__(message, parsing_stage="front_matter", original_error=original_error)


class RenderingError(MyMdError):
    """Exception raised when a node cannot be serialized to the wire format.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


def _describe(marker: ListMarker | None) -> str:
    if marker is None:
        return "<none>"
    return f"{marker.style.value}/{marker.delim.value}"
