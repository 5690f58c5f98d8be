#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the mymd compiler.

This module centralizes the fixed values of the document wire format and the
defaults used by the compiler options and command line.

Constants are organized by category:
1. Type Definitions - Literal types shared across modules
2. Wire Format - Values fixed by the portable document AST schema
3. Compiler Defaults - Default values for CompilerOptions
4. Source Markup - Characters and limits of the source dialect
5. Command Line - Exit codes of the mymd command
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

MathKind = Literal["InlineMath", "DisplayMath"]
CitationMode = Literal["NormalCitation", "AuthorInText", "SuppressAuthor"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# =============================================================================
# Wire Format
# =============================================================================

PANDOC_API_VERSION: tuple[int, int, int] = (1, 23, 1)

# Keys of the top-level JSON object
API_VERSION_KEY = "pandoc-api-version"
META_KEY = "meta"
BLOCKS_KEY = "blocks"

# Tag / content keys of every tagged node
TAG_KEY = "t"
CONTENT_KEY = "c"

# Second element of an Image target; marks the image as a figure
IMAGE_TARGET_TITLE = "fig:"

DEFAULT_CITATION_MODE: CitationMode = "NormalCitation"
DEFAULT_CITATION_NOTE_NUM = 1
DEFAULT_CITATION_HASH = 0

# Front-matter key whose scalar values are passed through as raw inlines
HEADER_INCLUDES_KEY = "header-includes"

# Prefix of the single diagnostic produced when tree construction fails
COMPILER_ERROR_PREFIX = "Compiler Error: "

# =============================================================================
# Compiler Defaults
# =============================================================================

DEFAULT_RAW_FORMAT = "latex"
DEFAULT_JSON_INDENT: int | None = None
DEFAULT_ENSURE_ASCII = False
DEFAULT_PARSE_FRONT_MATTER = True

DEFAULT_LOG_LEVEL: LogLevelName = "WARNING"
ENV_VAR_PREFIX = "MYMD_"

# =============================================================================
# Source Markup
# =============================================================================

FRONT_MATTER_DELIMITER = "---"
CODE_FENCE = "```"
DISPLAY_MATH_DELIMITER = "$$"
MAX_HEADING_LEVEL = 6

# Single letters classified as roman numerals when they stand alone as a marker
ROMAN_SINGLE_LETTERS = frozenset("ivx")

ROMAN_VALUES: dict[str, int] = {
    "I": 1,
    "V": 5,
    "X": 10,
    "L": 50,
    "C": 100,
    "D": 500,
    "M": 1000,
}

CONTINUATION_MARKER = "+"

# =============================================================================
# Command Line
# =============================================================================

EXIT_SUCCESS = 0
EXIT_DIAGNOSTICS = 1
EXIT_INPUT_ERROR = 2

STDIN_MARKER = "-"
