#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/parsers/metadata.py
"""Conversion of YAML front matter into document metadata.

The front matter is the ``---`` delimited block at the very start of a
document. Its YAML mapping becomes the document's ``meta`` dictionary:

- booleans become ``MetaBool``
- sequences become ``MetaList`` (element-wise)
- mappings become ``MetaMap`` (entry-wise)
- every other scalar becomes ``MetaString`` holding its string form

Scalars under the ``header-includes`` key, including the elements of a
``header-includes`` list, are passed through as raw inline markup instead, so
the output engine copies them verbatim into the document preamble.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

import yaml

from mymd.ast.nodes import MetaBool, MetaInlines, MetaList, MetaMap, MetaNode, MetaString, RawInline
from mymd.constants import DEFAULT_RAW_FORMAT, FRONT_MATTER_DELIMITER, HEADER_INCLUDES_KEY
from mymd.exceptions import MetadataError

logger = logging.getLogger(__name__)

_OPENING_DELIMITER = re.compile(r"\A" + FRONT_MATTER_DELIMITER + r"[ \t]*\r?\n?")
_CLOSING_DELIMITER = re.compile(r"(?:^|\n)" + FRONT_MATTER_DELIMITER + r"[ \t]*\s*\Z")


def strip_delimiters(front_matter: str) -> str:
    """Remove the opening and closing ``---`` lines of a front-matter block."""
    body = _OPENING_DELIMITER.sub("", front_matter, count=1)
    return _CLOSING_DELIMITER.sub("\n", body, count=1)


def parse_front_matter(front_matter: str) -> dict[str, Any]:
    """Load a front-matter block as a YAML mapping.

    Parameters
    ----------
    front_matter : str
        Front-matter text, with or without its ``---`` delimiter lines

    Returns
    -------
    dict
        Loaded mapping; empty when the block holds no YAML content

    Raises
    ------
    MetadataError
        If the text is not valid YAML or does not describe a mapping

    """
    try:
        data = yaml.safe_load(strip_delimiters(front_matter))
    except yaml.YAMLError as e:
        raise MetadataError(f"Invalid YAML in front matter: {e}", original_error=e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MetadataError(f"Front matter must be a mapping, got {type(data).__name__}")
    return data


def _scalar_text(value: Any) -> str:
    # YAML null keeps its literal spelling
    if value is None:
        return "null"
    return str(value)


def convert_value(key: str, value: Any, raw_format: str = DEFAULT_RAW_FORMAT) -> MetaNode:
    """Convert one YAML value to a metadata node.

    Parameters
    ----------
    key : str
        Key the value appears under; list elements inherit their list's key
    value : Any
        Loaded YAML value
    raw_format : str, default "latex"
        Format of the raw inlines produced for ``header-includes`` scalars

    Returns
    -------
    MetaNode
        Converted node

    """
    if isinstance(value, bool):
        return MetaBool(value)

    if isinstance(value, (list, tuple)):
        return MetaList([convert_value(key, item, raw_format) for item in value])

    if isinstance(value, Mapping):
        return MetaMap({str(k): convert_value(str(k), v, raw_format) for k, v in value.items()})

    text = _scalar_text(value)
    if key == HEADER_INCLUDES_KEY:
        return MetaInlines([RawInline(raw_format, text)])
    return MetaString(text)


def convert_metadata(data: Mapping[str, Any], raw_format: str = DEFAULT_RAW_FORMAT) -> dict[str, MetaNode]:
    """Convert a loaded YAML mapping to document metadata."""
    return {str(key): convert_value(str(key), value, raw_format) for key, value in data.items()}


def front_matter_to_meta(front_matter: str, raw_format: str = DEFAULT_RAW_FORMAT) -> dict[str, MetaNode]:
    """Convert a front-matter block to document metadata.

    Front matter that cannot be loaded or that refers to itself is logged and
    yields an empty dictionary; the rest of the document still compiles.

    Parameters
    ----------
    front_matter : str
        Front-matter text including its ``---`` delimiter lines
    raw_format : str, default "latex"
        Format of the raw inlines produced for ``header-includes`` scalars

    Returns
    -------
    dict of str to MetaNode
        Document metadata

    """
    try:
        data = parse_front_matter(front_matter)
    except MetadataError as e:
        logger.warning("Ignoring front matter: %s", e.message)
        return {}

    try:
        return convert_metadata(data, raw_format)
    except RecursionError:
        # YAML aliases can make a value contain itself
        logger.warning("Ignoring front matter: self-referential value")
        return {}
