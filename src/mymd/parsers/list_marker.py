#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mymd/parsers/list_marker.py
"""Classification of ordered-list markers.

A marker such as ``3.``, ``(b)`` or ``iv)`` carries three facts: the
numbering style, the delimiter and the number it stands for. The first
ordinary marker of a list fixes the list's style and delimiter; a ``+``
marker continues the list without constraining it.

Single letters are ambiguous: ``c`` is the third letter and ``i`` is the
first roman numeral. The classification here is a best-effort heuristic
(``i``, ``v`` and ``x`` alone are roman, every other single letter is
alphabetic), and :meth:`ListMarker.is_compatible_with` tolerates the one
ambiguity it cannot settle.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from mymd.ast.nodes import ListAttributes, ListNumberDelim, ListNumberStyle
from mymd.constants import CONTINUATION_MARKER, ROMAN_SINGLE_LETTERS, ROMAN_VALUES
from mymd.exceptions import ListMarkerError

logger = logging.getLogger(__name__)

_MARKER_PATTERN = re.compile(r"^(\()?([a-zA-Z0-9]+)(\.|\))?$")
_ROMAN_PATTERN = re.compile(r"^[IVXLCDMivxlcdm]+$")

_ALPHA_STYLES = frozenset({ListNumberStyle.LOWER_ALPHA, ListNumberStyle.UPPER_ALPHA})
_ROMAN_STYLES = frozenset({ListNumberStyle.LOWER_ROMAN, ListNumberStyle.UPPER_ROMAN})
_UPPER_STYLES = frozenset({ListNumberStyle.UPPER_ALPHA, ListNumberStyle.UPPER_ROMAN})


@dataclass(frozen=True)
class ListMarker:
    """Resolved ordered-list marker.

    Parameters
    ----------
    style : ListNumberStyle
        Numbering alphabet
    delim : ListNumberDelim
        Punctuation around the number
    start_number : int
        Number the marker stands for
    ordinal : str
        Marker text without punctuation, e.g. ``"iv"`` for ``(iv)``

    """

    style: ListNumberStyle
    delim: ListNumberDelim
    start_number: int
    ordinal: str = ""

    @property
    def is_continuation(self) -> bool:
        """Whether this is the ``+`` marker, which matches any list."""
        return self.style is ListNumberStyle.DEFAULT_STYLE

    def is_compatible_with(self, other: ListMarker) -> bool:
        """Check whether ``other`` may follow this marker in the same list.

        Styles and delimiters must be equal, except that an alphabetic and a
        roman style of the same case are accepted together when the
        alphabetic marker is a single letter.

        Parameters
        ----------
        other : ListMarker
            Marker of a later list item

        Returns
        -------
        bool
            True when both markers can belong to one list

        """
        if self.is_continuation or other.is_continuation:
            return True
        if self.delim is not other.delim:
            return False
        if self.style is other.style:
            return True
        return _is_alpha_roman_ambiguity(self, other) or _is_alpha_roman_ambiguity(other, self)


CONTINUATION = ListMarker(
    style=ListNumberStyle.DEFAULT_STYLE,
    delim=ListNumberDelim.DEFAULT_DELIM,
    start_number=1,
    ordinal=CONTINUATION_MARKER,
)


def _is_alpha_roman_ambiguity(alpha: ListMarker, roman: ListMarker) -> bool:
    return (
        alpha.style in _ALPHA_STYLES
        and roman.style in _ROMAN_STYLES
        and (alpha.style in _UPPER_STYLES) == (roman.style in _UPPER_STYLES)
        and len(alpha.ordinal) == 1
    )


def roman_to_int(numeral: str) -> int:
    """Convert a roman numeral to an integer.

    A letter followed by a strictly larger one is subtracted. Malformed input
    that sums to zero or less yields 1.

    Examples
    --------
    >>> roman_to_int("xiv")
    14
    >>> roman_to_int("IIII")
    4

    """
    values = [ROMAN_VALUES.get(char, 0) for char in numeral.upper()]
    total = 0
    for index, value in enumerate(values):
        if index + 1 < len(values) and value < values[index + 1]:
            total -= value
        else:
            total += value
    return total if total > 0 else 1


def alpha_to_int(letters: str) -> int:
    """Return the 1-based alphabet position of the first letter."""
    return ord(letters[0].lower()) - ord("a") + 1


def parse_marker(text: str) -> ListMarker | None:
    """Classify an ordered-list marker.

    Parameters
    ----------
    text : str
        Marker text such as ``"1."``, ``"b)"``, ``"(iv)"`` or ``"+"``

    Returns
    -------
    ListMarker or None
        The resolved marker, :data:`CONTINUATION` for ``+``, or None when the
        text is not a marker

    Examples
    --------
    >>> marker = parse_marker("(iv)")
    >>> marker.style.value, marker.delim.value, marker.start_number
    ('LowerRoman', 'TwoParens', 4)

    """
    text = text.strip()
    if text == CONTINUATION_MARKER:
        return CONTINUATION

    match = _MARKER_PATTERN.match(text)
    if not match:
        return None

    opening, ordinal, closing = match.groups()

    if opening and closing == ")":
        delim = ListNumberDelim.TWO_PARENS
    elif closing == ")":
        delim = ListNumberDelim.ONE_PAREN
    else:
        delim = ListNumberDelim.PERIOD

    upper = ordinal[0].isupper()

    if ordinal[0].isdigit():
        if not ordinal.isdigit():
            return None
        return ListMarker(ListNumberStyle.DECIMAL, delim, int(ordinal), ordinal)

    is_roman = bool(_ROMAN_PATTERN.match(ordinal))
    if is_roman and (len(ordinal) > 1 or ordinal.lower() in ROMAN_SINGLE_LETTERS):
        style = ListNumberStyle.UPPER_ROMAN if upper else ListNumberStyle.LOWER_ROMAN
        return ListMarker(style, delim, roman_to_int(ordinal), ordinal)

    style = ListNumberStyle.UPPER_ALPHA if upper else ListNumberStyle.LOWER_ALPHA
    return ListMarker(style, delim, alpha_to_int(ordinal), ordinal)


def check_consistency(markers: Iterable[str]) -> ListAttributes:
    """Check the markers of an ordered list and resolve its attributes.

    The first non-continuation marker sets the start number, style and
    delimiter. A list made only of ``+`` markers gets ``(1, Decimal, Period)``.

    Parameters
    ----------
    markers : iterable of str
        Marker text of every item, in order

    Returns
    -------
    ListAttributes
        Attributes of the list

    Raises
    ------
    ListMarkerError
        If a marker is not recognized or disagrees with the first marker

    """
    first: ListMarker | None = None

    for text in markers:
        marker = parse_marker(text)
        if marker is None:
            raise ListMarkerError(message=f"Syntax Error: Unrecognized list marker '{text}'")
        if marker.is_continuation:
            continue
        if first is None:
            first = marker
            continue
        if not first.is_compatible_with(marker):
            logger.debug("List marker %r does not match %r", marker, first)
            raise ListMarkerError(expected=first, found=marker)

    if first is None:
        return ListAttributes()

    return ListAttributes(start=first.start_number, style=first.style, delim=first.delim)


# Short aliases used by callers that only deal with markers
ListStyle = ListNumberStyle
ListDelim = ListNumberDelim
