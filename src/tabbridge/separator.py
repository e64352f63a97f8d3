#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/separator.py
"""Field separator classes and statistical separator detection.

The detector inspects the lines after a configurable number of header lines
and picks the least ambiguous separator that every inspected line contains:
tab first, then comma, falling back to space by elimination.

Quoted commas are not special-cased: a tab- or space-delimited file whose
every line carries a comma inside a quoted field is reported as COMMA.

"""

from __future__ import annotations

import logging
from enum import Enum

from tabbridge.constants import DEFAULT_HEADER_SKIP_LINES

logger = logging.getLogger(__name__)


class Separator(str, Enum):
    """Field separator of a delimited-text file."""

    TAB = "tab"
    COMMA = "comma"
    SPACE = "space"

    @property
    def char(self) -> str:
        """The character written between fields."""
        return _SEPARATOR_CHARS[self]


_SEPARATOR_CHARS = {
    Separator.TAB: "\t",
    Separator.COMMA: ",",
    Separator.SPACE: " ",
}


def _inspectable_lines(text: str, header_lines: int) -> list[str]:
    lines = [line for line in text.splitlines() if line]
    body = lines[header_lines:]
    if not body and lines:
        # Header-only content: the header itself is the only evidence available
        logger.debug("No lines after skipping %d header line(s), inspecting header", header_lines)
        return lines
    return body


def detect_separator(text: str, header_lines: int = DEFAULT_HEADER_SKIP_LINES) -> Separator:
    """Infer the field separator of delimited text.

    Parameters
    ----------
    text : str
        File content (or a leading sample of it)
    header_lines : int, default 1
        Number of leading lines to ignore

    Returns
    -------
    Separator
        TAB if every inspected line contains a tab, else COMMA if every
        inspected line contains a comma, else SPACE

    Examples
    --------
    >>> detect_separator("a,b,c\\n1,2,3\\n")
    <Separator.COMMA: 'comma'>
    >>> detect_separator("name\\tage\\nAda\\t36\\n")
    <Separator.TAB: 'tab'>

    """
    if header_lines < 0:
        raise ValueError(f"header_lines must be non-negative, got {header_lines}")

    lines = _inspectable_lines(text, header_lines)
    if not lines:
        logger.debug("Empty content, defaulting to space separator")
        return Separator.SPACE

    if all("\t" in line for line in lines):
        separator = Separator.TAB
    elif all("," in line for line in lines):
        separator = Separator.COMMA
    else:
        separator = Separator.SPACE

    logger.debug("Detected %s separator from %d line(s)", separator.value, len(lines))
    return separator
