#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/converters/base.py
"""Abstract base class and shared helpers for spreadsheet converters.

A converter moves the first sheet of a spreadsheet into a comma-separated
file and back. Converters only write to the target path they are given;
staging, output verification and replacement of the source file are handled
by ``ConversionBridge``.
"""

from __future__ import annotations

import csv
import datetime
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Union

from tabbridge.constants import CONVERTED_CSV_ENCODING, DEFAULT_LINE_TERMINATOR

_INT_RE = re.compile(r"^-?(0|[1-9]\d*)$")
_FLOAT_RE = re.compile(r"^-?(0|[1-9]\d*)(\.\d+)?([eE][-+]?\d+)?$")


class SpreadsheetConverter(ABC):
    """Base class for spreadsheet conversion backends.

    Attributes
    ----------
    tool_name : str
        Human-readable name of the tool, used in error messages

    """

    tool_name: str = "spreadsheet converter"

    @abstractmethod
    def to_delimited(self, source: Path, target: Path) -> None:
        """Convert the spreadsheet ``source`` into a CSV file at ``target``.

        Parameters
        ----------
        source : Path
            Spreadsheet file to read
        target : Path
            CSV file to create

        Raises
        ------
        ConversionError
            If the conversion cannot be performed

        """

    @abstractmethod
    def from_delimited(self, source: Path, target: Path, extension: str) -> None:
        """Convert the CSV file ``source`` into a spreadsheet at ``target``.

        Parameters
        ----------
        source : Path
            CSV file to read
        target : Path
            Spreadsheet file to create
        extension : str
            Spreadsheet format to produce (e.g., "xlsx")

        Raises
        ------
        ConversionError
            If the conversion cannot be performed

        """


def format_cell_value(value: Any) -> str:
    """Render a spreadsheet cell value as CSV text.

    Integral floats lose their trailing ``.0``, booleans become TRUE/FALSE
    and dates use ISO format; ``None`` becomes an empty string.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime.datetime):
        if value.time() == datetime.time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    return str(value)


def coerce_cell_value(text: str) -> Union[str, int, float, None]:
    """Turn CSV text back into a typed spreadsheet value.

    Plain integers (without leading zeros) and decimals become numbers so the
    spreadsheet can calculate with them. A decimal is only converted when it
    reads back as the same text (``"2.5"`` but not ``"2.50"``); everything
    else stays text.
    """
    if text == "":
        return None
    if _INT_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        value = float(text)
        if format_cell_value(value) == text:
            return value
    return text


def trim_trailing_empty(rows: list[list[str]]) -> list[list[str]]:
    """Drop empty trailing cells from every row and empty trailing rows."""
    trimmed = []
    for row in rows:
        end = len(row)
        while end and row[end - 1] == "":
            end -= 1
        trimmed.append(row[:end])
    while trimmed and not trimmed[-1]:
        trimmed.pop()
    return trimmed


def read_csv_rows(path: Path) -> list[list[str]]:
    """Read a UTF-8 CSV file (optionally with BOM) into rows."""
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return [list(row) for row in csv.reader(f)]


def write_csv_rows(rows: list[list[str]], path: Path) -> None:
    """Write rows to a UTF-8 CSV file with minimal quoting."""
    with open(path, "w", encoding=CONVERTED_CSV_ENCODING, newline="") as f:
        writer = csv.writer(f, lineterminator=DEFAULT_LINE_TERMINATOR)
        writer.writerows(rows)
