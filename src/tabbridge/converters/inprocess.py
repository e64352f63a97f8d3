#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/converters/inprocess.py
"""Spreadsheet conversion inside the Python process.

XLSX files go through openpyxl and ODS files through odfpy. Legacy binary
XLS files have no in-process writer and must be converted with LibreOffice.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from tabbridge.classifier import spreadsheet_extension
from tabbridge.constants import LIBREOFFICE_TOOL_NAME
from tabbridge.converters.base import SpreadsheetConverter, read_csv_rows, write_csv_rows
from tabbridge.converters.ods import read_ods_rows, write_ods_rows
from tabbridge.converters.xlsx import read_xlsx_rows, write_xlsx_rows
from tabbridge.exceptions import ConversionError

logger = logging.getLogger(__name__)

RowReader = Callable[[Path], list[list[str]]]
RowWriter = Callable[[list[list[str]], Path], None]

_READERS: dict[str, RowReader] = {
    "xlsx": read_xlsx_rows,
    "ods": read_ods_rows,
}

_WRITERS: dict[str, RowWriter] = {
    "xlsx": write_xlsx_rows,
    "ods": write_ods_rows,
}


class PythonConverter(SpreadsheetConverter):
    """Convert xlsx and ods spreadsheets with openpyxl and odfpy."""

    tool_name = "in-process converter (openpyxl/odfpy)"

    def _unsupported(self, extension: str, path: Path) -> ConversionError:
        return ConversionError(
            f"The in-process converter cannot handle .{extension} files ({path}). "
            f"{LIBREOFFICE_TOOL_NAME} is required for this format: install LibreOffice "
            "and set converter = 'libreoffice'.",
            tool=LIBREOFFICE_TOOL_NAME,
            file_path=str(path),
        )

    def to_delimited(self, source: Path, target: Path) -> None:
        """Write the first sheet of ``source`` to CSV at ``target``."""
        extension = spreadsheet_extension(source)
        reader = _READERS.get(extension)
        if reader is None:
            raise self._unsupported(extension, source)

        write_csv_rows(reader(source), target)

    def from_delimited(self, source: Path, target: Path, extension: str) -> None:
        """Write the CSV ``source`` as a one-sheet ``extension`` workbook at ``target``."""
        writer = _WRITERS.get(extension)
        if writer is None:
            raise self._unsupported(extension, target)
        writer(read_csv_rows(source), target)
