#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/converters/xlsx.py
"""In-process XLSX reading and writing with openpyxl.

Only cell values of the first worksheet survive the round trip.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tabbridge.constants import DEPS_XLSX
from tabbridge.converters.base import coerce_cell_value, format_cell_value, trim_trailing_empty
from tabbridge.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)


@requires_dependencies("xlsx", DEPS_XLSX)
def read_xlsx_rows(path: Path) -> list[list[str]]:
    """Read the first worksheet of an XLSX workbook as rows of text.

    Formulas are read as their cached values.
    """
    import openpyxl

    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        if not wb.worksheets:
            return []
        sheet = wb.worksheets[0]
        rows = [[format_cell_value(value) for value in row] for row in sheet.iter_rows(values_only=True)]
    finally:
        wb.close()

    rows = trim_trailing_empty(rows)
    logger.debug("Read %d row(s) from %s", len(rows), path)
    return rows


@requires_dependencies("xlsx", DEPS_XLSX)
def write_xlsx_rows(rows: list[list[str]], path: Path) -> None:
    """Write rows to a single-sheet XLSX workbook, typing numeric cells."""
    import openpyxl

    wb = openpyxl.Workbook()
    sheet = wb.active
    sheet.title = "Sheet1"
    for row in rows:
        sheet.append([coerce_cell_value(text) for text in row])
    wb.save(path)
    logger.debug("Wrote %d row(s) to %s", len(rows), path)
