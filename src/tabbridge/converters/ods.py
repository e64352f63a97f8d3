#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/converters/ods.py
"""In-process ODS reading and writing with odfpy.

Only cell values of the first table survive the round trip. Repeated rows
and columns (``table:number-rows-repeated`` / ``number-columns-repeated``)
are expanded, except where they only pad the end of the sheet.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from tabbridge.constants import DEPS_ODF
from tabbridge.converters.base import coerce_cell_value, format_cell_value
from tabbridge.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

_NUMERIC_VALUE_TYPES = ("float", "percentage", "currency")


def _repeat_count(element: Any, attribute: str) -> int:
    try:
        return max(int(element.getAttribute(attribute) or 1), 1)
    except (ValueError, TypeError):
        return 1


def _cell_text(cell: Any) -> str:
    from odf import teletype
    from odf.text import P

    value_type = cell.getAttribute("valuetype")
    if value_type in _NUMERIC_VALUE_TYPES and cell.getAttribute("value"):
        return format_cell_value(float(cell.getAttribute("value")))
    if value_type == "date" and cell.getAttribute("datevalue"):
        return str(cell.getAttribute("datevalue"))
    if value_type == "boolean" and cell.getAttribute("booleanvalue"):
        return "TRUE" if cell.getAttribute("booleanvalue") == "true" else "FALSE"

    return "\n".join(teletype.extractText(p) for p in cell.getElementsByType(P))


def _expand(runs: list[tuple[Any, int]], is_empty: Any) -> list[Any]:
    while runs and is_empty(runs[-1][0]):
        runs.pop()
    expanded: list[Any] = []
    for value, count in runs:
        expanded.extend(value for _ in range(count))
    return expanded


@requires_dependencies("ods", DEPS_ODF)
def read_ods_rows(path: Path) -> list[list[str]]:
    """Read the first table of an ODS document as rows of text."""
    from odf.opendocument import load
    from odf.table import Table, TableCell, TableRow

    doc = load(str(path))
    tables = doc.body.getElementsByType(Table) if doc.body else []
    if not tables:
        return []

    row_runs: list[tuple[Any, int]] = []
    for row in tables[0].getElementsByType(TableRow):
        cell_runs = [
            (_cell_text(cell), _repeat_count(cell, "numbercolumnsrepeated"))
            for cell in row.getElementsByType(TableCell)
        ]
        cells = _expand(cell_runs, lambda text: text == "")
        row_runs.append((cells, _repeat_count(row, "numberrowsrepeated")))

    rows = [list(cells) for cells in _expand(row_runs, lambda cells: not cells)]
    logger.debug("Read %d row(s) from %s", len(rows), path)
    return rows


@requires_dependencies("ods", DEPS_ODF)
def write_ods_rows(rows: list[list[str]], path: Path) -> None:
    """Write rows to a single-table ODS document, typing numeric cells."""
    from odf import teletype
    from odf.opendocument import OpenDocumentSpreadsheet
    from odf.table import Table, TableCell, TableRow
    from odf.text import P

    doc = OpenDocumentSpreadsheet()
    table = Table(name="Sheet1")

    for row in rows:
        table_row = TableRow()
        for text in row:
            value = coerce_cell_value(text)
            if value is None:
                table_row.addElement(TableCell())
                continue
            if isinstance(value, str):
                cell = TableCell(valuetype="string")
            else:
                cell = TableCell(valuetype="float", value=text)
            paragraph = P()
            teletype.addTextToElement(paragraph, text)
            cell.addElement(paragraph)
            table_row.addElement(cell)
        if not row:
            # A table row must hold at least one cell
            table_row.addElement(TableCell())
        table.addElement(table_row)

    doc.spreadsheet.addElement(table)
    doc.save(str(path))
    logger.debug("Wrote %d row(s) to %s", len(rows), path)
