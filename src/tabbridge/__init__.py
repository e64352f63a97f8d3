"""tabbridge - Round-trip editing bridge for delimited text and spreadsheet files.

tabbridge opens comma-, tab- or space-separated text files and spreadsheets
(XLSX, XLS, ODS) into a common tabular editing surface, then writes edits
back to the original file in its original format.

Delimited text is decoded, its separator is inferred from sample lines, and
it is saved with the same separator and encoding. Spreadsheets are converted
to a temporary CSV copy (``report.xlsx`` -> ``report.csv``) through LibreOffice
or the in-process openpyxl/odfpy backend, edited as CSV, and converted back
on save. Only cell values survive the round trip.

Requirements
------------
- Python 3.10+
- LibreOffice (``soffice``) for the default spreadsheet backend

Examples
--------
Edit a CSV file:

    >>> from tabbridge import TableBridge
    >>> bridge = TableBridge()
    >>> result = bridge.open("data.csv")  # doctest: +SKIP
    >>> result.session.separator  # doctest: +SKIP
    <Separator.COMMA: 'comma'>
    >>> result.session.surface.set_cell(1, 2, "4")  # doctest: +SKIP
    >>> bridge.save(result.session)  # doctest: +SKIP
    True

Detect the separator of some text:

    >>> from tabbridge import detect_separator
    >>> detect_separator("name\\tage\\nAda\\t36\\n")
    <Separator.TAB: 'tab'>

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "tabbridge requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from tabbridge.api import OpenResult, OpenStatus, TableBridge, accept_all, open_table
from tabbridge.classifier import classify, is_spreadsheet, temp_path_for
from tabbridge.conversion import ConversionBridge
from tabbridge.converters import LibreOfficeConverter, PythonConverter, SpreadsheetConverter, get_converter
from tabbridge.exceptions import (
    ConversionError,
    DependencyError,
    ExportWriteError,
    FileAccessError,
    FileError,
    FileNotFoundError,
    SessionClosedError,
    TabBridgeError,
    ValidationError,
)
from tabbridge.export import EXPORTERS, ExportDispatcher, export_text
from tabbridge.grid import Grid
from tabbridge.options import BridgeOptions
from tabbridge.separator import Separator, detect_separator
from tabbridge.session import FileClassification, Session, SessionRegistry, SessionState
from tabbridge.surface import EditingSurface, GridSurface

__all__ = [
    "__version__",
    # Orchestration
    "TableBridge",
    "open_table",
    "OpenResult",
    "OpenStatus",
    "accept_all",
    # Detection and classification
    "Separator",
    "detect_separator",
    "classify",
    "is_spreadsheet",
    "temp_path_for",
    # Conversion and export
    "ConversionBridge",
    "SpreadsheetConverter",
    "LibreOfficeConverter",
    "PythonConverter",
    "get_converter",
    "ExportDispatcher",
    "EXPORTERS",
    "export_text",
    # Sessions and surfaces
    "FileClassification",
    "Session",
    "SessionRegistry",
    "SessionState",
    "Grid",
    "EditingSurface",
    "GridSurface",
    # Options
    "BridgeOptions",
    # Exceptions
    "TabBridgeError",
    "ValidationError",
    "FileError",
    "FileNotFoundError",
    "FileAccessError",
    "ConversionError",
    "ExportWriteError",
    "SessionClosedError",
    "DependencyError",
]
