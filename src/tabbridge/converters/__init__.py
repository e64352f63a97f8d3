#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/converters/__init__.py
"""Spreadsheet conversion backends.

Backends implement ``SpreadsheetConverter``. ``get_converter`` builds the
backend named by ``BridgeOptions.converter``.
"""

from __future__ import annotations

from typing import Optional

from tabbridge.converters.base import SpreadsheetConverter
from tabbridge.converters.inprocess import PythonConverter
from tabbridge.converters.libreoffice import LibreOfficeConverter
from tabbridge.exceptions import ValidationError
from tabbridge.options import BridgeOptions


def get_converter(options: Optional[BridgeOptions] = None) -> SpreadsheetConverter:
    """Create the conversion backend selected by ``options.converter``.

    Parameters
    ----------
    options : BridgeOptions, optional
        Bridge options; defaults select LibreOffice

    Returns
    -------
    SpreadsheetConverter
        A ready-to-use backend

    """
    options = options or BridgeOptions()
    if options.converter == "libreoffice":
        return LibreOfficeConverter(soffice_path=options.soffice_path, timeout=options.conversion_timeout)
    if options.converter == "python":
        return PythonConverter()
    raise ValidationError(
        f"Unknown converter '{options.converter}'", parameter_name="converter", parameter_value=options.converter
    )


__all__ = [
    "LibreOfficeConverter",
    "PythonConverter",
    "SpreadsheetConverter",
    "get_converter",
]
