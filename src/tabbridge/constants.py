#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the tabbridge library.

This module centralizes the default configuration values used across
tabbridge. Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Classification and Detection - spreadsheet extensions, header skipping
3. Conversion - backend selection, LibreOffice invocation
4. Export - CSV writer settings
5. Optional Dependencies - package requirements per backend
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

ConverterName = Literal["libreoffice", "python"]

# =============================================================================
# Classification and Detection
# =============================================================================

DEFAULT_SPREADSHEET_EXTENSIONS: tuple[str, ...] = ("xlsx", "xls", "ods")
DEFAULT_HEADER_SKIP_LINES = 1

# Suffix used for the delimited copy of a spreadsheet while it is being edited
TEMP_FILE_SUFFIX = ".csv"

# Fallback chain for decoding text-class files (utf-8-sig first so a BOM round-trips)
DEFAULT_TEXT_FALLBACK_ENCODINGS = ["utf-8-sig", "utf-8", "latin-1"]
DEFAULT_ENCODING_SAMPLE_SIZE = 8192
DEFAULT_ENCODING_CONFIDENCE = 0.7

# =============================================================================
# Conversion
# =============================================================================

DEFAULT_CONVERTER: ConverterName = "libreoffice"
SUPPORTED_CONVERTERS: tuple[str, ...] = ("libreoffice", "python")
DEFAULT_CONVERSION_TIMEOUT = 120.0
DEFAULT_REMOVE_TEMP_ON_CLOSE = False

# Executable names searched on PATH when no explicit soffice path is configured
SOFFICE_EXECUTABLES = ("soffice", "libreoffice")
LIBREOFFICE_TOOL_NAME = "LibreOffice (soffice)"

# Filter options for LibreOffice's CSV filter: field separator 44 (','),
# text delimiter 34 ('"'), character set 76 (UTF-8)
LIBREOFFICE_CSV_FILTER_OPTIONS = "44,34,76"
LIBREOFFICE_CSV_EXPORT_FILTER = f"csv:Text - txt - csv (StarCalc):{LIBREOFFICE_CSV_FILTER_OPTIONS}"
LIBREOFFICE_CSV_IMPORT_FILTER = f"CSV:{LIBREOFFICE_CSV_FILTER_OPTIONS}"

# Prefix of the private staging directories conversions and exports are written through
STAGING_DIR_PREFIX = ".tabbridge-"

# Encoding of CSV files produced by forward conversion
CONVERTED_CSV_ENCODING = "utf-8"

# =============================================================================
# Export
# =============================================================================

DEFAULT_LINE_TERMINATOR = "\n"
DEFAULT_QUOTE_CHAR = '"'
SPACE_FIELD_SEPARATOR = " "

# =============================================================================
# Optional Dependencies
# =============================================================================

DEPS_XLSX = [("openpyxl", "openpyxl", ">=3.1")]
DEPS_ODF = [("odfpy", "odf", ">=1.4")]

# =============================================================================
# Configuration Discovery
# =============================================================================

CONFIG_ENV_VAR = "TABBRIDGE_CONFIG"
CONFIG_FILENAMES = [".tabbridge.toml", ".tabbridge.yaml", ".tabbridge.yml", ".tabbridge.json"]
PYPROJECT_TOOL_SECTION = "tabbridge"
