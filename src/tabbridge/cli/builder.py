#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Argument parser, exit codes and option assembly for the tabbridge CLI."""

import argparse
import logging
import os
from typing import Any, Optional

from tabbridge import __version__
from tabbridge.cli.config import load_config_with_priority
from tabbridge.constants import CONFIG_ENV_VAR, SUPPORTED_CONVERTERS
from tabbridge.exceptions import (
    ConversionError,
    DependencyError,
    ExportWriteError,
    FileError,
    ValidationError,
)
from tabbridge.options import BridgeOptions

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_CONVERSION_ERROR = 5
EXIT_EXPORT_ERROR = 6


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, (DependencyError, ImportError)):
        return EXIT_DEPENDENCY_ERROR

    if isinstance(exception, (ValidationError, argparse.ArgumentTypeError)):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, FileError):
        return EXIT_FILE_ERROR

    if isinstance(exception, ConversionError):
        return EXIT_CONVERSION_ERROR

    if isinstance(exception, ExportWriteError):
        return EXIT_EXPORT_ERROR

    return EXIT_ERROR


def parse_cell_assignment(value: str) -> tuple[int, int, str]:
    """Parse a ``ROW,COL=VALUE`` cell assignment.

    Rows and columns are zero-based. Everything after the first ``=`` is the
    new value, so values may contain ``=`` and ``,``.

    Raises
    ------
    argparse.ArgumentTypeError
        If the assignment is malformed

    Examples
    --------
    >>> parse_cell_assignment("1,2=hello")
    (1, 2, 'hello')

    """
    position, sep, text = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"Cell assignment must look like ROW,COL=VALUE, got '{value}'")
    try:
        row_str, col_str = position.split(",")
        row, col = int(row_str), int(col_str)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid cell position '{position}' in '{value}'") from e
    if row < 0 or col < 0:
        raise argparse.ArgumentTypeError(f"Cell position must be non-negative, got '{position}'")
    return row, col, text


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    config_group = parser.add_argument_group("configuration")
    config_group.add_argument(
        "--config",
        help="Path to configuration file (TOML, YAML or JSON). If not specified, searches for "
        ".tabbridge.toml/.yaml/.yml/.json or [tool.tabbridge] in pyproject.toml from the current "
        f"directory upwards, then in the home directory. {CONFIG_ENV_VAR} is used when set.",
    )
    config_group.add_argument(
        "--no-config",
        action="store_true",
        dest="no_config",
        help=f"Disable loading of configuration files, including {CONFIG_ENV_VAR} and --config.",
    )

    bridge_group = parser.add_argument_group("bridge options")
    bridge_group.add_argument(
        "--converter",
        choices=list(SUPPORTED_CONVERTERS),
        help="Spreadsheet conversion backend (default: libreoffice)",
    )
    bridge_group.add_argument(
        "--header-skip",
        type=int,
        dest="header_skip_lines",
        metavar="N",
        help="Leading lines ignored by separator detection (default: 1)",
    )
    bridge_group.add_argument(
        "--extensions",
        dest="spreadsheet_extensions",
        metavar="EXT[,EXT...]",
        help="Comma-separated spreadsheet extensions (default: xlsx,xls,ods)",
    )
    bridge_group.add_argument(
        "--soffice-path",
        dest="soffice_path",
        metavar="PATH",
        help="Path to the LibreOffice soffice executable",
    )
    bridge_group.add_argument(
        "--timeout",
        type=float,
        dest="conversion_timeout",
        metavar="SECONDS",
        help="Seconds to wait for an external conversion (default: 120)",
    )
    bridge_group.add_argument(
        "--encoding",
        help="Force the text encoding of delimited files instead of detecting it",
    )

    log_group = parser.add_argument_group("logging")
    log_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level for debugging (default: WARNING)",
    )
    log_group.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        help="Write log messages to specified file in addition to console output",
    )
    log_group.add_argument(
        "--trace",
        action="store_true",
        help="Enable trace mode with very verbose logging",
    )


def _add_yes_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Convert spreadsheets without asking for confirmation",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``tabbridge`` command.

    Returns
    -------
    argparse.ArgumentParser
        Parser with the ``detect``, ``show`` and ``set`` subcommands

    """
    parser = argparse.ArgumentParser(
        prog="tabbridge",
        description="Open delimited text and spreadsheet files as tables and write edits back.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _add_global_options(parser)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    detect_parser = subparsers.add_parser(
        "detect",
        help="Classify files and detect their separator",
        description="Report whether each file is a spreadsheet, its separator and its temporary CSV path.",
    )
    detect_parser.add_argument("files", nargs="+", metavar="FILE", help="Files to inspect")

    show_parser = subparsers.add_parser(
        "show",
        help="Open a file and print it as a table",
        description="Open a file through the bridge and print its cells.",
    )
    show_parser.add_argument("file", metavar="FILE", help="File to show")
    _add_yes_option(show_parser)

    set_parser = subparsers.add_parser(
        "set",
        help="Change cells of a file and save it back",
        description="Open a file, assign cells and save it back in its original format.",
    )
    set_parser.add_argument("file", metavar="FILE", help="File to edit")
    set_parser.add_argument(
        "--cell",
        action="append",
        required=True,
        type=parse_cell_assignment,
        dest="cells",
        metavar="ROW,COL=VALUE",
        help="Zero-based cell assignment; may be repeated",
    )
    _add_yes_option(set_parser)

    return parser


_OPTION_FLAGS = (
    "converter",
    "header_skip_lines",
    "spreadsheet_extensions",
    "soffice_path",
    "conversion_timeout",
    "encoding",
)


def build_options(parsed_args: argparse.Namespace, environ: Optional[dict[str, str]] = None) -> BridgeOptions:
    """Build ``BridgeOptions`` from configuration files and command-line flags.

    Command-line flags override configuration file values.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed command-line arguments
    environ : dict, optional
        Environment used to look up ``TABBRIDGE_CONFIG``; defaults to ``os.environ``

    Returns
    -------
    BridgeOptions
        Merged options

    Raises
    ------
    argparse.ArgumentTypeError
        If a configuration file cannot be loaded
    ValidationError
        If the merged values are invalid

    """
    environ = os.environ if environ is None else environ
    config: dict[str, Any] = {}
    if not parsed_args.no_config:
        config = load_config_with_priority(
            explicit_path=parsed_args.config,
            env_var_path=environ.get(CONFIG_ENV_VAR),
        )
        if config:
            logger.debug("Loaded configuration: %s", config)

    options = BridgeOptions.from_dict(config)
    overrides = {
        name: getattr(parsed_args, name) for name in _OPTION_FLAGS if getattr(parsed_args, name, None) is not None
    }
    return options.create_updated(**overrides) if overrides else options
