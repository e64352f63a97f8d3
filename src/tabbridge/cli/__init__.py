"""Command-line interface for the tabbridge round-trip bridge.

Examples
--------
Inspect files::

    $ tabbridge detect data.csv report.xlsx

Print a file as a table::

    $ tabbridge show data.tsv

Change cells and save the file back in its original format::

    $ tabbridge set report.xlsx --cell 1,2=42 --cell 3,0=total --yes

Use the in-process spreadsheet backend instead of LibreOffice::

    $ tabbridge --converter python show report.ods --yes

Configuration files (``.tabbridge.toml``, ``.tabbridge.yaml``,
``.tabbridge.json`` or ``[tool.tabbridge]`` in ``pyproject.toml``) supply
defaults for the bridge options; command-line flags override them.

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import logging
import sys

from tabbridge.cli.builder import (
    EXIT_ERROR,
    EXIT_VALIDATION_ERROR,
    build_options,
    create_parser,
    get_exit_code_for_exception,
)
from tabbridge.cli.commands import COMMAND_HANDLERS
from tabbridge.exceptions import TabBridgeError
from tabbridge.logging_utils import configure_logging

logger = logging.getLogger(__name__)

__all__ = [
    "main",
    "create_parser",
]


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed command-line arguments

    """
    if parsed_args.trace:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, parsed_args.log_level.upper())

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def main(args: list[str] | None = None) -> int:
    """Run the ``tabbridge`` command and return its exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)

    try:
        options = build_options(parsed_args)
    except (argparse.ArgumentTypeError, TabBridgeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    handler = COMMAND_HANDLERS[parsed_args.command]
    try:
        return handler(parsed_args, options)
    except TabBridgeError as e:
        logger.debug("Command %s failed", parsed_args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
