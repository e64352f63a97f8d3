#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/tabbridge/cli/commands.py
"""Handlers for the ``detect``, ``show`` and ``set`` subcommands.

Each handler returns a process exit code. Library errors are left to
propagate to ``main``, which maps them to exit codes.
"""

import argparse
import logging
from pathlib import Path

from tabbridge.api import ConfirmCallback, OpenStatus, TableBridge, accept_all
from tabbridge.classifier import classify, is_spreadsheet
from tabbridge.cli.builder import EXIT_SUCCESS
from tabbridge.cli.output import confirm_conversion, make_console, render_classifications, render_grid
from tabbridge.exceptions import FileNotFoundError
from tabbridge.options import BridgeOptions
from tabbridge.separator import detect_separator
from tabbridge.session import FileClassification
from tabbridge.utils.encoding import read_text_file

logger = logging.getLogger(__name__)


def _confirm_callback(parsed_args: argparse.Namespace) -> ConfirmCallback:
    return accept_all if getattr(parsed_args, "yes", False) else confirm_conversion


def _classify_file(path: Path, options: BridgeOptions) -> FileClassification:
    if not path.is_file():
        raise FileNotFoundError(str(path))
    if is_spreadsheet(path, options.spreadsheet_extensions):
        return classify(path, extensions=options.spreadsheet_extensions)

    text, encoding = read_text_file(path, options.encoding)
    separator = detect_separator(text, options.header_skip_lines)
    return classify(path, separator=separator, encoding=encoding, extensions=options.spreadsheet_extensions)


def handle_detect_command(parsed_args: argparse.Namespace, options: BridgeOptions) -> int:
    """Classify each file without converting anything.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed arguments with ``files``
    options : BridgeOptions
        Bridge options

    Returns
    -------
    int
        Exit code

    """
    classifications = [_classify_file(Path(name), options) for name in parsed_args.files]
    render_classifications(make_console(), classifications)
    return EXIT_SUCCESS


def handle_show_command(parsed_args: argparse.Namespace, options: BridgeOptions) -> int:
    """Open one file through the bridge and print its cells.

    Returns
    -------
    int
        Exit code; a declined confirmation is a success

    """
    bridge = TableBridge(options, confirm=_confirm_callback(parsed_args))
    result = bridge.open(parsed_args.file)
    if result.status is OpenStatus.DECLINED or result.session is None:
        make_console(stderr=True).print(f"[yellow]Not opened:[/yellow] {parsed_args.file}")
        return EXIT_SUCCESS

    session = result.session
    try:
        render_grid(
            make_console(),
            session.surface.snapshot(),
            title=f"{session.source_path} ({session.separator.value}-separated)",
        )
    finally:
        bridge.close(session)
    return EXIT_SUCCESS


def handle_set_command(parsed_args: argparse.Namespace, options: BridgeOptions) -> int:
    """Open one file, apply ``--cell`` assignments and save it back.

    Returns
    -------
    int
        Exit code; a declined confirmation is a success

    """
    bridge = TableBridge(options, confirm=_confirm_callback(parsed_args))
    result = bridge.open(parsed_args.file)
    if result.status is OpenStatus.DECLINED or result.session is None:
        make_console(stderr=True).print(f"[yellow]Not opened:[/yellow] {parsed_args.file}")
        return EXIT_SUCCESS

    session = result.session
    surface = session.surface
    try:
        for row, col, value in parsed_args.cells:
            surface.set_cell(row, col, value)
        bridge.save(session)
    finally:
        bridge.close(session)

    make_console(stderr=True).print(f"[green]Saved[/green] {session.source_path}")
    return EXIT_SUCCESS


COMMAND_HANDLERS = {
    "detect": handle_detect_command,
    "show": handle_show_command,
    "set": handle_set_command,
}
