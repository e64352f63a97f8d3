"""Logging setup for the tabbridge command line."""

from __future__ import annotations

import logging
import sys
from typing import Iterable, Optional

# chardet logs every prober at DEBUG, which buries the bridge's own messages
NOISY_LIBRARY_LOGGERS = ("chardet", "charset_normalizer")

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    quiet_loggers: Iterable[str] = NOISY_LIBRARY_LOGGERS,
) -> logging.Logger:
    """Install the stderr handler (and optional file handler) on the root logger.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "INFO").
    log_file : str, optional
        Append log records to this file as well. The file always receives
        the trace format, at DEBUG level when ``trace_mode`` is set.
    trace_mode : bool, default False
        Emit timestamps and logger names on the console, and let the
        ``quiet_loggers`` through at the requested level.
    quiet_loggers : iterable of str
        Third-party loggers capped at WARNING outside trace mode.

    Returns
    -------
    logging.Logger
        The configured root logger.

    """
    level = _resolve_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if trace_mode else level)
    root_logger.handlers.clear()

    if trace_mode:
        console_formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        console_formatter = logging.Formatter(CONSOLE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.NOTSET if trace_mode else logging.WARNING)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(logging.DEBUG if trace_mode else level)
            file_handler.setFormatter(logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT))
            root_logger.addHandler(file_handler)
            root_logger.debug("Logging to file: %s", log_file)

    return root_logger
