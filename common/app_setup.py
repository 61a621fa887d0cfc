"""
Reusable logging and console output setup for the file tree tools.

Functions:
    setup_logging      - Configure the root logger and return it.
    set_print_logger   - Set the logger mirrored by print_and_log and print_error.
    print_and_log      - Print a message and log it as info.
    print_error        - Print a message to stderr and log it as an error.
"""

import logging
import os
import sys
from typing import Optional

from rich.console import Console

# Module-level variable to hold the logger for print_and_log and print_error
_print_logger: Optional[logging.Logger] = None


def _console(stderr: bool = False) -> Console:
    # Built per call so output follows the current sys.stdout / sys.stderr
    return Console(file=sys.stderr if stderr else sys.stdout, highlight=False, emoji=False, soft_wrap=True)


def setup_logging(app_name: str = "filetree", loglevel: int | str = logging.INFO, logfile: Optional[str] = None) -> logging.Logger:
    """
    Set up logging for the application.
    Logs to ~/.<app_name>/log.txt unless a custom logfile is given.
    Any handlers already on the root logger are replaced.
    Returns the configured logger.
    """
    logger = logging.getLogger()
    logger.setLevel(loglevel)
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(process)d %(message)s')
    if logfile is None:
        log_dir = os.path.expanduser(f"~/.{app_name}")
        os.makedirs(log_dir, exist_ok=True)
        logfile = os.path.join(log_dir, "log.txt")
    else:
        log_dir = os.path.dirname(os.path.abspath(logfile))
        os.makedirs(log_dir, exist_ok=True)
    handler = logging.FileHandler(logfile)

    # Remove any existing handlers
    for h in logger.handlers[:]:
        logger.removeHandler(h)
        if isinstance(h, logging.FileHandler):
            h.close()

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    set_print_logger(logger)
    logger.debug(f"Logger initialized for {app_name}, writing to {logfile}")
    return logger


def set_print_logger(logger: Optional[logging.Logger]):
    """
    Set the logger to be used by print_and_log and print_error.
    setup_logging calls this; pass None to stop mirroring.
    """
    global _print_logger
    _print_logger = logger


def print_and_log(message: str, log: bool = True):
    """
    Print to stdout and log as info.
    The message is printed verbatim: square brackets are not rich markup here.
    """
    _console().print(message, markup=False)
    if log and _print_logger is not None:
        _print_logger.info(message)


def print_error(message: str):
    """
    Print and log an error message (stderr and error level), using the logger set by set_print_logger.
    """
    _console(stderr=True).print(message, style="bold red", markup=False)
    if _print_logger is not None:
        _print_logger.error(message)
