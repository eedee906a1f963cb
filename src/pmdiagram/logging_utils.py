"""Logging configuration for the command line tools.

Library modules log through ``loguru``'s global logger; the package disables
its own records on import so that embedding applications stay quiet until
they opt in with :func:`configure_logging`.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

_CONSOLE_FORMAT = "<level>{level:<8}</level> | {message}"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function} | {message}"


def configure_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Enable ``pmdiagram`` log records and install sinks.

    Parameters
    ----------
    verbose : bool
        Log DEBUG records (every swept point) to stderr instead of WARNING
        and above.
    log_file : Path, optional
        Also write DEBUG records to this file, rotated at 5 MB.
    """
    logger.remove()
    logger.enable("pmdiagram")
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format=_CONSOLE_FORMAT,
        backtrace=False,
        diagnose=False,
    )
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level="DEBUG",
            format=_FILE_FORMAT,
            rotation="5 MB",
            retention=10,
            backtrace=False,
            diagnose=False,
        )
