"""Logging setup.

Modules log through ``logging.getLogger(__name__)``.  Handlers are
installed once, by the process entry point, through :func:`setup_logging`;
the returned logger is the handle passed to anything that needs one.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "tai"
_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(
    *,
    debug: bool = False,
    log_file: Path | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the ``tai`` logger and return it.

    Warnings and errors always go to stderr.  With *debug* enabled, debug
    records are additionally written to *log_file* when one is given.
    Calling this again replaces the previously installed handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False

    stderr_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    stderr_handler.setLevel(logging.WARNING)
    logger.addHandler(stderr_handler)

    if debug and log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.debug("Logging initialised (debug=%s, file=%s)", debug, log_file)
    return logger
