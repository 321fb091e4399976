"""Logging setup for the command line entry point."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "[%(asctime)s][%(levelname)s][%(name)s] %(message)s"

# Package root logger; library modules log below it
ROOT_LOGGER = "pkgscore"


def configure_logging(
    level: int | None,
    log_file: Path | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """Route pkgscore log records to a file or to stderr.

    Args:
        level: Logging level, or None to keep pkgscore silent.
        log_file: Append records to this file instead of the console.
        console: Rich console for stderr output when no file is given.

    Returns:
        The package root logger.
    """
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.propagate = False
    if level is None:
        root.addHandler(logging.NullHandler())
        root.setLevel(logging.CRITICAL + 1)
        return root

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

    root.addHandler(handler)
    root.setLevel(level)
    return root
