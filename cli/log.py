"""
Logging setup for the CLI.

The m8midi library only creates module loggers; the CLI decides where
records go. With --verbose, debug records are shown through Rich.
"""

import logging

from rich.logging import RichHandler

LOGGER_NAME = "m8midi"


def setup_logging(verbose: bool = False) -> None:
    """
    Route m8midi log records to the console.

    Args:
        verbose: Show debug records instead of warnings only
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
