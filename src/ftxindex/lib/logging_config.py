"""Logging configuration for ftxindex.

Provides a single place to configure the root ``ftxindex`` logger for CLI
runs and a ``get_logger`` helper used by every module.
"""

import logging
import sys

LOGGER_NAME = "ftxindex"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty third-party loggers kept at WARNING unless running verbose
_NOISY_LOGGERS = ("httpx", "httpcore")


def get_logger(name: str) -> logging.Logger:
    """Return a logger for a module.

    Args:
        name: Module name, usually ``__name__``

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure ftxindex logging based on CLI flags.

    Verbose wins over quiet when both are given.

    Args:
        verbose: Emit DEBUG records, including HTTP transport logs
        quiet: Only emit errors
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Replace handlers so repeated calls (e.g. in tests) don't duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.DEBUG if verbose else logging.WARNING)
