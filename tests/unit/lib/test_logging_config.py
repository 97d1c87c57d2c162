"""Unit tests for ftxindex.lib.logging_config."""

import logging
from collections.abc import Generator

import pytest

from ftxindex.lib.logging_config import LOGGER_NAME, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logger() -> Generator[None]:
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.mark.parametrize(
        ("verbose", "quiet", "level"),
        [
            (False, False, logging.INFO),
            (True, False, logging.DEBUG),
            (False, True, logging.ERROR),
            (True, True, logging.DEBUG),
        ],
    )
    def test_level_from_flags(self, verbose: bool, quiet: bool, level: int) -> None:
        setup_logging(verbose=verbose, quiet=quiet)
        assert logging.getLogger(LOGGER_NAME).level == level

    def test_repeated_setup_does_not_duplicate_handlers(self) -> None:
        setup_logging()
        setup_logging()
        assert len(logging.getLogger(LOGGER_NAME).handlers) == 1

    def test_module_loggers_are_children(self) -> None:
        logger = get_logger("ftxindex.services.cascade")
        assert logger.parent is not None
        assert logger.name.startswith(LOGGER_NAME)
