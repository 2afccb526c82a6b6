import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from core.logging_setup import LOGGER_NAMES, setup_logging


@pytest.fixture(autouse=True)
def restore_loggers():
    saved = {}
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        saved[name] = (logger.level, logger.propagate, list(logger.handlers))
    yield
    for name, (level, propagate, handlers) in saved.items():
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = propagate
        logger.handlers[:] = handlers


def test_setup_logging_is_idempotent():
    buffer = io.StringIO()
    console = Console(file=buffer, width=200)
    setup_logging("DEBUG", console=console)
    setup_logging("DEBUG", console=console)

    logger = logging.getLogger("adapters")
    assert logger.level == logging.DEBUG
    assert sum(isinstance(h, RichHandler) for h in logger.handlers) == 1

    logging.getLogger("adapters.catalog_fetcher").debug("downloaded acme/tool@1.0.0")
    assert "downloaded acme/tool@1.0.0" in buffer.getvalue()


def test_setup_logging_adjusts_level():
    console = Console(file=io.StringIO())
    setup_logging("DEBUG", console=console)
    setup_logging(logging.WARNING, console=console)
    assert logging.getLogger("core").level == logging.WARNING
