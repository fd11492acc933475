import inspect
import logging

import pytest

from zip_repo.logging import logger, setup_logging


@pytest.mark.unit
def test_setup_logging_takes_no_arguments() -> None:
    assert not inspect.signature(setup_logging).parameters


@pytest.mark.unit
def test_setup_logging_configures_handlers_once() -> None:
    root = logging.getLogger()
    before = list(root.handlers)

    assert setup_logging() is not None
    assert setup_logging() is not None

    assert root.handlers == before
    assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)


@pytest.mark.unit
def test_module_logger_accepts_printf_style_arguments() -> None:
    logger.info("Collected %d files from %s", 0, "src")
