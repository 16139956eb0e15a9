import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI attaches so they do not outlive captured streams."""
    yield
    logger = logging.getLogger("dinner_table_match")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
