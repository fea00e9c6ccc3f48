import logging

import pytest

from simplefs import SimpleShell
from simplefs.filesystem import VirtualFS
from simplefs.limits import Limits


@pytest.fixture(autouse=True)
def reset_simplefs_logger():
    """Drop handlers the CLI attaches so they never outlive captured streams."""
    yield
    logger = logging.getLogger("simplefs")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def fs():
    return VirtualFS()


@pytest.fixture
def small_limits():
    return Limits(max_nodes=3, max_namelength=5, max_depth=3)


@pytest.fixture
def shell():
    return SimpleShell()
