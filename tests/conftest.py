" generic fixtures "
import logging
from unittest.mock import AsyncMock, Mock

import pytest

from cosmolith.logging_setup import set_strict


def pytest_configure():
    "Runs once before all"
    from cosmolith.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture
def test_logger():
    "A silent logger"
    logger = logging.getLogger("cosmolith-tests")
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


@pytest.fixture
def strict_errors():
    "Raise on unrouted events for the duration of the test"
    set_strict(True)
    yield
    set_strict(False)


@pytest.fixture
def mock_open_connection(mocker):
    reader = AsyncMock()
    # StreamWriter methods write and close are synchronous, drain and wait_closed are async
    writer = Mock()
    writer.drain = AsyncMock()
    writer.wait_closed = AsyncMock()

    mock_connect = mocker.patch("asyncio.open_unix_connection", return_value=(reader, writer))
    return mock_connect, reader, writer
