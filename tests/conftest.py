from unittest.mock import Mock

import pytest
import requests


@pytest.fixture
def no_sleep():
    return Mock()


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection reset")
