"""
Pytest configuration and shared fixtures
"""
import pytest
from unittest.mock import Mock

from tests.fakes import FakeAgent, FakeStorage


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def agent():
    return FakeAgent()


@pytest.fixture
def mock_langbase():
    """Mock LangbaseClient for provisioning tests."""
    client = Mock()
    client.create_memory.return_value = {"name": "user-1"}
    client.create_pipe.return_value = {"name": "user-1"}
    return client
