"""Pytest configuration and shared fixtures for unit tests."""

from pathlib import Path

import pytest
from cfaccess import Client, ClientConfig
from fixtures import FakeExecutor

API = "https://api.example.com"


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def config():
    return ClientConfig(api_address=API, token="secret-token")


@pytest.fixture
def client(config, executor):
    return Client(config, executor=executor)


@pytest.fixture
def http_client(config):
    """A client using the real ``HttpExecutor``; pair with ``responses``."""
    return Client(config)


@pytest.fixture
def fixtures_dir():
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"
