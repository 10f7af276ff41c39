"""Pytest fixtures for Simple API Demo tests."""

import pytest
from fastapi.testclient import TestClient

from simple_api_demo.app import create_application_app, create_main_app
from simple_api_demo.config import Config


@pytest.fixture
def main_client():
    """In-process client for the main server app."""
    with TestClient(create_main_app()) as client:
        yield client


@pytest.fixture
def app_client():
    """In-process client for the application server app."""
    with TestClient(create_application_app()) as client:
        yield client


@pytest.fixture
def local_config() -> Config:
    """Loopback config with ephemeral ports, safe to run in parallel."""
    return Config(main_port=0, app_port=0, bind_address="127.0.0.1")
