"""
Pytest configuration and fixtures for adapter tests.
"""

import os

import pytest
import structlog
from structlog.contextvars import clear_contextvars

from redis_adapter.manifest.generator import ManifestGenerator
from redis_adapter.manifest.passwords import fixed_password

from factories import make_deployment, make_plan, make_request_params


@pytest.fixture(autouse=True)
def clean_adapter_env(monkeypatch):
    """
    Strip REDIS_ADAPTER_* settings from the environment for every test.

    Tests that need a setting set it themselves with monkeypatch.setenv().
    """
    for key in list(os.environ):
        if key.startswith("REDIS_ADAPTER_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration and bound context after each test."""
    yield
    structlog.reset_defaults()
    clear_contextvars()


@pytest.fixture
def generator():
    return ManifestGenerator(password_generator=fixed_password("generated-password"))


@pytest.fixture
def deployment():
    return make_deployment()


@pytest.fixture
def plan():
    return make_plan()


@pytest.fixture
def request_params():
    return make_request_params()
