"""
tests/conftest.py

Shared pytest fixtures for the unit test suites.
All HTTP fixtures use respx.mock — no real network calls are made in any test.
"""

from __future__ import annotations

from typing import Any

import pytest
import respx

from config import AppConfig


# ---------------------------------------------------------------------------
# HTTP mock fixture — intercepts all httpx calls
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_http():
    """
    Yields a respx router that intercepts all httpx.AsyncClient calls.

    No real network traffic is allowed during tests. Use this fixture
    wherever a service or client would normally make an outbound request.
    """
    with respx.mock(assert_all_called=False) as router:
        yield router


# ---------------------------------------------------------------------------
# Configuration fixtures
# ---------------------------------------------------------------------------


def make_config(**overrides: Any) -> AppConfig:
    """Builds a valid AppConfig for a single home.example.com domain."""
    data: dict[str, Any] = {
        "api_token": "test-token",
        "zones": {"example.com": "zone123"},
        "domains": [{"name": "home.example.com", "record": "home"}],
        "interval": 5,
        "ttl": 120,
    }
    data.update(overrides)
    return AppConfig.model_validate(data)


@pytest.fixture()
def app_config() -> AppConfig:
    return make_config()


@pytest.fixture()
def config_factory():
    """Returns make_config so tests can build variants of the default config."""
    return make_config
