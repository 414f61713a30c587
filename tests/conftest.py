"""
Shared test fixtures for Kodzero SDK tests.

Provides configuration, a fake backend served through ``httpx.MockTransport``,
and refresh callback recorders.
"""

from __future__ import annotations

import pytest

from fake_backend import HOST, CallbackRecorder, FakeBackend
from kodzero.config import KodzeroConfig, TelemetryConfig


@pytest.fixture
def base_config() -> KodzeroConfig:
    """Provide a basic SDK configuration for testing."""
    return KodzeroConfig(
        host=HOST,
        telemetry=TelemetryConfig(enabled=False),
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def callbacks() -> CallbackRecorder:
    return CallbackRecorder()
