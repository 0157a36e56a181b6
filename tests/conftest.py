"""
Burnwatch - Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
import stat
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from burnwatch.config.schemas import MonitorSettings
from burnwatch.observability import ObservabilityAdapter, reset_observability

from .helpers import FakeInvoker, FakeLocator

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"


@pytest.fixture(autouse=True)
def reset_global_observability() -> Generator[None, None, None]:
    """Reset the global observability adapter after each test."""
    yield
    reset_observability()


@pytest.fixture
def obs() -> ObservabilityAdapter:
    """Observability adapter that leaves logging handlers alone."""
    return ObservabilityAdapter(configure_logging=False)


@pytest.fixture
def settings() -> MonitorSettings:
    return MonitorSettings(refresh_interval=300)


@pytest.fixture
def fake_locator() -> FakeLocator:
    return FakeLocator()


@pytest.fixture
def fake_invoker() -> FakeInvoker:
    return FakeInvoker()


@pytest.fixture
def make_executable(tmp_path: Path) -> Callable[..., Path]:
    """Create an executable file (optionally a shell script) under tmp_path."""

    def _make(relative: str, script: str = "#!/bin/sh\nexit 0\n") -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(script)
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make
