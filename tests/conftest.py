"""Pytest configuration for async testing.

This configuration ensures:
1. Async tests are marked for pytest-asyncio automatically
2. Time-dependent code runs against a controllable clock
3. Attempt stores are fresh per test (no shared state)
"""

import inspect
from unittest.mock import MagicMock

import pytest

from src.infrastructure.rate_limit.memory_store import MemoryAttemptStore

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)

START_EPOCH_SECONDS = 1_750_000_000.0


class FakeClock:
    """Callable clock returning epoch seconds; advanced manually by tests."""

    def __init__(self, start: float = START_EPOCH_SECONDS) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    @property
    def now_ms(self) -> int:
        return int(self.now * 1000)


@pytest.fixture
def clock() -> FakeClock:
    """Controllable clock starting at a fixed instant."""
    return FakeClock()


@pytest.fixture
def logger() -> MagicMock:
    """Logger double satisfying LoggerProtocol."""
    return MagicMock()


@pytest.fixture
def memory_store(clock) -> MemoryAttemptStore:
    """Isolated in-process attempt store driven by the fake clock."""
    return MemoryAttemptStore(clock=clock)


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with a real database engine"
    )
    config.addinivalue_line("markers", "asyncio: Async test that requires event loop")


# Test execution configuration
def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        function = getattr(item, "function", None)
        if function is not None and inspect.iscoroutinefunction(function):
            item.add_marker(pytest.mark.asyncio)
