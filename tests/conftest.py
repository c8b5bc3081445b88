"""
Test configuration and fixtures for the Accessibility Scan Service.

No test launches a real browser: the Selenium driver is a MagicMock and
time is driven by a fake clock.
"""

from contextlib import contextmanager
from typing import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.platform.config import settings


class FakeClock:
    """Monotonic clock that only moves when sleep() is called."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    """
    Create a test client for making HTTP requests.
    Server-side exceptions are turned into responses, as in production.
    """
    with TestClient(test_app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def mock_driver():
    """A Chrome driver whose page has a visible body and a loaded engine."""
    driver = MagicMock()
    driver.find_element.return_value.is_displayed.return_value = True
    driver.execute_script.return_value = True
    driver.execute_async_script.return_value = {"violations": "[]"}
    return driver


@pytest.fixture
def session_factory(mock_driver):
    """Stand-in for browser_session that yields mock_driver and records teardown."""

    @contextmanager
    def factory(deadline, url=""):
        factory.deadline = deadline
        try:
            yield mock_driver
        finally:
            mock_driver.quit()

    return factory


@pytest.fixture
def restore_settings():
    """Snapshot the settings fields a test is about to mutate."""
    saved = settings.model_dump()
    yield settings
    for key, value in saved.items():
        setattr(settings, key, value)
