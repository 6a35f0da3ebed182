"""Shared pytest configuration."""

import pytest
import structlog


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: tests that take more than a few seconds")
    config.addinivalue_line("markers", "live: tests that fetch from the real Steam store")


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any structlog configuration a test applied (the CLI configures it)."""
    yield
    structlog.reset_defaults()
