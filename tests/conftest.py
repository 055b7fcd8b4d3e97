"""Pytest configuration and fixtures for test suite."""

import asyncio

import pytest

from core.models.config_data import DataSourceConfig, MockConfig
from core.service_manager import service_manager


def run_sync(coro):
    """Run a coroutine on a private loop, leaving any current loop untouched."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@pytest.fixture(autouse=True)
def fresh_services():
    """Start every test against a freshly seeded mock robot.

    The simulator is switched off so values only change when a test changes them.
    """
    run_sync(service_manager.stop_services())
    service_manager.configure(DataSourceConfig(type="mock", mock=MockConfig(simulate=False)))
    run_sync(service_manager.start_services())

    yield

    run_sync(service_manager.stop_services())
