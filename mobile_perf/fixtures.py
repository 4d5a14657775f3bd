"""
pytest fixtures for performance tests running against an Appium session.

Registered as a pytest plugin through the ``pytest11`` entry point, so test
suites get ``test_options`` and ``appium_driver`` without a conftest.
"""

from __future__ import annotations

import logging
from typing import Iterator

import pytest

from mobile_perf.app.configuration import get_options
from mobile_perf.app.options import TestOptions

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session")
def test_options() -> TestOptions:
    """Process-wide options loaded from ``TEST_CONFIG``."""
    return get_options()


@pytest.fixture
def appium_driver(test_options: TestOptions) -> Iterator[object]:
    """A fresh Appium session for the configured apps, quit after the test."""
    from mobile_perf.automation.driver import create_driver

    driver = create_driver(test_options)
    try:
        yield driver
    finally:
        try:
            driver.quit()
        except Exception as exc:
            logger.warning("Appium driver cleanup failed: %s", exc)
