"""Appium session factory for the local server and the Sauce Labs device cloud."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from appium import webdriver
from appium.options.android import UiAutomator2Options
from appium.options.common import AppiumOptions
from appium.options.ios import XCUITestOptions

from ...app.options import Platform, Server, TestOptions
from ...services.saucelabs import SauceLabsCredentials, SauceLabsUploader
from ..reporting.allure_helpers import attach_json
from .capabilities import Uploader, session_capabilities

logger = logging.getLogger(__name__)

LOCAL_SERVER_URL = "http://127.0.0.1:4723"

_OPTION_TYPES = {
    Platform.ANDROID: UiAutomator2Options,
    Platform.IOS: XCUITestOptions,
}


def server_url(server: Server, credentials: Optional[SauceLabsCredentials] = None) -> str:
    """Return the WebDriver endpoint for ``server``."""
    if server is Server.LOCALHOST:
        return LOCAL_SERVER_URL
    creds = credentials or SauceLabsCredentials.from_env()
    return creds.webdriver_url


def driver_options(platform: Platform, capabilities: dict) -> AppiumOptions:
    """Wrap a capability map in the platform-specific Appium options type."""
    return _OPTION_TYPES[platform]().load_capabilities(capabilities)


def create_driver(
    options: TestOptions,
    uploader: Optional[Uploader] = None,
    credentials: Optional[SauceLabsCredentials] = None,
    remote: Optional[Callable[..., Any]] = None,
) -> webdriver.Remote:
    """
    Start an Appium session for the configured apps and return the driver.

    Parameters
    ----------
    options:
        Loaded test options; app files must already be resolved.
    uploader:
        Device cloud uploader. Defaults to a ``SauceLabsUploader`` built from
        the environment when the server is Sauce Labs.
    remote:
        Driver constructor, ``webdriver.Remote`` unless overridden.
    """
    if options.server is Server.SAUCELABS:
        credentials = credentials or SauceLabsCredentials.from_env()
        if uploader is None:
            uploader = SauceLabsUploader(credentials)

    url = server_url(options.server, credentials)
    caps = session_capabilities(options, uploader)
    logger.info("Launching Appium %s driver with the following options: %s", options.platform.value, caps)
    attach_json("appium capabilities", caps)

    factory = remote or webdriver.Remote
    return factory(command_executor=url, options=driver_options(options.platform, caps))
