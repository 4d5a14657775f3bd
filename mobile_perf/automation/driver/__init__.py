"""Public exports for the Appium session layer."""

from .appium import LOCAL_SERVER_URL, create_driver, driver_options, server_url
from .capabilities import (
    OTHER_APPS,
    Uploader,
    build_capabilities,
    other_apps_capability,
    session_capabilities,
)

__all__ = [
    "LOCAL_SERVER_URL",
    "create_driver",
    "driver_options",
    "server_url",
    "OTHER_APPS",
    "Uploader",
    "build_capabilities",
    "other_apps_capability",
    "session_capabilities",
]
