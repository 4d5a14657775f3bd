"""
Capability maps for Appium sessions.

The base map depends on the target server (local Appium or Sauce Labs) and
the platform (Android or iOS). The apps under test are delivered through
``appium:otherApps`` in the form each server expects.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union

from ...app.environment import CIEnvironment
from ...app.options import AppInfo, Platform, Server, TestOptions
from ...exceptions import ConfigurationError

logger = logging.getLogger(__name__)

APPIUM_VERSION = "2.0.0"
SESSION_NAME = "Performance tests"
OTHER_APPS = "appium:otherApps"

_AUTOMATION_NAMES = {
    Platform.ANDROID: "UiAutomator2",
    Platform.IOS: "XCUITest",
}

# Device pins used on Sauce Labs: (device name pattern, OS version).
_CLOUD_DEVICES = {
    # Pixel 4 XL - ARM | octa core | 1785 MHz
    Platform.ANDROID: ("Google Pixel 4 XL", "12"),
    # iPhone 12 Pro & iPhone 12 Pro Max | hexa core | 1900 MHz
    Platform.IOS: ("iPhone 12 Pro.*", "14.8"),
}


class Uploader(Protocol):  # pragma: no cover - interface only
    """Anything that can push an app to the device cloud and return its storage id."""

    def upload(self, app: AppInfo) -> str:
        ...


def build_capabilities(
    server: Server,
    platform: Platform,
    ci: CIEnvironment,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Return the base capability map for ``server`` and ``platform``."""

    caps: Dict[str, Any] = {"appium:disableWindowAnimation": True}

    if server is Server.SAUCELABS:
        caps["sauce:options"] = {
            # Appium 2 is required for Android logcat access.
            "appiumVersion": APPIUM_VERSION,
            "name": SESSION_NAME,
            "build": ci.build_label(now),
            "tags": [platform.value.lower(), ci.run_kind],
        }
        # getLog(logcat) fails with "Cannot call non W3C standard command while in W3C mode"
        # unless chromedriver runs outside W3C mode.
        caps["appium:chromeOptions"] = {"w3c": False}

    caps["platformName"] = platform.value
    caps["appium:automationName"] = _AUTOMATION_NAMES[platform]

    if server is Server.SAUCELABS:
        device_name, platform_version = _CLOUD_DEVICES[platform]
        caps["appium:deviceName"] = device_name
        caps["appium:platformVersion"] = platform_version
    # Local iOS runs accept any simulator, so no device is pinned.

    return caps


def other_apps_capability(
    server: Server,
    apps: Iterable[AppInfo],
    uploader: Optional[Uploader] = None,
) -> Union[str, List[str]]:
    """Return the ``appium:otherApps`` value for the apps under test, in order."""

    if server is Server.LOCALHOST:
        paths = []
        for app in apps:
            logger.info("Adding app %s from %s to '%s'", app.name, app.path, OTHER_APPS)
            paths.append(str(app.resolved_file()).replace("\\", "/"))
        # Local Appium expects a JSON array string rather than a list.
        return '["' + '", "'.join(paths) + '"]'

    if uploader is None:
        raise ConfigurationError("An uploader is required to deliver apps to Sauce Labs")
    references = []
    for app in apps:
        reference = f"storage:{uploader.upload(app)}"
        logger.info("Adding app %s from %s to '%s' as '%s'", app.name, app.path, OTHER_APPS, reference)
        references.append(reference)
    return references


def session_capabilities(
    options: TestOptions,
    uploader: Optional[Uploader] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Full capability map for ``options``, apps included."""

    caps = build_capabilities(options.server, options.platform, options.ci, now=now)
    caps[OTHER_APPS] = other_apps_capability(options.server, options.apps, uploader)
    return caps
