"""Typed test options: the apps under test, the target platform and the Appium server."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any, Mapping, Optional, Tuple
from urllib.parse import urlparse

from ..exceptions import ConfigurationError
from .environment import CIEnvironment

_URL_DELIMITER = "://"


class Platform(str, Enum):
    ANDROID = "Android"
    IOS = "iOS"


class Server(str, Enum):
    LOCALHOST = "LocalHost"
    SAUCELABS = "SauceLabs"

    @classmethod
    def parse(cls, value: str) -> Server:
        lowered = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        if lowered == "cloudlab":
            return cls.SAUCELABS
        raise ConfigurationError(f"Unknown server '{value}', expected one of: LocalHost, SauceLabs")

    @classmethod
    def default_for(cls, ci: CIEnvironment) -> Server:
        return cls.SAUCELABS if ci.is_ci else cls.LOCALHOST


_PLATFORM_BY_EXTENSION = {
    "apk": Platform.ANDROID,
    "aab": Platform.ANDROID,
    "app": Platform.IOS,
    "ipa": Platform.IOS,
}


def is_url(path: str) -> bool:
    return _URL_DELIMITER in path


def path_basename(path: str) -> str:
    """Return the final path component of a URL or filesystem path."""
    if is_url(path):
        return PurePosixPath(urlparse(path).path).name
    return Path(path).name


def detect_platform(path: str) -> Platform:
    """Map an app path's extension onto the platform it runs on."""
    suffix = PurePosixPath(path_basename(path).replace("\\", "/")).suffix
    extension = suffix[1:].lower()
    try:
        return _PLATFORM_BY_EXTENSION[extension]
    except KeyError:
        raise ConfigurationError(
            f"Unknown app extension '{extension}' in '{path}' - cannot determine platform"
        ) from None


@dataclass(frozen=True, slots=True)
class AppInfo:
    """An app binary under test. ``file`` is filled in once the path has been resolved."""

    name: str
    path: str
    activity: Optional[str] = None
    file: Optional[Path] = None

    @property
    def is_remote(self) -> bool:
        return is_url(self.path)

    def resolved_file(self) -> Path:
        if self.file is None:
            raise ConfigurationError(f"App '{self.name}' has not been resolved to a local file")
        return self.file


@dataclass(frozen=True, slots=True)
class TestOptions:
    """Immutable options for one test process, loaded from the YAML config."""

    __test__ = False

    apps: Tuple[AppInfo, ...]
    platform: Platform
    server: Server
    startup_time_test: Optional[Mapping[str, Any]] = None
    binary_size_test: Optional[Mapping[str, Any]] = None
    config_file: Optional[Path] = None
    ci: CIEnvironment = field(default_factory=CIEnvironment)

    def __post_init__(self) -> None:
        if not self.apps:
            raise ConfigurationError("At least one app must be configured")

    def summary(self) -> dict:
        return {
            "config_file": str(self.config_file) if self.config_file else None,
            "platform": self.platform.value,
            "server": self.server.value,
            "ci": self.ci.is_ci,
            "apps": [
                {
                    "name": app.name,
                    "path": app.path,
                    "activity": app.activity,
                    "file": str(app.file) if app.file else None,
                }
                for app in self.apps
            ],
            "startupTimeTest": dict(self.startup_time_test) if self.startup_time_test is not None else None,
            "binarySizeTest": dict(self.binary_size_test) if self.binary_size_test is not None else None,
        }
