"""Test configuration loading helpers for the mobile performance suite."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping, Optional

import yaml

from ..automation.apps import Downloader, resolve_apps as _resolve_apps
from ..exceptions import ConfigurationError
from .environment import CIEnvironment, config_path as _default_config_path
from .options import AppInfo, Server, TestOptions, detect_platform

logger = logging.getLogger(__name__)

_KNOWN_KEYS = {"apps", "startupTimeTest", "binarySizeTest", "server"}
_APP_KEYS = {"name", "path", "activity"}


def load_test_options(
    config_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
    *,
    resolve_apps: bool = True,
    cache_root: Optional[Path] = None,
    downloader: Optional[Downloader] = None,
) -> TestOptions:
    """
    Load the YAML test configuration into an immutable ``TestOptions``.

    Parameters
    ----------
    config_path:
        Explicit config file. Defaults to ``TEST_CONFIG`` or ``./tests/android.yml``.
    env:
        Environment mapping used for CI detection (defaults to ``os.environ``).
    resolve_apps:
        When true, every app is resolved to a local file before returning.
        Remote apps may be downloaded at this point.
    """

    source_env = os.environ if env is None else env
    path = Path(config_path) if config_path is not None else _default_config_path(source_env)
    data = _read_yaml(path)

    apps = _parse_apps(data.get("apps"), path)
    platform = detect_platform(apps[0].path)
    ci = CIEnvironment.from_env(source_env)
    raw_server = data.get("server")
    server = Server.parse(raw_server) if raw_server is not None else Server.default_for(ci)

    startup_time_test = _get_section(data, "startupTimeTest", path)
    binary_size_test = _get_section(data, "binarySizeTest", path)

    # Relative app paths are joined onto the directory holding the config,
    # not the target of a symlinked config.
    config_dir = path.absolute().parent
    if resolve_apps:
        apps = _resolve_apps(apps, config_dir, cache_root=cache_root, downloader=downloader)

    options = TestOptions(
        apps=tuple(apps),
        platform=platform,
        server=server,
        startup_time_test=startup_time_test,
        binary_size_test=binary_size_test,
        config_file=path.resolve(),
        ci=ci,
    )
    logger.debug("Loaded test options from %s: %s", path, options.summary())
    return options


def _read_yaml(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Test config not found: {path}")
    if path.is_dir():
        raise ConfigurationError(f"Expected a config file but found a directory: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a top-level mapping in {path}")
    unknown = sorted(str(key) for key in data if key not in _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown keys in {path}: {', '.join(unknown)}")
    return data


def _parse_apps(raw: Any, path: Path) -> List[AppInfo]:
    if not isinstance(raw, list) or not raw:
        raise ConfigurationError(f"'apps' must be a non-empty list in {path}")
    apps: List[AppInfo] = []
    for index, entry in enumerate(raw):
        context = f"apps[{index}] in {path}"
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Expected a mapping for {context}")
        unknown = sorted(str(key) for key in entry if key not in _APP_KEYS)
        if unknown:
            raise ConfigurationError(f"Unknown keys in {context}: {', '.join(unknown)}")
        apps.append(
            AppInfo(
                name=_require_str(entry, "name", context),
                path=_require_str(entry, "path", context),
                activity=_optional_str(entry, "activity", context),
            )
        )
    return apps


def _require_str(entry: Mapping[str, Any], key: str, context: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"Missing required string '{key}' in {context}")
    return value


def _optional_str(entry: Mapping[str, Any], key: str, context: str) -> Optional[str]:
    value = entry.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"'{key}' must be a string in {context}")
    return value


def _get_section(data: Mapping[str, Any], key: str, path: Path) -> Optional[Mapping[str, Any]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigurationError(f"'{key}' must be a mapping in {path}")
    return MappingProxyType(dict(value))


_OPTIONS_CACHE: Optional[TestOptions] = None


def get_options() -> TestOptions:
    """
    Return the process-wide ``TestOptions``, loading them on first use.

    Call ``reset_options`` to force a reload, e.g. after changing ``TEST_CONFIG``.
    """
    global _OPTIONS_CACHE
    if _OPTIONS_CACHE is None:
        _OPTIONS_CACHE = load_test_options()
    return _OPTIONS_CACHE


def reset_options() -> None:
    """Clear the cached test options."""
    global _OPTIONS_CACHE
    _OPTIONS_CACHE = None
