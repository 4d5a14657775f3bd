"""Application-level utilities (options, environment)."""

from .environment import CIEnvironment, cache_dir, config_path
from .options import AppInfo, Platform, Server, TestOptions, detect_platform
